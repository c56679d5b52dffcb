"""
Video service layer - search, lookup, creation and counter updates

Counter updates are single UPDATE statements (``col = col + 1``) so that
concurrent requests against the same video never lose an increment.
"""

import math
from typing import Any, Dict, List
from uuid import UUID

import structlog
from pydantic import ValidationError
from sqlalchemy import Select, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from video_curator.core.exceptions import (
    BadRequestError,
    InternalServerError,
    VideoError,
    VideoNotFoundError,
)
from video_curator.models.video import Video
from video_curator.schemas.video import (
    SortField,
    VideoCreate,
    VideoSearchParams,
    VoteChange,
    VoteType,
)
from video_curator.utils.validation import join_validation_messages

logger = structlog.get_logger()

SORT_ORDERS = {
    SortField.RELEASE_DATE: (Video.release_date.desc(),),
    SortField.VIEW_COUNT: (Video.view_count.desc(),),
    SortField.TITLE: (Video.title.asc(),),
}

VOTE_COLUMNS = {
    VoteType.UP_VOTE: Video.up_votes,
    VoteType.DOWN_VOTE: Video.down_votes,
}


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_filters(params: VideoSearchParams) -> List[Any]:
    """Translate search parameters into WHERE conditions"""
    conditions = []

    if params.title:
        conditions.append(Video.title.ilike(f"%{_escape_like(params.title)}%", escape="\\"))

    genres = params.genre_filter()
    if genres is not None:
        conditions.append(Video.genre.in_(genres))

    ratings = params.rating_filter()
    if ratings is not None:
        conditions.append(Video.content_rating.in_([rating.value for rating in ratings]))

    return conditions


def sort_order(sort_by: SortField) -> tuple:
    """ORDER BY clauses for a sort field, with id as a stable tie-breaker"""
    return SORT_ORDERS.get(sort_by, SORT_ORDERS[SortField.RELEASE_DATE]) + (Video.id.asc(),)


def build_search_query(params: VideoSearchParams) -> Select:
    """Paged, sorted SELECT for the given search parameters"""
    return (
        select(Video)
        .where(*build_filters(params))
        .order_by(*sort_order(params.sort_by))
        .offset(params.skip)
        .limit(params.limit)
    )


def build_count_query(params: VideoSearchParams) -> Select:
    """COUNT over the same filters, ignoring paging"""
    return select(func.count(Video.id)).where(*build_filters(params))


def paginate(total: int, params: VideoSearchParams, returned: int) -> Dict[str, Any]:
    return {
        "total": total,
        "page": params.page,
        "totalPages": math.ceil(total / params.limit),
        "hasMore": params.skip + returned < total,
    }


class VideoService:
    """Service for video operations"""

    @staticmethod
    async def search_videos(db: AsyncSession, params: VideoSearchParams) -> Dict[str, Any]:
        """
        Search, filter, sort and paginate videos

        Returns:
            Dict with ``videos`` (the page) plus ``total``, ``page``,
            ``totalPages`` and ``hasMore``
        """
        logger.info(
            "Searching videos",
            title=params.title,
            genres=params.genres,
            content_rating=params.content_rating,
            sort_by=params.sort_by.value,
            page=params.page,
            limit=params.limit
        )
        try:
            total = (await db.execute(build_count_query(params))).scalar() or 0
            videos = []
            if params.skip < total:
                result = await db.execute(build_search_query(params))
                videos = list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error("Error searching videos", error=str(e))
            raise InternalServerError("Error searching videos", operation="search")

        return {"videos": videos, **paginate(total, params, len(videos))}

    @staticmethod
    async def get_video(db: AsyncSession, video_id: UUID) -> Video:
        """Fetch one video, raising VideoNotFoundError when it does not exist"""
        try:
            result = await db.execute(
                select(Video)
                .where(Video.id == video_id)
                .execution_options(populate_existing=True)
            )
            video = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error("Error fetching video", video_id=str(video_id), error=str(e))
            raise InternalServerError("Error fetching video", operation="get")

        if video is None:
            raise VideoNotFoundError(video_id)
        return video

    @staticmethod
    async def create_video(db: AsyncSession, payload: Dict[str, Any]) -> Video:
        """
        Validate and store a new video

        All field-level validation messages are joined into a single
        BadRequestError; nothing is written when validation fails.
        """
        try:
            video_data = VideoCreate.model_validate(payload)
        except ValidationError as e:
            message = join_validation_messages(e.errors())
            logger.warning("Video validation failed", message=message)
            raise BadRequestError(message)

        video = Video(
            video_link=video_data.video_link,
            title=video_data.title,
            genre=video_data.genre.value,
            content_rating=video_data.content_rating.value,
            release_date=video_data.release_date,
            preview_image=video_data.preview_image,
            up_votes=0,
            down_votes=0,
            view_count=0,
        )
        try:
            db.add(video)
            await db.commit()
            await db.refresh(video)
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Error creating video", title=video_data.title, error=str(e))
            raise InternalServerError("Error creating video", operation="create")

        logger.info("Video created", video_id=str(video.id), title=video.title)
        return video

    @staticmethod
    async def update_votes(
        db: AsyncSession,
        video_id: UUID,
        vote: VoteType,
        change: VoteChange
    ) -> Video:
        """
        Add or remove one up/down vote

        A decrease only matches rows whose counter is above zero, so a
        counter at zero is left untouched and reported as a bad request.
        """
        column = VOTE_COLUMNS[vote]
        counter_name = "upVotes" if vote == VoteType.UP_VOTE else "downVotes"
        statement = update(Video).where(Video.id == video_id)
        if change == VoteChange.DECREASE:
            statement = statement.where(column > 0).values({column: column - 1})
        else:
            statement = statement.values({column: column + 1})

        try:
            result = await db.execute(statement.execution_options(synchronize_session=False))
            if result.rowcount == 0:
                await db.rollback()
                if await db.get(Video, video_id) is None:
                    raise VideoNotFoundError(video_id)
                raise BadRequestError(f"Cannot decrease {counter_name} below 0", field="vote", value=vote.value)
            await db.commit()
        except VideoError:
            raise
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Error updating votes", video_id=str(video_id), error=str(e))
            raise InternalServerError("Error updating votes", operation="votes")

        logger.info("Votes updated", video_id=str(video_id), vote=vote.value, change=change.value)
        return await VideoService.get_video(db, video_id)

    @staticmethod
    async def increment_views(db: AsyncSession, video_id: UUID) -> Video:
        """Add one view; every call counts"""
        statement = (
            update(Video)
            .where(Video.id == video_id)
            .values({Video.view_count: Video.view_count + 1})
            .execution_options(synchronize_session=False)
        )
        try:
            result = await db.execute(statement)
            if result.rowcount == 0:
                await db.rollback()
                raise VideoNotFoundError(video_id)
            await db.commit()
        except VideoError:
            raise
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error("Error updating view count", video_id=str(video_id), error=str(e))
            raise InternalServerError("Error updating view count", operation="views")

        logger.info("View recorded", video_id=str(video_id))
        return await VideoService.get_video(db, video_id)
