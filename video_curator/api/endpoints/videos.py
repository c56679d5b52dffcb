"""
Public API endpoints for the video catalog
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from video_curator.db.database import get_db
from video_curator.schemas.video import VideoSearchParams, VoteUpdate
from video_curator.services.video_service import VideoService

router = APIRouter()


@router.get("")
async def get_videos(
    title: Optional[str] = Query(None, description="Case-insensitive title search"),
    genres: Optional[List[str]] = Query(None, description="Genres, repeated or comma-separated, or All"),
    content_rating: Optional[str] = Query(None, alias="contentRating", description="Minimum content rating"),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="releaseDate, viewCount or title"),
    page: Optional[str] = Query(None, description="Page number, starting at 1"),
    limit: Optional[str] = Query(None, description="Items per page, at most 100"),
    db: AsyncSession = Depends(get_db)
):
    """Get videos with filtering, sorting and pagination"""
    params = VideoSearchParams(
        title=title,
        genres=genres,
        content_rating=content_rating,
        sort_by=sort_by,
        page=page,
        limit=limit,
    )
    result = await VideoService.search_videos(db, params)

    return {
        "success": True,
        "data": [video.to_dict() for video in result["videos"]],
        "pagination": {
            "total": result["total"],
            "page": result["page"],
            "totalPages": result["totalPages"],
            "hasMore": result["hasMore"],
        },
    }


@router.get("/{video_id}")
async def get_video_by_id(
    video_id: UUID,
    db: AsyncSession = Depends(get_db)
):
    """Get a single video"""
    video = await VideoService.get_video(db, video_id)
    return {"success": True, "data": video.to_dict()}


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_video(
    payload: Dict[str, Any] = Body(..., description="Video fields"),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a new video

    Field validation happens in the service so that every failing field
    is reported in one message.
    """
    video = await VideoService.create_video(db, payload)
    return {
        "success": True,
        "message": "Video created successfully",
        "data": video.to_dict(),
    }


@router.patch("/{video_id}/votes")
async def update_votes(
    video_id: UUID,
    vote_update: VoteUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Increase or decrease the up/down vote count"""
    video = await VideoService.update_votes(db, video_id, vote_update.vote, vote_update.change)
    return {
        "success": True,
        "message": "Vote updated successfully",
        "data": video.to_dict(),
    }


@router.patch("/{video_id}/views")
async def update_views(
    video_id: UUID,
    db: AsyncSession = Depends(get_db)
):
    """Record one view"""
    video = await VideoService.increment_views(db, video_id)
    return {
        "success": True,
        "message": "View count updated successfully",
        "data": video.to_dict(),
    }
