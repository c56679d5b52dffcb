"""
Video schemas for request validation and query parsing
"""

import re
from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, TypeAdapter, ValidationError, field_validator

from video_curator.core.config import settings
from video_curator.models.video import ContentRating, Genre
from video_curator.utils.date_utils import ensure_utc, utc_now
from video_curator.utils.validation import humanize_field

VIDEO_LINK_PATTERN = re.compile(r"youtube\.com/embed/|player\.vimeo\.com/video/")
ALL_GENRES = "All"

# Date format sent by the upload form, e.g. "15 Jan 2023"
RELEASE_DATE_FORMATS = ("%d %b %Y", "%d %B %Y")

# Largest row offset the database accepts
MAX_OFFSET = 2 ** 63 - 1

_http_url = TypeAdapter(HttpUrl)


class SortField(str, Enum):
    RELEASE_DATE = "releaseDate"
    VIEW_COUNT = "viewCount"
    TITLE = "title"


class VoteType(str, Enum):
    UP_VOTE = "upVote"
    DOWN_VOTE = "downVote"


class VoteChange(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"


def _choices(enum_cls) -> str:
    return ", ".join(member.value for member in enum_cls)


def _require(value: Any, field_name: str) -> Any:
    """Reject null and blank values with the field's "is required" message"""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValueError(f"{humanize_field(field_name)} is required")
    return value


def _member_of(enum_cls, value: Any, message: str):
    try:
        return enum_cls(value)
    except (ValueError, TypeError):
        raise ValueError(message)


class VideoCreate(BaseModel):
    """Schema for creating a video; counters always start at zero"""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    video_link: str = Field(..., alias="videoLink", description="YouTube embed or Vimeo player URL")
    title: str = Field(..., description="Video title, 1-200 characters")
    genre: Genre = Field(..., description="Video genre")
    content_rating: ContentRating = Field(..., alias="contentRating", description="Age rating")
    release_date: datetime = Field(..., alias="releaseDate", description="Release date, not in the future")
    preview_image: str = Field(..., alias="previewImage", description="Preview image URL")

    @field_validator("video_link", "title", "preview_image", mode="before")
    @classmethod
    def check_present(cls, value, info):
        return _require(value, info.field_name)

    @field_validator("video_link")
    @classmethod
    def check_video_link(cls, value: str) -> str:
        if not VIDEO_LINK_PATTERN.search(value):
            raise ValueError("Video link must be a valid YouTube embed or Vimeo player URL")
        return value

    @field_validator("title")
    @classmethod
    def check_title(cls, value: str) -> str:
        if len(value) < 1:
            raise ValueError("Title must be at least 1 character long")
        if len(value) > 200:
            raise ValueError("Title cannot exceed 200 characters")
        return value

    @field_validator("genre", mode="before")
    @classmethod
    def check_genre(cls, value):
        _require(value, "genre")
        return _member_of(Genre, value, f"Genre must be one of: {_choices(Genre)}")

    @field_validator("content_rating", mode="before")
    @classmethod
    def check_content_rating(cls, value):
        _require(value, "content_rating")
        return _member_of(ContentRating, value, f"Content rating must be one of: {_choices(ContentRating)}")

    @field_validator("release_date", mode="before")
    @classmethod
    def parse_release_date(cls, value):
        """Accept "15 Jan 2023" as well as ISO 8601 dates and datetimes"""
        _require(value, "release_date")
        if isinstance(value, str):
            text = value.strip()
            for date_format in RELEASE_DATE_FORMATS:
                try:
                    return datetime.strptime(text, date_format)
                except ValueError:
                    continue
            return text
        return value

    @field_validator("release_date")
    @classmethod
    def check_release_date(cls, value: datetime) -> datetime:
        value = ensure_utc(value)
        if value > utc_now():
            raise ValueError("Release date cannot be in the future")
        return value

    @field_validator("preview_image")
    @classmethod
    def check_preview_image(cls, value: str) -> str:
        try:
            _http_url.validate_python(value)
        except ValidationError:
            raise ValueError("Preview image must be a valid URL")
        return value


class VoteUpdate(BaseModel):
    """Schema for a vote change"""
    vote: VoteType
    change: VoteChange

    @field_validator("vote", mode="before")
    @classmethod
    def check_vote(cls, value):
        return _member_of(VoteType, value, f"Vote must be one of: {_choices(VoteType)}")

    @field_validator("change", mode="before")
    @classmethod
    def check_change(cls, value):
        return _member_of(VoteChange, value, f"Change must be one of: {_choices(VoteChange)}")


def _to_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


class VideoSearchParams(BaseModel):
    """
    Search, filter, sort and paging parameters for the video list.

    Raw query-string values are normalized here and nowhere else:
    unusable values fall back to their defaults and ``limit`` is clamped
    into ``[1, MAX_PAGE_SIZE]``.
    """
    title: Optional[str] = None
    genres: List[str] = Field(default_factory=lambda: [ALL_GENRES])
    content_rating: str = ContentRating.ANYONE.value
    sort_by: SortField = SortField.RELEASE_DATE
    page: int = 1
    limit: int = Field(default_factory=lambda: settings.DEFAULT_PAGE_SIZE)

    @field_validator("title", mode="before")
    @classmethod
    def normalize_title(cls, value):
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("genres", mode="before")
    @classmethod
    def normalize_genres(cls, value):
        if value is None:
            return [ALL_GENRES]
        if isinstance(value, str):
            value = [value]
        # Repeated parameters and comma-separated lists are both accepted
        genres = [
            genre.strip()
            for entry in value
            for genre in str(entry).split(",")
            if genre.strip()
        ]
        return genres or [ALL_GENRES]

    @field_validator("content_rating", mode="before")
    @classmethod
    def normalize_content_rating(cls, value):
        if isinstance(value, ContentRating):
            return value.value
        value = str(value or "").strip()
        if not value:
            return ContentRating.ANYONE.value
        # "12+" arrives as "12 " when the plus sign was not percent-encoded
        if value.isdigit():
            return f"{value}+"
        return value

    @field_validator("sort_by", mode="before")
    @classmethod
    def normalize_sort_by(cls, value):
        try:
            return SortField(value)
        except (ValueError, TypeError):
            return SortField.RELEASE_DATE

    @field_validator("page", mode="before")
    @classmethod
    def normalize_page(cls, value):
        page = _to_int(value)
        if page is None or page < 1:
            return 1
        # Keep the row offset within the database integer range
        return min(page, MAX_OFFSET // settings.MAX_PAGE_SIZE + 1)

    @field_validator("limit", mode="before")
    @classmethod
    def normalize_limit(cls, value):
        limit = _to_int(value)
        if not limit:
            limit = settings.DEFAULT_PAGE_SIZE
        return min(max(limit, 1), settings.MAX_PAGE_SIZE)

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit

    def genre_filter(self) -> Optional[List[str]]:
        """Genres to restrict to, or None when every genre is allowed"""
        if ALL_GENRES in self.genres:
            return None
        return self.genres

    def rating_filter(self) -> Optional[List[ContentRating]]:
        """
        Ratings to restrict to, or None for no restriction.

        A known rating expands to itself and every stricter rating;
        an unknown one falls back to every rating above Anyone.
        """
        rating = ContentRating.parse(self.content_rating)
        if rating is ContentRating.ANYONE:
            return None
        if rating is None:
            return ContentRating.restricted()
        return rating.at_least()
