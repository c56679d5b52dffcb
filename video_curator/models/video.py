"""
Video model and its closed vocabularies (genre, content rating)

Database Schema:
- Primary key: UUID assigned on insert
- Catalog fields: link, title, genre, content rating, release date, preview image
- Counters: up votes, down votes, view count (never negative)
- Timestamps: created_at / updated_at maintained by the database
"""

from sqlalchemy import Column, String, Integer, DateTime, Index, CheckConstraint, Uuid
from sqlalchemy.sql import func
from typing import List, Optional
from uuid import uuid4
import enum

from video_curator.db.database import Base
from video_curator.utils.date_utils import to_iso


class Genre(str, enum.Enum):
    EDUCATION = "Education"
    SPORTS = "Sports"
    MOVIES = "Movies"
    COMEDY = "Comedy"
    LIFESTYLE = "Lifestyle"


class ContentRating(str, enum.Enum):
    """
    Age-appropriateness rating.

    Members are declared from least to most strict and compare by that
    order rather than as strings, so ``ContentRating.SEVEN_PLUS <
    ContentRating.TWELVE_PLUS`` holds.
    """
    ANYONE = "Anyone"
    SEVEN_PLUS = "7+"
    TWELVE_PLUS = "12+"
    SIXTEEN_PLUS = "16+"
    EIGHTEEN_PLUS = "18+"

    @property
    def rank(self) -> int:
        return list(type(self)).index(self)

    def __lt__(self, other):
        if not isinstance(other, ContentRating):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, ContentRating):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, ContentRating):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, ContentRating):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["ContentRating"]:
        """Return the rating named by ``value``, or None if it is not one"""
        try:
            return cls(value)
        except ValueError:
            return None

    @classmethod
    def restricted(cls) -> List["ContentRating"]:
        """Every rating stricter than Anyone"""
        return [rating for rating in cls if rating > cls.ANYONE]

    def at_least(self) -> List["ContentRating"]:
        """This rating and every stricter one, in order"""
        return [rating for rating in type(self) if rating >= self]


class Video(Base):
    """A catalogued video hosted on YouTube or Vimeo"""
    __tablename__ = "videos"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)

    # Catalog fields
    video_link = Column(String(2000), nullable=False)
    title = Column(String(200), nullable=False)
    genre = Column(String(50), nullable=False)
    content_rating = Column(String(10), nullable=False)
    release_date = Column(DateTime(timezone=True), nullable=False)
    preview_image = Column(String(2000), nullable=False)

    # Counters, only changed through atomic increments
    up_votes = Column(Integer, default=0, server_default="0", nullable=False)
    down_votes = Column(Integer, default=0, server_default="0", nullable=False)
    view_count = Column(Integer, default=0, server_default="0", nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("up_votes >= 0", name="up_votes_non_negative"),
        CheckConstraint("down_votes >= 0", name="down_votes_non_negative"),
        CheckConstraint("view_count >= 0", name="view_count_non_negative"),
        Index("ix_videos_genre", "genre"),
        Index("ix_videos_content_rating", "content_rating"),
        Index("ix_videos_release_date", "release_date"),
        Index("ix_videos_view_count", "view_count"),
        Index("ix_videos_up_votes", "up_votes"),
        Index("ix_videos_genre_content_rating", "genre", "content_rating"),
        Index("ix_videos_genre_release_date", "genre", "release_date"),
        Index("ix_videos_content_rating_release_date", "content_rating", "release_date"),
    )

    @property
    def total_votes(self) -> int:
        return (self.up_votes or 0) + (self.down_votes or 0)

    @property
    def vote_ratio(self) -> float:
        """Share of up votes as a percentage, 0 when nobody has voted"""
        if self.total_votes == 0:
            return 0
        return self.up_votes / self.total_votes * 100

    def __repr__(self):
        return f"<Video(id={self.id}, title='{self.title[:50]}', rating={self.content_rating})>"

    def to_dict(self):
        """
        Convert model instance to the camelCase JSON shape clients consume.

        ``_id`` mirrors ``id`` for clients that address videos by ``_id``.
        """
        video_id = str(self.id)
        return {
            '_id': video_id,
            'id': video_id,
            'videoLink': self.video_link,
            'title': self.title,
            'genre': self.genre,
            'contentRating': self.content_rating,
            'releaseDate': to_iso(self.release_date),
            'previewImage': self.preview_image,
            'votes': {
                'upVotes': self.up_votes,
                'downVotes': self.down_votes,
            },
            'viewCount': self.view_count,
            'totalVotes': self.total_votes,
            'voteRatio': self.vote_ratio,
            'createdAt': to_iso(self.created_at),
            'updatedAt': to_iso(self.updated_at),
        }
