"""
Pydantic schemas for request validation and query parsing
"""

from .video import (
    SortField,
    VideoCreate,
    VideoSearchParams,
    VoteChange,
    VoteType,
)

__all__ = [
    "SortField",
    "VideoCreate",
    "VideoSearchParams",
    "VoteChange",
    "VoteType",
]
