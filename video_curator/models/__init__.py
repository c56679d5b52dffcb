"""
Database models for the video catalog
"""

from .video import Video, Genre, ContentRating

__all__ = [
    "Video",
    "Genre",
    "ContentRating",
]
