"""
Service layer for the video catalog
"""

from .video_service import VideoService

__all__ = ["VideoService"]
