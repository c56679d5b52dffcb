"""
Main API router that includes all endpoint routers
"""

from fastapi import APIRouter
from video_curator.api.endpoints import videos

api_router = APIRouter()

api_router.include_router(videos.router, prefix="/videos", tags=["Videos"])
