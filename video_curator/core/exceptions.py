"""
Custom exception classes for video operations and global error handling
"""

from typing import Optional, Dict, Any
from fastapi import status


class VideoError(Exception):
    """Base exception for video-related errors"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class BadRequestError(VideoError):
    """Exception raised when the request input is invalid"""

    def __init__(self, message: str, field: str = None, value: Any = None):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)

        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


class VideoNotFoundError(VideoError):
    """Exception raised when a video does not exist"""

    def __init__(self, video_id: str = None):
        super().__init__(
            message="Video not found",
            status_code=status.HTTP_404_NOT_FOUND,
            details={"video_id": str(video_id)} if video_id else None
        )


class InternalServerError(VideoError):
    """Exception raised when a storage operation fails.

    The message is user-facing and never carries the underlying error.
    """

    def __init__(self, message: str, operation: str = None):
        details = {}
        if operation:
            details["operation"] = operation

        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details
        )


def create_error_response(error: VideoError) -> dict:
    """
    Create a standardized error response from VideoError

    Args:
        error: VideoError instance

    Returns:
        Dictionary with error details in standardized format
    """
    response = {
        "success": False,
        "message": error.message,
        "error_type": error.__class__.__name__
    }

    if error.details:
        response["details"] = error.details

    return response
