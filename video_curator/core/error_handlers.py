"""
Global error handlers for FastAPI application
"""

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from video_curator.core.exceptions import VideoError, create_error_response
from video_curator.utils.validation import format_validation_errors, join_validation_messages

logger = structlog.get_logger()


async def video_error_handler(request: Request, exc: VideoError) -> JSONResponse:
    """
    Handle custom VideoError exceptions

    Args:
        request: FastAPI request object
        exc: VideoError exception

    Returns:
        JSONResponse with error details
    """
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Video error occurred",
        error_type=exc.__class__.__name__,
        message=exc.message,
        status_code=exc.status_code,
        path=request.url.path,
        method=request.method
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=create_error_response(exc)
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """
    Handle HTTPException with standardized response format

    Unmatched routes arrive here as a bare 404 and are reported as
    "Route not found".
    """
    logger.warning(
        "HTTP exception occurred",
        status_code=exc.status_code,
        detail=exc.detail,
        path=request.url.path,
        method=request.method
    )

    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        message = "Route not found"
    else:
        message = str(exc.detail)

    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "message": message,
            "error_type": "HTTPException"
        },
        headers=getattr(exc, "headers", None)
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle request validation errors as a bad request

    All field-level messages are combined into the top-level message.
    """
    errors = exc.errors()
    logger.warning(
        "Validation error occurred",
        errors=[str(error.get("msg")) for error in errors],
        path=request.url.path,
        method=request.method
    )

    content = {
        "success": False,
        "message": join_validation_messages(errors) or "Invalid request parameters",
        "error_type": "ValidationError",
        "details": {
            "validation_errors": format_validation_errors(errors)
        }
    }

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=content
    )


async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Handle SQLAlchemy errors that escaped the service layer"""
    logger.error(
        "Database error occurred",
        error_type=exc.__class__.__name__,
        error_message=str(exc),
        path=request.url.path,
        method=request.method
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "message": "Database operation failed",
            "error_type": "DatabaseError"
        }
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without leaking internal detail"""
    logger.error(
        "Unexpected error occurred",
        error_type=exc.__class__.__name__,
        error_message=str(exc),
        path=request.url.path,
        method=request.method,
        exc_info=True
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "message": "An unexpected error occurred. Please try again later.",
            "error_type": "InternalServerError"
        }
    )


def register_error_handlers(app):
    """
    Register all error handlers with the FastAPI application

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(VideoError, video_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)
