#!/usr/bin/env python3
"""
Video Curator API Server
========================

HOW TO START THE SERVER:
=======================

1. Install the project: pip install -e .
2. Point DATABASE_URL at PostgreSQL (or set it in .env)
3. Start the server: python3 start_server.py

The server will be available at:
- Main API: http://127.0.0.1:8082/v1/videos
- Health: http://127.0.0.1:8082/health
- API Docs: http://127.0.0.1:8082/docs
"""

import sys
import uvicorn

from video_curator.core.config import settings

if __name__ == "__main__":
    print("=" * 60)
    print("VIDEO CURATOR API SERVER")
    print("=" * 60)
    print(f"Environment: {settings.ENVIRONMENT}")
    print(f"Server will be available at: http://{settings.HOST}:{settings.PORT}")
    print(f"API: http://{settings.HOST}:{settings.PORT}{settings.API_V1_PREFIX}/videos")
    print(f"API Documentation: http://{settings.HOST}:{settings.PORT}/docs")
    print("=" * 60)
    print("Press Ctrl+C to stop the server")
    print("=" * 60)
    print("")

    try:
        uvicorn.run(
            "video_curator.main:app",
            host=settings.HOST,
            port=settings.PORT,
            log_level=settings.LOG_LEVEL.lower(),
            access_log=False,
            reload=settings.ENVIRONMENT == "development",
            timeout_keep_alive=75
        )
    except KeyboardInterrupt:
        print("\nServer stopped by user")
    except Exception as e:
        print(f"\nServer error: {e}")
        sys.exit(1)
