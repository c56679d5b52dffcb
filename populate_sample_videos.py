"""
Script to seed the catalog with sample videos
Does nothing when the videos table already has rows
"""

import asyncio
import sys
from datetime import datetime, timezone
from pathlib import Path

from sqlalchemy import func, select

# Add the project directory to the path
sys.path.append(str(Path(__file__).parent))

from video_curator.db.database import create_tables, get_db_session
from video_curator.models.video import ContentRating, Genre, Video


SAMPLE_VIDEOS = [
    {
        "video_link": "https://www.youtube.com/embed/dQw4w9WgXcQ",
        "title": "Sample Video 1",
        "genre": Genre.EDUCATION.value,
        "content_rating": ContentRating.ANYONE.value,
        "release_date": datetime(2023, 1, 15, tzinfo=timezone.utc),
        "preview_image": "https://i.ytimg.com/vi/dQw4w9WgXcQ/mqdefault.jpg",
        "up_votes": 10,
        "down_votes": 2,
        "view_count": 150,
    },
    {
        "video_link": "https://www.youtube.com/embed/9bZkp7q19f0",
        "title": "Sample Video 2",
        "genre": Genre.COMEDY.value,
        "content_rating": ContentRating.ANYONE.value,
        "release_date": datetime(2023, 2, 20, tzinfo=timezone.utc),
        "preview_image": "https://i.ytimg.com/vi/9bZkp7q19f0/mqdefault.jpg",
        "up_votes": 25,
        "down_votes": 1,
        "view_count": 300,
    },
]


async def create_sample_videos():
    """Insert the sample videos unless the catalog already has content"""
    async with get_db_session() as db:
        existing = (await db.execute(select(func.count(Video.id)))).scalar()
        if existing:
            print(f"Found {existing} existing videos, skipping")
            return 0

        db.add_all([Video(**data) for data in SAMPLE_VIDEOS])
        await db.commit()
        return len(SAMPLE_VIDEOS)


async def main():
    """Main function to populate sample videos"""
    try:
        print("Creating tables...")
        await create_tables()

        print("Creating sample videos...")
        created = await create_sample_videos()
        print(f"Created {created} videos")

    except Exception as e:
        print(f"Error populating sample videos: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
