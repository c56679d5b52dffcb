"""
Test configuration and fixtures
"""

import os

# The application engine is built at import time; keep it off PostgreSQL
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from video_curator.main import app
from video_curator.db.database import Base, get_db
from video_curator.models.video import Video, Genre, ContentRating


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
async def test_engine():
    """Create test database engine"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def test_db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session"""
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(test_db: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database dependency override"""
    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://localhost") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def video_payload():
    """A valid creation payload in the client's camelCase shape"""
    return {
        "videoLink": "youtube.com/embed/dQw4w9WgXcQ",
        "title": "Sample Video",
        "genre": "Education",
        "contentRating": "Anyone",
        "releaseDate": "2023-01-15T00:00:00Z",
        "previewImage": "https://i.ytimg.com/vi/dQw4w9WgXcQ/mqdefault.jpg",
    }


@pytest.fixture
def make_video(test_db: AsyncSession):
    """Factory inserting a video row directly"""
    counter = {"n": 0}

    async def _make_video(**overrides) -> Video:
        counter["n"] += 1
        fields = {
            "video_link": f"youtube.com/embed/video{counter['n']}",
            "title": f"Video {counter['n']}",
            "genre": Genre.EDUCATION.value,
            "content_rating": ContentRating.ANYONE.value,
            "release_date": datetime(2023, 1, 1, tzinfo=timezone.utc) + timedelta(days=counter["n"]),
            "preview_image": f"https://i.ytimg.com/vi/video{counter['n']}/mqdefault.jpg",
            "up_votes": 0,
            "down_votes": 0,
            "view_count": 0,
        }
        fields.update(overrides)
        video = Video(**fields)
        test_db.add(video)
        await test_db.commit()
        await test_db.refresh(video)
        return video

    return _make_video


@pytest.fixture
async def test_video(make_video) -> Video:
    """Create a single test video"""
    return await make_video(title="Test Video")
