"""
Database configuration and connection management
"""

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from sqlalchemy import MetaData
from sqlalchemy.exc import SQLAlchemyError
from contextlib import asynccontextmanager
import structlog

from video_curator.core.config import settings

logger = structlog.get_logger()


def _engine_options(database_url: str) -> dict:
    """Pool options per backend; SQLite manages its own pool"""
    options = {
        "echo": settings.DATABASE_ECHO,
        "future": True,
    }
    if not database_url.startswith("sqlite"):
        options.update(
            pool_pre_ping=True,
            pool_recycle=300,
            pool_size=5,
            max_overflow=5,
            pool_timeout=30,  # Seconds to wait before giving up on getting a connection
        )
    return options


# Create async engine
engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

# Create async session factory
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

# Create declarative base with naming convention for constraints
metadata = MetaData(naming_convention={
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
})

Base = declarative_base(metadata=metadata)


async def create_tables():
    """Create all database tables that do not exist yet"""
    # Import models so they are registered on the metadata
    from video_curator.models import video  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables ensured", tables=sorted(Base.metadata.tables))


async def dispose_engine():
    await engine.dispose()
    logger.info("Database engine disposed")


async def get_db():
    """Database session dependency for FastAPI"""
    async with async_session_factory() as session:
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"Database session error: {e}")
            raise
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@asynccontextmanager
async def get_db_session():
    """Get database session outside of a request, e.g. in scripts"""
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
