"""Database engine for job workers."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from earnhub.config.settings import settings


def create_task_engine():
    """
    Create an engine for jobs.

    Each actor call runs in its own event loop, so connections are not
    pooled across calls.
    """
    return create_async_engine(
        settings.database_url,
        echo=False,
        poolclass=NullPool,
    )


def create_task_session_maker(engine=None):
    """Create a session maker for jobs."""
    if engine is None:
        engine = create_task_engine()
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


task_engine = create_task_engine()
task_session_maker = create_task_session_maker(task_engine)
