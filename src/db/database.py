from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from src.db.models import Base


def get_async_engine(db_url: str) -> AsyncEngine:
    """Creates an asynchronous SQLAlchemy engine instance."""
    if db_url.startswith("sqlite"):
        # SQLite does not take pool sizing arguments
        return create_async_engine(db_url, echo=False)
    return create_async_engine(
        db_url,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True,
        pool_recycle=1800,  # 30 minutes
        echo=False,
    )


def get_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    """Creates an asynchronous session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_models(engine: AsyncEngine) -> None:
    """Creates any missing tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
