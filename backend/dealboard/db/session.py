"""Process-wide async engine and session factory."""

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from dealboard.config import settings


def build_engine() -> AsyncEngine:
    """Create the engine; pool tuning only applies to server databases."""
    if settings.is_sqlite:
        return create_async_engine(settings.DATABASE_URL, echo=settings.sql_echo)
    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.sql_echo,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_POOL_SIZE // 2,
        pool_pre_ping=True,
    )


engine = build_engine()

# Objects stay readable after commit; response schemas read them afterwards.
async_session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
