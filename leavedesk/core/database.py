from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from leavedesk.core.config import settings


def _engine_kwargs(url: str) -> dict:
    # SQLite uses a single-connection pool that rejects pool sizing options
    if url.startswith("sqlite"):
        return {}
    return {"pool_timeout": settings.DB_POOL_TIMEOUT, "pool_pre_ping": True}


engine = create_async_engine(
    settings.DATABASE_URL, echo=settings.DEBUG, **_engine_kwargs(settings.DATABASE_URL)
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


async def init_db() -> None:
    """Create all tables that do not exist yet.

    Migrations are the normal path; this is for local runs and demos.
    """
    import leavedesk.models  # noqa: F401  register mappers

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
