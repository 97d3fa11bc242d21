from sqlalchemy import create_engine, text
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session, sessionmaker

from bulk_import.core.config import settings

engine = create_async_engine(
    settings.DATABASE_URL,
    echo=False,
    pool_pre_ping=True,
    pool_size=5,
    max_overflow=10,
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def check_connection() -> None:
    """Run a trivial query so startup fails loudly on a bad DATABASE_URL."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))


# ─── Sync session factory (Celery workers are synchronous) ───

def build_sync_session_factory(url: str | None = None) -> sessionmaker[Session]:
    """Build a sync sessionmaker bound to its own engine.

    Workers call this once per process and pass the factory down explicitly.
    """
    sync_engine = create_engine(url or settings.DATABASE_URL_SYNC, pool_pre_ping=True)
    return sessionmaker(bind=sync_engine, expire_on_commit=False)
