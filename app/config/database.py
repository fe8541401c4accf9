"""
Database engine and session factories.

The engine is created from DATABASE_URL; SQLite URLs get a single shared
connection so in-memory databases survive across sessions. Worker tasks
use ``task_session_maker``, whose engine never pools connections: each
dramatiq worker thread runs its own event loop and a pooled connection
must not cross loops.
"""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool, StaticPool

from app.config.settings import settings


def _engine_options(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        return {
            "connect_args": {"check_same_thread": False},
            "poolclass": StaticPool,
        }
    return {"pool_size": 10, "max_overflow": 20, "pool_pre_ping": True}


def _session_maker(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async_engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
    **_engine_options(settings.database_url),
)

async_session_maker = _session_maker(async_engine)

task_engine = create_async_engine(settings.database_url, poolclass=NullPool)

task_session_maker = _session_maker(task_engine)
