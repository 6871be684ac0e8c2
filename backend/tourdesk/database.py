from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from tourdesk.config import settings

# SQLite connections are bound to the event loop that opened them
_engine_options = {"poolclass": NullPool} if settings.database_url.startswith("sqlite") else {"pool_pre_ping": True}

engine = create_async_engine(settings.database_url, **_engine_options)
async_session_factory = async_sessionmaker(engine, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


async def get_db() -> AsyncIterator[AsyncSession]:
    async with async_session_factory() as session:
        yield session


async def create_tables() -> None:
    # Import models so every table is registered on Base.metadata
    import tourdesk.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
