import logging

from fastapi import Request
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from app.config import Settings
from app.exceptions import BadConfiguration
from app.migrations import run_migrations, adopt_unowned_notes, count_unowned_notes

Base = declarative_base()
logger = logging.getLogger("burnnote.database")


def build_engine(config: Settings) -> AsyncEngine | None:
    url = config.database_url
    if not url:
        return None
    return create_async_engine(url, echo=config.SQL_ECHO)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db(request: Request):
    session_factory = getattr(request.app.state, "session_factory", None)
    if session_factory is None:
        raise BadConfiguration("Database is not configured")
    async with session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables(engine: AsyncEngine, *, isolate: bool = False, legacy_owner: str | None = None):
    # 导入模型以便注册到 Base.metadata
    import models.notes  # noqa: F401
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        if conn.dialect.name == "sqlite":
            await run_migrations(conn)
        if not isolate:
            return
        if legacy_owner:
            adopted = await adopt_unowned_notes(conn, legacy_owner)
            if adopted:
                logger.info("assigned %s unowned notes to the ADMIN_KEY tenant", adopted)
        else:
            orphans = await count_unowned_notes(conn)
            if orphans:
                logger.warning("%s private notes have no owner; set ADMIN_KEY to assign them", orphans)
