"""Score database lifecycle.

One `ScoreDatabase` per process, built from `PluginSettings` when the host
starts: the SQLite file lives at ``<data_dir>/member-score.db`` and the
location is fixed for the life of the engine. WAL mode lets exports read
while an upload batch is writing.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from .config import PluginSettings, load_settings

logger = logging.getLogger(__name__)

DB_FILENAME = "member-score.db"

SQLITE_PRAGMAS = (
    ("journal_mode", "WAL"),
    ("synchronous", "NORMAL"),
    ("busy_timeout", "5000"),
)


def _apply_pragmas(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    for name, value in SQLITE_PRAGMAS:
        cursor.execute(f"PRAGMA {name}={value}")
    cursor.close()


class ScoreDatabase:
    """Engine and session factory for one data directory."""

    def __init__(self, settings: PluginSettings):
        self.path: Path = settings.data_dir / DB_FILENAME
        self._engine: Optional[AsyncEngine] = None
        self._sessions: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def url(self) -> str:
        return f"sqlite+aiosqlite:///{self.path}"

    @property
    def is_open(self) -> bool:
        return self._engine is not None

    def sessions(self) -> async_sessionmaker[AsyncSession]:
        """The session factory, opening the engine on first use."""
        if self._sessions is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._engine = create_async_engine(self.url, echo=False)
            event.listen(self._engine.sync_engine, "connect", _apply_pragmas)
            self._sessions = async_sessionmaker(self._engine, expire_on_commit=False)
        return self._sessions

    async def create_schema(self) -> None:
        from .sqlmodels import Base

        self.sessions()
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Score database ready at %s", self.path)

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._sessions = None


_database: Optional[ScoreDatabase] = None


def get_database() -> ScoreDatabase:
    """The process database; built from the environment if `init_db` was not called."""
    global _database
    if _database is None:
        _database = ScoreDatabase(load_settings())
    return _database


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return get_database().sessions()


async def init_db(settings: Optional[PluginSettings] = None) -> ScoreDatabase:
    """Open the database for `settings` and create missing tables."""
    global _database
    if _database is not None:
        await _database.dispose()
    _database = ScoreDatabase(settings or load_settings())
    await _database.create_schema()
    return _database


async def close_db() -> None:
    global _database
    if _database is not None:
        await _database.dispose()
        _database = None
