"""Member score persistence.

Upload batches write through `upsert_scores`; exports and the server read
through `list_entries` and `list_scores`.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from sqlalchemy import func, select

from .core.models import MemberScoreEntry
from .db import get_session_factory
from .sqlmodels import ImportMeta, MemberScoreRecord

logger = logging.getLogger(__name__)


async def upsert_scores(entries: Iterable[MemberScoreEntry]) -> int:
    """Insert or update scores by email. The last entry for an email wins.

    Returns the number of distinct members written.
    """
    latest = {e.email: e for e in entries}
    if not latest:
        return 0

    session_factory = get_session_factory()
    now = datetime.utcnow()

    async with session_factory() as session:
        result = await session.execute(
            select(MemberScoreRecord).where(MemberScoreRecord.email.in_(list(latest)))
        )
        existing = {r.email: r for r in result.scalars().all()}

        for email, entry in latest.items():
            row = existing.get(email)
            if row:
                row.score = entry.score
                row.updated_at = now
            else:
                session.add(MemberScoreRecord(
                    email=email,
                    score=entry.score,
                    created_at=now,
                    updated_at=now,
                ))

        await session.commit()

    logger.debug("Stored %d score(s), %d new", len(latest), len(latest) - len(existing))
    return len(latest)


async def list_entries() -> list[MemberScoreEntry]:
    """All stored scores ordered by email."""
    session_factory = get_session_factory()
    async with session_factory() as session:
        result = await session.execute(
            select(MemberScoreRecord).order_by(MemberScoreRecord.email.asc())
        )
        rows = result.scalars().all()

    return [MemberScoreEntry(email=r.email, score=r.score, updated_at=r.updated_at) for r in rows]


async def list_scores(limit: int = 100, offset: int = 0) -> list[dict]:
    """Stored scores as dicts, highest score first."""
    session_factory = get_session_factory()
    async with session_factory() as session:
        result = await session.execute(
            select(MemberScoreRecord)
            .order_by(MemberScoreRecord.score.desc(), MemberScoreRecord.email.asc())
            .limit(limit)
            .offset(offset)
        )
        rows = result.scalars().all()

    return [
        {
            "email": r.email,
            "score": r.score,
            "updated_at": r.updated_at.isoformat(),
        }
        for r in rows
    ]


async def get_score(email: str) -> Optional[float]:
    session_factory = get_session_factory()
    async with session_factory() as session:
        result = await session.execute(
            select(MemberScoreRecord.score).where(MemberScoreRecord.email == email.strip().lower())
        )
        return result.scalar_one_or_none()


async def count_scores() -> int:
    session_factory = get_session_factory()
    async with session_factory() as session:
        result = await session.execute(select(func.count()).select_from(MemberScoreRecord))
        return result.scalar_one()


async def set_meta(key: str, value: str) -> None:
    session_factory = get_session_factory()
    async with session_factory() as session:
        result = await session.execute(select(ImportMeta).where(ImportMeta.key == key))
        row = result.scalar_one_or_none()
        if row:
            row.value = value
            row.updated_at = datetime.utcnow()
        else:
            session.add(ImportMeta(key=key, value=value, updated_at=datetime.utcnow()))
        await session.commit()


async def get_meta(key: str) -> Optional[str]:
    session_factory = get_session_factory()
    async with session_factory() as session:
        result = await session.execute(select(ImportMeta.value).where(ImportMeta.key == key))
        return result.scalar_one_or_none()
