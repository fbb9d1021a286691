from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import func, select

from burn_watcher.db import BurnRecord, session_scope


@dataclass
class Summary:
    total_burns: int
    distinct_mints: int
    inner: int
    top_level: int
    latest_signature: str | None


def get_summary(SessionFactory) -> Summary:
    with session_scope(SessionFactory) as s:
        total = s.scalar(select(func.count()).select_from(BurnRecord)) or 0
        mints = s.scalar(select(func.count(func.distinct(BurnRecord.mint)))) or 0
        inner = s.scalar(select(func.count()).select_from(BurnRecord).where(BurnRecord.inner.is_(True))) or 0
        latest = s.scalar(select(BurnRecord.signature).order_by(BurnRecord.id.desc()).limit(1))
        return Summary(
            total_burns=total,
            distinct_mints=mints,
            inner=inner,
            top_level=total - inner,
            latest_signature=latest,
        )


def recent_burns(SessionFactory, limit: int = 50, mint: str | None = None) -> list[BurnRecord]:
    with session_scope(SessionFactory) as s:
        q = select(BurnRecord).order_by(BurnRecord.id.desc()).limit(limit)
        if mint:
            q = q.where(BurnRecord.mint == mint)
        return list(s.execute(q).scalars().all())
