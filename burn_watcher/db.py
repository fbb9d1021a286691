from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from typing import Generator

from sqlalchemy import Boolean, DateTime, String, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker


class Base(DeclarativeBase):
    pass


class BurnRecord(Base):
    __tablename__ = "burn_events"

    id: Mapped[int] = mapped_column(primary_key=True)
    signature: Mapped[str] = mapped_column(String(96), index=True, unique=True)
    mint: Mapped[str] = mapped_column(String(64), index=True)
    source: Mapped[str] = mapped_column(String(64))
    amount: Mapped[str] = mapped_column(String(80))  # base units, kept as text
    inner: Mapped[bool] = mapped_column("is_inner", Boolean, default=False)
    watch_address: Mapped[str | None] = mapped_column(String(64), index=True)
    detected_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


def make_engine(database_url: str):
    return create_engine(database_url, pool_pre_ping=True, future=True)


def make_session_factory(database_url: str):
    engine = make_engine(database_url)
    return sessionmaker(bind=engine, expire_on_commit=False, class_=Session)


def init_db(database_url: str) -> None:
    Base.metadata.create_all(make_engine(database_url))


@contextmanager
def session_scope(SessionFactory) -> Generator[Session, None, None]:
    session: Session = SessionFactory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
