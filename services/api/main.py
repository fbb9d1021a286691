from fastapi import FastAPI
from pydantic import BaseModel

from burn_watcher.analytics.metrics import get_summary, recent_burns
from burn_watcher.config import AppSettings
from burn_watcher.db import BurnRecord, init_db, make_session_factory

app = FastAPI(title="Burn Watcher API")
settings = AppSettings()
database_url = settings.database_url or "sqlite+pysqlite:///burns.db"
init_db(database_url)
SessionFactory = make_session_factory(database_url)


class BurnOut(BaseModel):
    id: int
    signature: str
    mint: str
    source: str
    amount: str
    inner: bool
    watch_address: str | None
    detected_at: str

    @classmethod
    def from_model(cls, m: BurnRecord):
        return cls(
            id=m.id,
            signature=m.signature,
            mint=m.mint,
            source=m.source,
            amount=m.amount,
            inner=m.inner,
            watch_address=m.watch_address,
            detected_at=m.detected_at.isoformat(),
        )


@app.get("/health")
def health():
    return {"status": "ok", "watch_address": settings.watch_address}


@app.get("/burns")
def list_burns(limit: int = 50, mint: str | None = None):
    rows = recent_burns(SessionFactory, limit=limit, mint=mint)
    return [BurnOut.from_model(r).model_dump() for r in rows]


@app.get("/summary")
def summary():
    s = get_summary(SessionFactory)
    return s.__dict__
