# src/history_excerptor/db/engine.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine

from history_excerptor.config.settings import get_settings


@dataclass(frozen=True)
class DBPingResult:
    ok: bool
    detail: str


def build_engine(db_url: Optional[str] = None) -> Engine:
    """
    Build a SQLAlchemy Engine.

    db_url override is for tests (temp DuckDB files); everything else
    uses the configured registry URL.
    """
    url = db_url or get_settings().db_url
    if url.startswith("postgresql"):
        return create_engine(url, future=True, pool_pre_ping=True)
    return create_engine(url, future=True)


def ping_db(engine: Engine) -> DBPingResult:
    """
    Lightweight DB connectivity check.
    Never raises; the CLI reports the detail.
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("select 1")).scalar_one()
        return DBPingResult(ok=True, detail="ok")
    except Exception as e:
        return DBPingResult(ok=False, detail=f"{type(e).__name__}: {e}")
