from __future__ import annotations

from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, List, Optional, Sequence

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection, one transaction.

    Everything executed inside the block is committed together when it exits
    cleanly and rolled back as a whole otherwise. Backfill batches rely on this.
    """

    conn = conn_factory.connect()
    cur = None
    try:
        cur = conn.cursor(dictionary=dictionary)
        yield conn, cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        if cur is not None:
            cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def in_clause(values: Sequence[Any]) -> str:
    """Placeholder list for ``IN (...)``; callers pass the values as params."""
    return ", ".join(["%s"] * len(values))


def _time_from_seconds(total_seconds: int) -> time:
    total_seconds %= 86400
    return time(total_seconds // 3600, (total_seconds % 3600) // 60, total_seconds % 60)


def normalize_mysql_time(value: Any) -> Optional[time]:
    """TIME columns arrive as ``time``, ``timedelta`` or "HH:MM[:SS]" depending on the connector."""
    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        return _time_from_seconds(int(value.total_seconds()))
    if isinstance(value, str):
        parts = [int(p) for p in value.strip().split(":") if p != ""]
        if len(parts) < 2:
            raise ValueError(f"Invalid time string: {value!r}")
        hours, minutes, seconds = (parts + [0])[:3]
        return _time_from_seconds(hours * 3600 + minutes * 60 + seconds)
    raise TypeError(f"Unsupported MySQL TIME value type: {type(value)!r}")
