from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Mapping

import mysql.connector

from ..core.constants import (
    DEFAULT_LATE_GRACE_MINUTES,
    DEFAULT_MINIMUM_WORKING_MINUTES,
    SETTING_LATE_GRACE_MINUTES,
    SETTING_MINIMUM_WORKING_MINUTES,
    SETTING_SATURDAY_POLICY,
)
from ..core.enums import SaturdayPolicy
from .connection import DBConfig

DEFAULT_SETTINGS: Mapping[str, str] = {
    SETTING_LATE_GRACE_MINUTES: str(DEFAULT_LATE_GRACE_MINUTES),
    SETTING_MINIMUM_WORKING_MINUTES: str(DEFAULT_MINIMUM_WORKING_MINUTES),
    SETTING_SATURDAY_POLICY: SaturdayPolicy.ALL_WORKING.value,
}


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(
        host=target.host,
        port=target.port,
        user=target.user,
        password=target.password,
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a schema file on ';' outside quotes, dropping '--' comment lines."""
    sql = "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))

    buf: list[str] = []
    quote: str | None = None
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch in ("'", '"'):
            if quote is None:
                quote = ch
            elif quote == ch:
                quote = None
            buf.append(ch)
            continue

        if ch == ";" and quote is None:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8"))

    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def ensure_default_settings(db_config: dict, defaults: Mapping[str, str] = DEFAULT_SETTINGS) -> None:
    """Insert missing attendance settings; existing admin values are kept."""
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        for key, value in defaults.items():
            cur.execute(
                "INSERT IGNORE INTO settings (setting_key, setting_value) VALUES (%s, %s)",
                (key, value),
            )
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
