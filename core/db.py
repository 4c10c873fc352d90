from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any, Iterable, Optional

import streamlit as st

from core.schema import SCHEMA_SQL
from core.utils import iso_now

KEY_PREFIX = "marketpro_"

logger = logging.getLogger(__name__)


def _connect(db_path: Path | str) -> sqlite3.Connection:
    conn = sqlite3.connect(str(db_path), check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


@st.cache_resource
def get_conn(db_path: Path) -> sqlite3.Connection:
    return _connect(db_path)


def ensure_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(SCHEMA_SQL)
    conn.commit()


def q(conn: sqlite3.Connection, sql: str, params: Iterable[Any] = ()) -> list[sqlite3.Row]:
    cur = conn.execute(sql, tuple(params))
    rows = cur.fetchall()
    cur.close()
    return rows


def x(conn: sqlite3.Connection, sql: str, params: Iterable[Any] = ()) -> int:
    cur = conn.execute(sql, tuple(params))
    conn.commit()
    last = cur.lastrowid
    cur.close()
    return int(last or 0)


class KeyValueStorage:
    """
    JSON documents by string key, backed by the `kv` table.

    Keys are namespaced with KEY_PREFIX so several tools can share one file.
    """

    def __init__(self, conn: sqlite3.Connection, *, prefix: str = KEY_PREFIX):
        self.conn = conn
        self.prefix = prefix
        ensure_schema(conn)

    @classmethod
    def open(cls, db_path: Path | str, **kwargs) -> "KeyValueStorage":
        return cls(_connect(db_path), **kwargs)

    def _k(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str, default: Any = None) -> Any:
        rows = q(self.conn, "SELECT value FROM kv WHERE key=?", (self._k(key),))
        if not rows:
            return default
        try:
            return json.loads(rows[0]["value"])
        except ValueError:
            logger.warning("Stored value for %r is not valid JSON; using default", key)
            return default

    def set(self, key: str, value: Any) -> None:
        x(
            self.conn,
            """
            INSERT INTO kv (key, value, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=excluded.updated_at
            """,
            (self._k(key), json.dumps(value, ensure_ascii=False), iso_now()),
        )

    def delete(self, key: str) -> None:
        x(self.conn, "DELETE FROM kv WHERE key=?", (self._k(key),))

    def keys(self) -> list[str]:
        rows = q(self.conn, "SELECT key FROM kv WHERE substr(key, 1, ?)=? ORDER BY key", (len(self.prefix), self.prefix))
        return [str(r["key"])[len(self.prefix):] for r in rows]


def get_storage(db_path: Path, *, prefix: Optional[str] = None) -> KeyValueStorage:
    conn = get_conn(db_path)
    return KeyValueStorage(conn, prefix=prefix or KEY_PREFIX)
