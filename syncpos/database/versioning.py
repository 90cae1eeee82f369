# syncpos/database/versioning.py
import sqlite3

from ..constants import TABLE_SCHEMA_VERSION

VERSION_TABLE_SQL = f"""
CREATE TABLE IF NOT EXISTS {TABLE_SCHEMA_VERSION}(
    id INTEGER PRIMARY KEY CHECK (id=1),
    version TEXT NOT NULL
)
"""


def get_current_version(conn: sqlite3.Connection) -> str | None:
    row = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name=?;",
        (TABLE_SCHEMA_VERSION,),
    ).fetchone()
    if row is None:
        return None
    row = conn.execute(f"SELECT version FROM {TABLE_SCHEMA_VERSION} WHERE id=1;").fetchone()
    return row[0] if row else None


def set_current_version(conn: sqlite3.Connection, version: str) -> None:
    """Upsert the single version row. The caller owns the transaction."""
    conn.execute(VERSION_TABLE_SQL)
    conn.execute(
        f"INSERT INTO {TABLE_SCHEMA_VERSION}(id, version) VALUES (1, ?) "
        "ON CONFLICT(id) DO UPDATE SET version=excluded.version;",
        (version,),
    )
