# syncpos/database/__init__.py
from __future__ import annotations

import logging
import sqlite3
import threading
from dataclasses import dataclass, field
from pathlib import Path

from . import schema as schema_module
from .schema import CleanupFailure, SchemaFailure, StoreError

_log = logging.getLogger(__name__)


@dataclass
class InitReport:
    """Outcome of LocalStore.initialize(); failures are recorded, not raised."""
    schema_ok: bool = False
    repair_ok: bool = False
    rows_repaired: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return not (self.schema_ok and self.repair_ok)


class LocalStore:
    """
    Handle on one local store file.

    Construct once at startup and pass it to whatever needs connections.
    initialize() applies the schema and the legacy repair exactly once per
    handle; concurrent callers block until the first run finishes and then
    receive its report.
    """

    def __init__(self, db_path: Path | str):
        self.db_path = Path(db_path)
        self._init_lock = threading.Lock()
        self._report: InitReport | None = None

    @property
    def initialized(self) -> bool:
        return self._report is not None

    def connect(self) -> sqlite3.Connection:
        """
        Returns a sqlite3.Connection with:
          - WAL mode
          - foreign_keys ON
          - row_factory = sqlite3.Row
        """
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.execute("PRAGMA journal_mode = WAL;")
        return conn

    def initialize(self) -> InitReport:
        with self._init_lock:
            if self._report is None:
                self._report = self._run_initialization()
            return self._report

    def _run_initialization(self) -> InitReport:
        report = InitReport()
        try:
            conn = self.connect()
        except sqlite3.Error as e:
            _log.error("Cannot open local store %s: %s", self.db_path, e)
            report.errors.append(f"Cannot open local store: {e}")
            return report

        try:
            _log.info("Creating/verifying tables in %s", self.db_path)
            try:
                schema_module.ensure_schema(conn)
                report.schema_ok = True
            except SchemaFailure as e:
                _log.exception("Database initialization failed")
                report.errors.append(str(e))
                return report

            _log.info("Performing data cleanup/migration...")
            try:
                report.rows_repaired = schema_module.repair_legacy_data(conn)
                report.repair_ok = True
                _log.info("Data cleanup completed (%d rows).", report.rows_repaired)
            except CleanupFailure as e:
                _log.exception("Data cleanup failed")
                report.errors.append(str(e))
            return report
        finally:
            conn.close()


__all__ = [
    "LocalStore",
    "InitReport",
    "StoreError",
    "SchemaFailure",
    "CleanupFailure",
]
