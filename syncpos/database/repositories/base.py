# syncpos/database/repositories/base.py
from __future__ import annotations

import dataclasses
import sqlite3
import uuid
from datetime import datetime
from typing import ClassVar, Generic, Optional, TypeVar

from ...dto import SyncedDTO, column_fields, column_name, decode_value, encode_value
from ...utils.time_utils import parse_iso_datetime, to_wire_time, utcnow
from ..schema import TABLES_BY_NAME, Table, child_relations
from ..tx import immediate_tx

D = TypeVar("D", bound=SyncedDTO)

# written by the lifecycle methods, never by update_local()
_LIFECYCLE_COLUMNS = {"id", "uuid", "tenant_id", "last_updated_at", "is_synced", "is_deleted"}


class DomainError(Exception):
    """Caller error the service layer can surface directly."""


class SyncRepo(Generic[D]):
    """
    Tenant-scoped access to one synced table.

    Every statement filters on tenant_id; there is no way to read or touch
    another tenant's row through this class. Rows are never removed by
    application writes: delete is a tombstone that itself has to sync.
    """

    table: ClassVar[str]
    dto_cls: ClassVar[type]

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    # ---------------------------- internals ----------------------------

    @classmethod
    def _decl(cls) -> Table:
        return TABLES_BY_NAME[cls.table]

    @classmethod
    def _fields(cls) -> list[dataclasses.Field]:
        return column_fields(cls.dto_cls)

    @classmethod
    def _select(cls) -> str:
        cols = ", ".join(column_name(f) for f in cls._fields())
        return f"SELECT {cols} FROM {cls.table}"

    def _row_to_dto(self, row: sqlite3.Row) -> D:
        return self.dto_cls(**{f.name: decode_value(f, row[column_name(f)]) for f in self._fields()})

    def _fetch_one(self, where: str, params: tuple) -> Optional[D]:
        row = self.conn.execute(f"{self._select()} WHERE {where}", params).fetchone()
        return self._row_to_dto(row) if row else None

    def _fetch_all(self, where: str, params: tuple, order: str = "id") -> list[D]:
        rows = self.conn.execute(
            f"{self._select()} WHERE {where} ORDER BY {order}", params
        ).fetchall()
        return [self._row_to_dto(r) for r in rows]

    @staticmethod
    def _check_tenant(dto: SyncedDTO, tenant_id: str) -> None:
        if not tenant_id:
            raise DomainError("tenant_id is required.")
        if dto.tenant_id is not None and dto.tenant_id != tenant_id:
            raise DomainError("Row belongs to a different tenant.")

    def _insert(self, dto: D, tenant_id: str) -> D:
        """INSERT without opening a transaction; see create_local()."""
        self._check_tenant(dto, tenant_id)
        now = utcnow()
        changes = dict(
            local_id=None,
            uuid=dto.uuid or str(uuid.uuid4()),
            tenant_id=tenant_id,
            last_updated_at=now,
            synced=False,
            deleted=False,
        )
        if getattr(dto, "created_at", False) is None:
            changes["created_at"] = now
        row = dataclasses.replace(dto, **changes)

        decl = self._decl()
        cols, params = [], []
        for f in self._fields():
            name = column_name(f)
            if name == "id":
                continue
            value = getattr(row, f.name)
            # let the declared DEFAULT apply instead of writing NULL
            if value is None and decl.column(name).default is not None:
                continue
            cols.append(name)
            params.append(encode_value(f, value))

        marks = ", ".join("?" for _ in cols)
        cur = self.conn.execute(
            f"INSERT INTO {self.table}({', '.join(cols)}) VALUES ({marks})", params
        )
        return self.get_by_id(int(cur.lastrowid), tenant_id)

    # ------------------------------ reads ------------------------------

    def get_by_id(self, local_id: int, tenant_id: str) -> Optional[D]:
        """Non-deleted row `local_id` of `tenant_id`, or None."""
        return self._fetch_one("id = ? AND tenant_id = ? AND is_deleted = 0", (local_id, tenant_id))

    def get_by_uuid(self, row_uuid: str, tenant_id: str) -> Optional[D]:
        return self._fetch_one("uuid = ? AND tenant_id = ?", (row_uuid, tenant_id))

    def list_all(self, tenant_id: str) -> list[D]:
        return self._fetch_all("tenant_id = ? AND is_deleted = 0", (tenant_id,))

    def get_unsynced(self, tenant_id: str) -> list[D]:
        """Rows awaiting acknowledgement, tombstones included, oldest change first."""
        return self._fetch_all(
            "tenant_id = ? AND is_synced = 0", (tenant_id,), order="last_updated_at, id"
        )

    # ------------------------------ writes ------------------------------

    def create_local(self, dto: D, tenant_id: str) -> D:
        """
        Insert a new local row: fresh id, uuid (unless one is supplied),
        last_updated_at = now, unsynced. Returns the stored row.
        """
        with immediate_tx(self.conn):
            return self._insert(dto, tenant_id)

    def update_local(self, dto: D, tenant_id: str) -> bool:
        """
        Write every data column of `dto`, stamp last_updated_at and clear
        is_synced. Deleted rows are not updated. Returns True if a row changed.
        """
        if dto.local_id is None:
            raise DomainError("Cannot update a row without local_id.")
        self._check_tenant(dto, tenant_id)

        decl = self._decl()
        sets, params = [], []
        for f in self._fields():
            name = column_name(f)
            if name in _LIFECYCLE_COLUMNS or name == "created_at":
                continue
            default = decl.column(name).default
            sets.append(f"{name} = COALESCE(?, {default})" if default is not None else f"{name} = ?")
            params.append(encode_value(f, getattr(dto, f.name)))

        sets += ["last_updated_at = ?", "is_synced = 0"]
        params += [utcnow().isoformat(), dto.local_id, tenant_id]
        with immediate_tx(self.conn):
            cur = self.conn.execute(
                f"UPDATE {self.table} SET {', '.join(sets)} "
                "WHERE id = ? AND tenant_id = ? AND is_deleted = 0",
                params,
            )
            return cur.rowcount == 1

    def mark_deleted(self, local_id: int, tenant_id: str) -> bool:
        with immediate_tx(self.conn):
            cur = self.conn.execute(
                f"UPDATE {self.table} SET is_deleted = 1, is_synced = 0, last_updated_at = ? "
                "WHERE id = ? AND tenant_id = ? AND is_deleted = 0",
                (utcnow().isoformat(), local_id, tenant_id),
            )
            return cur.rowcount == 1

    def mark_synced(
        self, local_id: int, tenant_id: str, last_updated_at: Optional[datetime] = None
    ) -> bool:
        """
        Record that the backend acknowledged the row's current state.

        Pass the `last_updated_at` of the copy that was pushed. If the row was
        changed locally since then it stays unsynced and False is returned.
        """
        with immediate_tx(self.conn):
            if last_updated_at is not None:
                row = self.conn.execute(
                    f"SELECT last_updated_at FROM {self.table} WHERE id = ? AND tenant_id = ?",
                    (local_id, tenant_id),
                ).fetchone()
                stored = parse_iso_datetime(row["last_updated_at"]) if row else None
                if stored is None or stored != to_wire_time(last_updated_at):
                    return False
            cur = self.conn.execute(
                f"UPDATE {self.table} SET is_synced = 1 WHERE id = ? AND tenant_id = ?",
                (local_id, tenant_id),
            )
            return cur.rowcount == 1

    def purge_synced_tombstones(self, tenant_id: str) -> int:
        """
        Physically remove deleted rows the backend has acknowledged.

        A tombstone is kept while any row of a child table still points at
        it, whatever that row's state. Purge child tables first.
        """
        guards = "".join(
            f" AND NOT EXISTS (SELECT 1 FROM {child} WHERE {child}.{col} = {self.table}.id)"
            for child, col in child_relations(self.table)
        )
        with immediate_tx(self.conn):
            cur = self.conn.execute(
                f"DELETE FROM {self.table} "
                f"WHERE tenant_id = ? AND is_deleted = 1 AND is_synced = 1{guards}",
                (tenant_id,),
            )
            return cur.rowcount
