# syncpos/database/repositories/tenants_repo.py
from __future__ import annotations

import sqlite3
import uuid
from typing import Optional

from ...dto import TenantDTO, column_fields, column_name, decode_value, encode_value
from ...utils.time_utils import utcnow
from ..tx import immediate_tx


class TenantsRepo:
    """Tenants are the scope of everything else, so they are not tenant-scoped."""

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    def _row_to_dto(self, row: sqlite3.Row) -> TenantDTO:
        return TenantDTO(
            **{f.name: decode_value(f, row[column_name(f)]) for f in column_fields(TenantDTO)}
        )

    def get_by_uuid(self, tenant_uuid: str) -> Optional[TenantDTO]:
        row = self.conn.execute(
            "SELECT id, uuid, license_key, owner_email, status, expiry_date, created_at, is_synced "
            "FROM tenants WHERE uuid = ?",
            (tenant_uuid,),
        ).fetchone()
        return self._row_to_dto(row) if row else None

    def create(self, tenant: TenantDTO) -> TenantDTO:
        fields = {f.name: f for f in column_fields(TenantDTO)}
        tenant_uuid = tenant.uuid or str(uuid.uuid4())
        with immediate_tx(self.conn):
            self.conn.execute(
                "INSERT INTO tenants(uuid, license_key, owner_email, status, expiry_date, created_at, is_synced) "
                "VALUES (?, ?, ?, ?, ?, ?, 0)",
                (
                    tenant_uuid,
                    tenant.license_key,
                    tenant.owner_email,
                    tenant.status or "active",
                    encode_value(fields["expiry_date"], tenant.expiry_date),
                    encode_value(fields["created_at"], tenant.created_at or utcnow()),
                ),
            )
        return self.get_by_uuid(tenant_uuid)
