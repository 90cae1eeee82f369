# syncpos/tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - Every test gets its own store file (real temp file, WAL like production)
# - conn.row_factory = sqlite3.Row, PRAGMA foreign_keys=ON (LocalStore.connect)
# - Two tenants are seeded so isolation can be checked everywhere
# ---------------------------------------------------------------------

from __future__ import annotations

import os
import sqlite3
import tempfile

import pytest

from syncpos.database import LocalStore
from syncpos.database.repositories import (
    CategoriesRepo,
    ProductsRepo,
    SuppliersRepo,
    TenantsRepo,
    UnitsRepo,
    UsersRepo,
)
from syncpos.dto import (
    CategoryDTO,
    ProductDTO,
    SupplierDTO,
    TenantDTO,
    UnitDTO,
    UserDTO,
)


# ---------- Store on a throwaway file ----------
@pytest.fixture()
def store():
    tmp = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    tmp.close()
    try:
        yield LocalStore(tmp.name)
    finally:
        for suffix in ("", "-wal", "-shm"):
            if os.path.exists(tmp.name + suffix):
                os.unlink(tmp.name + suffix)


@pytest.fixture()
def conn(store: LocalStore):
    report = store.initialize()
    assert not report.degraded, report.errors
    c = store.connect()
    try:
        yield c
    finally:
        c.close()


# ---------- Tenants ----------
@pytest.fixture()
def tenants(conn: sqlite3.Connection) -> tuple[str, str]:
    """uuids of two independent tenants."""
    repo = TenantsRepo(conn)
    a = repo.create(TenantDTO(license_key="LIC-A", owner_email="a@shop.test"))
    b = repo.create(TenantDTO(license_key="LIC-B", owner_email="b@shop.test"))
    return a.uuid, b.uuid


@pytest.fixture()
def tenant_a(tenants) -> str:
    return tenants[0]


@pytest.fixture()
def tenant_b(tenants) -> str:
    return tenants[1]


# ---------- Handy rows ----------
@pytest.fixture()
def cashier(conn, tenant_a) -> UserDTO:
    # legacy digest keeps the fixture fast; UsersRepo tests hash for real
    return UsersRepo(conn).create_local(
        UserDTO(
            username="cashier",
            firstname="Cara",
            lastname="Shier",
            password_hash="pbkdf2_sha256$1$00$00",
            role="CASHIER",
        ),
        tenant_a,
    )


@pytest.fixture()
def catalog(conn, tenant_a) -> dict:
    """One category/unit/supplier and a product referencing all three (tenant A)."""
    category = CategoriesRepo(conn).create_local(CategoryDTO(name="Drinks"), tenant_a)
    unit = UnitsRepo(conn).create_local(UnitDTO(name="Piece", abbreviation="pc"), tenant_a)
    supplier = SuppliersRepo(conn).create_local(SupplierDTO(name="Acme"), tenant_a)
    product = ProductsRepo(conn).create_local(
        ProductDTO(
            sku="COLA-1",
            barcode="4000000000017",
            name="Cola",
            category_id=category.local_id,
            unit_id=unit.local_id,
            supplier_id=supplier.local_id,
            selling_price=1.5,
            current_stock=10,
            min_stock_level=2,
        ),
        tenant_a,
    )
    return {"category": category, "unit": unit, "supplier": supplier, "product": product}
