# syncpos/database/schema.py
"""
Local store schema.

Tables are declared as data and rendered into an ordered list of discrete
statements, so the same declarations drive table creation, widening of
legacy tables and the NULL-repair pass.

Table and column names are shared with the cloud backend and with other
tooling that opens the store file; do not rename them.
"""
from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass

from ..constants import SCHEMA_VERSION
from .tx import immediate_tx
from .versioning import VERSION_TABLE_SQL, set_current_version

_log = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for failures reported by the local store."""


class SchemaFailure(StoreError):
    """DDL did not apply; nothing was changed."""


class CleanupFailure(StoreError):
    """A corrective batch failed; the whole batch was rolled back."""


# ------------------------------ declarations ------------------------------

@dataclass(frozen=True)
class Column:
    name: str
    type: str
    not_null: bool = False
    default: str | None = None  # SQL literal
    extra: str = ""             # PRIMARY KEY / UNIQUE / REFERENCES ...

    def ddl(self) -> str:
        parts = [self.name, self.type]
        if self.not_null:
            parts.append("NOT NULL")
        if self.default is not None:
            parts.append(f"DEFAULT {self.default}")
        if self.extra:
            parts.append(self.extra)
        return " ".join(parts)

    @property
    def addable(self) -> bool:
        """Can ALTER TABLE ... ADD COLUMN add this to an existing table?"""
        if "PRIMARY KEY" in self.extra or "UNIQUE" in self.extra:
            return False
        if self.default is not None and self.default.upper().startswith("CURRENT_"):
            return False
        return not self.not_null or self.default is not None

    @property
    def has_fill_value(self) -> bool:
        """NOT NULL with a constant default: NULLs left by old versions can be rewritten."""
        return self.addable and self.not_null and self.default is not None

    @property
    def references(self) -> str | None:
        """Parent table when this column holds a `REFERENCES <table>(id)` key."""
        if not self.extra.startswith("REFERENCES "):
            return None
        parent, _, key = self.extra.split()[1].partition("(")
        return parent if key == "id)" else None


@dataclass(frozen=True)
class Table:
    name: str
    columns: tuple[Column, ...]
    constraints: tuple[str, ...] = ()
    tenant_scoped: bool = True

    def create_sql(self) -> str:
        body = [f"    {c.ddl()}" for c in self.columns]
        body += [f"    {c}" for c in self.constraints]
        return f"CREATE TABLE IF NOT EXISTS {self.name} (\n" + ",\n".join(body) + "\n)"

    def column(self, name: str) -> Column:
        for c in self.columns:
            if c.name == name:
                return c
        raise KeyError(f"{self.name}.{name}")


def _head(*, tenant_ref: bool = True) -> tuple[Column, ...]:
    return (
        Column("id", "INTEGER", extra="PRIMARY KEY AUTOINCREMENT"),
        Column("uuid", "TEXT", not_null=True, extra="UNIQUE"),
        Column("tenant_id", "TEXT", not_null=True,
               extra="REFERENCES tenants(uuid)" if tenant_ref else ""),
    )


def _tail() -> tuple[Column, ...]:
    return (
        Column("last_updated_at", "DATETIME"),
        Column("is_synced", "INTEGER", not_null=True, default="0"),
        Column("is_deleted", "INTEGER", not_null=True, default="0"),
    )


def _real(name: str, default: str | None = "0.0") -> Column:
    return Column(name, "REAL", not_null=True, default=default)


def _created_at() -> Column:
    return Column("created_at", "DATETIME", default="CURRENT_TIMESTAMP")


TENANTS = Table(
    "tenants",
    (
        Column("id", "INTEGER", extra="PRIMARY KEY AUTOINCREMENT"),
        Column("uuid", "TEXT", not_null=True, extra="UNIQUE"),
        Column("license_key", "TEXT", not_null=True, extra="UNIQUE"),
        Column("owner_email", "TEXT"),
        Column("status", "TEXT", not_null=True),
        Column("is_synced", "INTEGER", not_null=True, default="0"),
        Column("expiry_date", "DATE"),
        Column("created_at", "DATETIME"),
    ),
    tenant_scoped=False,
)

SETTINGS = Table(
    "settings",
    _head() + (
        Column("setting_key", "TEXT", not_null=True),
        Column("setting_value", "TEXT"),
    ) + _tail(),
    constraints=("UNIQUE(tenant_id, setting_key)",),
)

USERS = Table(
    "users",
    _head() + (
        Column("username", "TEXT", not_null=True, extra="UNIQUE"),
        Column("firstname", "TEXT", not_null=True),
        Column("lastname", "TEXT", not_null=True),
        Column("password_hash", "TEXT", not_null=True),
        Column("email", "TEXT"),
        Column("phone", "TEXT"),
        Column("role", "TEXT", not_null=True),
        Column("is_active", "INTEGER", not_null=True, default="1"),
    ) + _tail(),
)

SUPPLIERS = Table(
    "suppliers",
    _head() + (
        Column("name", "TEXT", not_null=True),
        Column("contact_person", "TEXT"),
        Column("email", "TEXT"),
        Column("phone", "TEXT"),
        Column("address", "TEXT"),
        Column("payment_terms", "TEXT"),
        _real("credit_limit"),
    ) + _tail(),
)

CUSTOMERS = Table(
    "customers",
    _head() + (
        Column("name", "TEXT", not_null=True),
        Column("email", "TEXT"),
        Column("phone", "TEXT"),
        Column("address", "TEXT"),
        Column("loyalty_points", "INTEGER", not_null=True, default="0"),
    ) + _tail(),
)

CATEGORIES = Table(
    "categories",
    _head() + (
        Column("name", "TEXT", not_null=True),
        Column("description", "TEXT"),
        Column("parent_id", "INTEGER"),  # NULL for top-level categories
    ) + _tail(),
)

UNITS = Table(
    "units",
    _head() + (
        Column("name", "TEXT", not_null=True),
        Column("abbreviation", "TEXT", not_null=True),
    ) + _tail(),
)

PRODUCTS = Table(
    "products",
    _head(tenant_ref=False) + (
        Column("sku", "TEXT"),
        Column("barcode", "TEXT"),
        Column("name", "TEXT", not_null=True),
        Column("description", "TEXT"),
        Column("product_type", "TEXT", not_null=True, default="'PHYSICAL'"),
        # nullable so a product can exist before it is categorized; repair writes 0
        Column("category_id", "INTEGER"),
        Column("unit_id", "INTEGER"),
        Column("supplier_id", "INTEGER"),
        _real("purchase_price"),
        _real("selling_price"),
        _real("tax_rate"),
        _real("min_stock_level"),
        _real("reorder_quantity"),
        _real("current_stock"),
        Column("is_active", "INTEGER", not_null=True, default="1"),
    ) + _tail(),
)

PRODUCT_SUPPLIERS = Table(
    "product_suppliers",
    _head(tenant_ref=False) + (
        Column("product_id", "INTEGER", not_null=True, extra="REFERENCES products(id)"),
        Column("supplier_id", "INTEGER", not_null=True, extra="REFERENCES suppliers(id)"),
        Column("supplier_product_code", "TEXT"),
    ) + _tail(),
    constraints=("UNIQUE(tenant_id, product_id, supplier_id)",),
)

SALES = Table(
    "sales",
    _head() + (
        Column("type", "TEXT", not_null=True),
        Column("user_id", "INTEGER", not_null=True),
        Column("customer_id", "INTEGER"),  # NULL for purchases
        Column("supplier_id", "INTEGER"),  # NULL for sales
        _real("subtotal", default=None),
        Column("payment_method", "TEXT"),
        _real("tax"),
        _real("discount"),
        _real("total", default=None),
        Column("payment_status", "TEXT", not_null=True, default="'pending'"),
        Column("notes", "TEXT"),
        _created_at(),
    ) + _tail(),
)

SALE_ITEMS = Table(
    "sale_items",
    _head(tenant_ref=False) + (
        Column("sale_id", "INTEGER", not_null=True,
               extra="REFERENCES sales(id) ON DELETE CASCADE"),
        Column("product_id", "INTEGER", not_null=True),
        Column("supplier_product_code", "TEXT"),
        _real("quantity", default=None),
        _real("unit_price", default=None),
        _real("cost_at_sale", default=None),
        _real("tax_rate", default=None),
        _real("discount"),
        _real("total", default=None),
    ) + _tail(),
)

PAYMENTS = Table(
    "payments",
    _head() + (
        Column("sale_id", "INTEGER", not_null=True,
               extra="REFERENCES sales(id) ON DELETE CASCADE"),
        _real("amount", default=None),
        Column("payment_method", "TEXT", not_null=True),
        Column("reference", "TEXT"),
        Column("user_id", "INTEGER", not_null=True),
        _created_at(),
    ) + _tail(),
)

STOCK_LEDGER = Table(
    "stock_ledger",
    _head() + (
        Column("product_id", "INTEGER", not_null=True),
        _real("quantity_delta", default=None),
        Column("reason", "TEXT", not_null=True),
        Column("sale_item_id", "INTEGER"),  # NULL for stock takes; repair writes 0
        Column("user_id", "INTEGER", not_null=True),
        Column("notes", "TEXT"),
        _created_at(),
    ) + _tail(),
)

# creation order: referenced tables first
TABLES: tuple[Table, ...] = (
    TENANTS,
    SETTINGS,
    USERS,
    SUPPLIERS,
    CUSTOMERS,
    CATEGORIES,
    UNITS,
    PRODUCTS,
    PRODUCT_SUPPLIERS,
    SALES,
    SALE_ITEMS,
    PAYMENTS,
    STOCK_LEDGER,
)

TABLES_BY_NAME = {t.name: t for t in TABLES}


def child_relations(parent: str) -> list[tuple[str, str]]:
    """(table, column) pairs whose rows point at `parent`.id."""
    return [(t.name, c.name) for t in TABLES for c in t.columns if c.references == parent]


def _index_sql(table: Table) -> str:
    return (
        f"CREATE INDEX IF NOT EXISTS idx_{table.name}_tenant_sync "
        f"ON {table.name}(tenant_id, is_synced)"
    )


def table_statements() -> list[str]:
    return [VERSION_TABLE_SQL] + [t.create_sql() for t in TABLES]


def index_statements() -> list[str]:
    return [_index_sql(t) for t in TABLES if t.tenant_scoped]


# ------------------------------ repair list ------------------------------

# Corrective updates shipped with the first strict schema. Order is part of
# the contract; new entries go through the declarations instead.
BASELINE_REPAIRS: tuple[tuple[str, str, str], ...] = (
    ("products", "category_id", "0"),
    ("products", "unit_id", "0"),
    ("products", "supplier_id", "0"),
    ("products", "purchase_price", "0.0"),
    ("products", "selling_price", "0.0"),
    ("products", "tax_rate", "0.0"),
    ("products", "min_stock_level", "0.0"),
    ("products", "reorder_quantity", "0.0"),
    ("products", "current_stock", "0.0"),
    ("categories", "parent_id", "0"),
    ("suppliers", "credit_limit", "0.0"),
    ("stock_ledger", "sale_item_id", "0"),
)


def _existing_columns(conn: sqlite3.Connection, table: str) -> set[str]:
    return {row[1] for row in conn.execute(f"PRAGMA table_info({table});").fetchall()}


def _update_sql(table: str, column: str, value: str) -> str:
    return f"UPDATE {table} SET {column} = {value} WHERE {column} IS NULL"


def repair_statements(conn: sqlite3.Connection) -> list[str]:
    """
    Baseline repairs, then one update per declared NOT NULL + DEFAULT column
    not already covered. Declared extras are skipped when the live table
    lacks the column.
    """
    covered = {(t, c) for t, c, _ in BASELINE_REPAIRS}
    stmts = [_update_sql(*r) for r in BASELINE_REPAIRS]
    for table in TABLES:
        live = _existing_columns(conn, table.name)
        for col in table.columns:
            if not col.has_fill_value or (table.name, col.name) in covered:
                continue
            if col.name in live:
                stmts.append(_update_sql(table.name, col.name, col.default))
    return stmts


# ------------------------------ operations ------------------------------

def _widen_legacy_tables(conn: sqlite3.Connection) -> None:
    """
    Add declared columns missing from tables created by older versions.
    Columns SQLite cannot add after the fact are left for a manual migration.
    """
    for table in TABLES:
        live = _existing_columns(conn, table.name)
        for col in table.columns:
            if col.name in live:
                continue
            if not col.addable:
                _log.warning("Cannot add %s.%s to existing table", table.name, col.name)
                continue
            conn.execute(f"ALTER TABLE {table.name} ADD COLUMN {col.ddl()}")
            _log.info("Added missing column %s.%s", table.name, col.name)


def ensure_schema(conn: sqlite3.Connection) -> None:
    """
    Create or verify every table in one transaction. Idempotent.

    Raises SchemaFailure (after rolling back) if any statement fails.
    """
    try:
        with immediate_tx(conn):
            for stmt in table_statements():
                conn.execute(stmt)
            _widen_legacy_tables(conn)
            for stmt in index_statements():
                conn.execute(stmt)
            set_current_version(conn, SCHEMA_VERSION)
    except sqlite3.Error as e:
        raise SchemaFailure(f"Schema creation failed: {e}") from e
    _log.info("Schema is up to date (version %s).", SCHEMA_VERSION)


def repair_legacy_data(conn: sqlite3.Connection) -> int:
    """
    Rewrite NULLs in constrained columns to their documented defaults.

    Runs as a single transaction; returns the number of rows changed, which
    is 0 once the store is clean. Raises CleanupFailure after rolling back.
    """
    total = 0
    try:
        with immediate_tx(conn):
            for stmt in repair_statements(conn):
                changed = conn.execute(stmt).rowcount
                if changed > 0:
                    _log.info("Cleaned %d rows with query: %s", changed, stmt)
                    total += changed
    except sqlite3.Error as e:
        raise CleanupFailure(f"Data cleanup failed: {e}") from e
    return total

