# syncpos/utils/uuid_lookup.py
"""
Fill the `*_uuid` twins of transfer objects before they go on the wire.

Local integer keys mean nothing to the backend; each relation is resolved by
loading the referenced row (same tenant) and copying its uuid. Resolution is
best effort: a key of None/0, a referent that is missing or tombstoned, or a
kind with no registered lookup leaves the twin as it was.

Customer on sales and sale_item on stock-ledger rows are declared but have
no lookup registered by from_connection(), so they stay unresolved.
"""
from __future__ import annotations

import logging
import sqlite3
from typing import Any, Callable, Iterable, Mapping, Optional, TypeVar

from ..database.repositories import (
    CategoriesRepo,
    ProductsRepo,
    SalesRepo,
    SuppliersRepo,
    UnitsRepo,
)
from .helpers import is_reference

_log = logging.getLogger(__name__)

T = TypeVar("T")

# (local_id, tenant_id) -> row with a `.uuid`, or None
LookupFn = Callable[[int, str], Optional[Any]]

# (key attribute, twin attribute, lookup kind), resolved in this order
Relation = tuple[str, str, str]

PRODUCT_RELATIONS: tuple[Relation, ...] = (
    ("category_id", "category_uuid", "category"),
    ("unit_id", "unit_uuid", "unit"),
    ("supplier_id", "supplier_uuid", "supplier"),
)
CATEGORY_RELATIONS: tuple[Relation, ...] = (
    ("parent_id", "parent_uuid", "category"),
)
SALE_RELATIONS: tuple[Relation, ...] = (
    ("customer_id", "customer_uuid", "customer"),
    ("supplier_id", "supplier_uuid", "supplier"),
)
SALE_ITEM_RELATIONS: tuple[Relation, ...] = (
    ("sale_id", "sale_uuid", "sale"),
    ("product_id", "product_uuid", "product"),
)
PAYMENT_RELATIONS: tuple[Relation, ...] = (
    ("sale_id", "sale_uuid", "sale"),
)
STOCK_LEDGER_RELATIONS: tuple[Relation, ...] = (
    ("product_id", "product_uuid", "product"),
    ("sale_item_id", "sale_item_uuid", "sale_item"),
)
PRODUCT_SUPPLIER_RELATIONS: tuple[Relation, ...] = (
    ("product_id", "product_uuid", "product"),
    ("supplier_id", "supplier_uuid", "supplier"),
)


class UUIDLookup:
    def __init__(self, lookups: Mapping[str, LookupFn]):
        self._lookups = dict(lookups)

    @classmethod
    def from_connection(cls, conn: sqlite3.Connection) -> "UUIDLookup":
        """Wire the tenant-scoped repositories that can load a row by local id."""
        return cls({
            "category": CategoriesRepo(conn).get_by_id,
            "unit": UnitsRepo(conn).get_by_id,
            "supplier": SuppliersRepo(conn).get_by_id,
            "product": ProductsRepo(conn).get_by_id,
            "sale": SalesRepo(conn).get_by_id,
        })

    def supports(self, kind: str) -> bool:
        return kind in self._lookups

    def _resolve(self, dto: Any, relations: Iterable[Relation], tenant_id: str) -> Any:
        if dto is None:
            return None
        for key_attr, twin_attr, kind in relations:
            local_id = getattr(dto, key_attr)
            if not is_reference(local_id):
                continue
            lookup = self._lookups.get(kind)
            if lookup is None:
                continue
            referent = lookup(local_id, tenant_id)
            if referent is None:
                _log.debug("No %s %s for tenant %s; %s left unset", kind, local_id, tenant_id, twin_attr)
                continue
            setattr(dto, twin_attr, referent.uuid)
        return dto

    # ------------------------------ per entity ------------------------------

    def enrich_product(self, dto, tenant_id: str):
        return self._resolve(dto, PRODUCT_RELATIONS, tenant_id)

    def enrich_category(self, dto, tenant_id: str):
        return self._resolve(dto, CATEGORY_RELATIONS, tenant_id)

    def enrich_sale(self, dto, tenant_id: str):
        return self._resolve(dto, SALE_RELATIONS, tenant_id)

    def enrich_sale_item(self, dto, tenant_id: str):
        return self._resolve(dto, SALE_ITEM_RELATIONS, tenant_id)

    def enrich_payment(self, dto, tenant_id: str):
        return self._resolve(dto, PAYMENT_RELATIONS, tenant_id)

    def enrich_stock_ledger(self, dto, tenant_id: str):
        return self._resolve(dto, STOCK_LEDGER_RELATIONS, tenant_id)

    def enrich_product_supplier(self, dto, tenant_id: str):
        return self._resolve(dto, PRODUCT_SUPPLIER_RELATIONS, tenant_id)

    def enrich_many(
        self, dtos: Iterable[T], enrich: Callable[[T, str], T], tenant_id: str
    ) -> list[T]:
        """Apply one of the enrich_* methods to every object of a batch."""
        return [enrich(dto, tenant_id) for dto in dtos]
