# syncpos/database/repositories/__init__.py
"""
Repository layer public API.

Usage:
    from syncpos.database.repositories import (
        TenantsRepo, SettingsRepo, UsersRepo,
        SuppliersRepo, CustomersRepo,
        CategoriesRepo, UnitsRepo, ProductsRepo, ProductSuppliersRepo,
        SalesRepo, SaleItemsRepo, PaymentsRepo, StockLedgerRepo,
        DomainError,
    )
"""

from .base import DomainError, SyncRepo

# ---------------- Tenancy ------------------
from .tenants_repo import TenantsRepo
from .settings_repo import SettingsRepo
from .users_repo import UsersRepo

# ---------------- Parties ------------------
from .parties_repo import CustomersRepo, SuppliersRepo

# ---------------- Catalog ------------------
from .catalog_repo import CategoriesRepo, ProductSuppliersRepo, ProductsRepo, UnitsRepo

# ------------------ Sales ------------------
from .sales_repo import PaymentsRepo, SaleItemsRepo, SalesRepo, StockLedgerRepo

__all__ = [
    "DomainError",
    "SyncRepo",
    "TenantsRepo",
    "SettingsRepo",
    "UsersRepo",
    "CustomersRepo",
    "SuppliersRepo",
    "CategoriesRepo",
    "ProductSuppliersRepo",
    "ProductsRepo",
    "UnitsRepo",
    "PaymentsRepo",
    "SaleItemsRepo",
    "SalesRepo",
    "StockLedgerRepo",
]
