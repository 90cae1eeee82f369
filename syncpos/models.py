# syncpos/models.py
"""
Domain models: what application code works with in memory.

Unlike the transfer objects, timestamps are UTC-naive and measures are
never None. Conversion in both directions lives in utils/model_mapper.py.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional


@dataclass
class Tenant:
    local_id: Optional[int] = None
    uuid: Optional[str] = None
    license_key: Optional[str] = None
    owner_email: Optional[str] = None
    status: Optional[str] = None
    expiry_date: Optional[date] = None
    created_at: Optional[datetime] = None
    is_synced: bool = False


@dataclass
class SyncedModel:
    local_id: Optional[int] = None
    uuid: Optional[str] = None
    tenant_id: Optional[str] = None
    last_updated_at: Optional[datetime] = None
    is_synced: bool = False
    is_deleted: bool = False


@dataclass
class Setting(SyncedModel):
    setting_key: Optional[str] = None
    setting_value: Optional[str] = None


@dataclass
class User(SyncedModel):
    username: Optional[str] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    password_hash: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None
    is_active: bool = True


@dataclass
class Supplier(SyncedModel):
    name: Optional[str] = None
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    payment_terms: Optional[str] = None
    credit_limit: float = 0.0


@dataclass
class Customer(SyncedModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    loyalty_points: int = 0


@dataclass
class Category(SyncedModel):
    name: Optional[str] = None
    description: Optional[str] = None
    parent_id: Optional[int] = None
    parent_uuid: Optional[str] = None


@dataclass
class Unit(SyncedModel):
    name: Optional[str] = None
    abbreviation: Optional[str] = None


@dataclass
class Product(SyncedModel):
    sku: Optional[str] = None
    barcode: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    product_type: Optional[str] = None
    category_id: Optional[int] = None
    category_uuid: Optional[str] = None
    unit_id: Optional[int] = None
    unit_uuid: Optional[str] = None
    supplier_id: Optional[int] = None
    supplier_uuid: Optional[str] = None
    purchase_price: float = 0.0
    selling_price: float = 0.0
    tax_rate: float = 0.0
    min_stock_level: float = 0.0
    reorder_quantity: float = 0.0
    current_stock: float = 0.0
    is_active: bool = True


@dataclass
class ProductSupplier(SyncedModel):
    product_id: Optional[int] = None
    product_uuid: Optional[str] = None
    supplier_id: Optional[int] = None
    supplier_uuid: Optional[str] = None
    supplier_product_code: Optional[str] = None
    # filled by joins for display; has no transfer counterpart
    supplier_name: Optional[str] = field(default=None, compare=False)


@dataclass
class Sale(SyncedModel):
    type: Optional[str] = None
    user_id: Optional[int] = None
    user_uuid: Optional[str] = None
    customer_id: Optional[int] = None
    customer_uuid: Optional[str] = None
    supplier_id: Optional[int] = None
    supplier_uuid: Optional[str] = None
    subtotal: float = 0.0
    payment_method: Optional[str] = None
    tax: float = 0.0
    discount: float = 0.0
    total: float = 0.0
    payment_status: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass
class SaleItem(SyncedModel):
    sale_id: Optional[int] = None
    sale_uuid: Optional[str] = None
    product_id: Optional[int] = None
    product_uuid: Optional[str] = None
    supplier_product_code: Optional[str] = None
    quantity: float = 0.0
    unit_price: float = 0.0
    cost_at_sale: float = 0.0
    tax_rate: float = 0.0
    discount: float = 0.0
    total: float = 0.0


@dataclass
class Payment(SyncedModel):
    sale_id: Optional[int] = None
    sale_uuid: Optional[str] = None
    amount: float = 0.0
    payment_method: Optional[str] = None
    reference: Optional[str] = None
    user_id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass
class StockLedger(SyncedModel):
    product_id: Optional[int] = None
    product_uuid: Optional[str] = None
    quantity_delta: float = 0.0
    reason: Optional[str] = None
    sale_item_id: Optional[int] = None
    sale_item_uuid: Optional[str] = None
    user_id: Optional[int] = None
    user_uuid: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
