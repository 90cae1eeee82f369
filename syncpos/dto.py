# syncpos/dto.py
"""
Transfer objects: the wire/storage-facing shape of every entity.

Timestamps are zone-aware, measures may be None, and each local integer
foreign key has a `*_uuid` twin that is filled lazily by the identity
resolver (utils/uuid_lookup.py).

Field metadata drives both the wire codec below and the repositories:
  local    -> never put on the wire (local keys, sync flag)
  column   -> storage/wire name when it differs from the attribute
  virtual  -> not a table column (uuid twins, child collections)
  codec    -> value conversion: "datetime", "date" or "bool"
"""
from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional, TypeVar

from .utils.time_utils import format_iso_datetime, parse_iso_datetime

T = TypeVar("T")


# ---------------------------- field helpers ----------------------------

def _local_key(column: str | None = None):
    md = {"local": True}
    if column:
        md["column"] = column
    return field(default=None, metadata=md)


def _twin():
    return field(default=None, metadata={"virtual": True})


def _timestamp():
    return field(default=None, metadata={"codec": "datetime"})


def _flag(column: str, default: bool, *, local: bool = False):
    md: dict[str, Any] = {"column": column, "codec": "bool"}
    if local:
        md["local"] = True
    return field(default=default, metadata=md)


# ------------------------------ entities ------------------------------

@dataclass
class TenantDTO:
    local_id: Optional[int] = _local_key("id")
    uuid: Optional[str] = None
    license_key: Optional[str] = None
    owner_email: Optional[str] = None
    status: Optional[str] = None
    expiry_date: Optional[date] = field(default=None, metadata={"codec": "date"})
    created_at: Optional[datetime] = _timestamp()
    synced: bool = _flag("is_synced", False, local=True)


@dataclass
class SyncedDTO:
    """Fields every tenant-scoped entity carries."""
    local_id: Optional[int] = _local_key("id")
    uuid: Optional[str] = None
    tenant_id: Optional[str] = None
    last_updated_at: Optional[datetime] = _timestamp()
    synced: bool = _flag("is_synced", False, local=True)
    deleted: bool = _flag("is_deleted", False)


@dataclass
class SettingDTO(SyncedDTO):
    setting_key: Optional[str] = None
    setting_value: Optional[str] = None


@dataclass
class UserDTO(SyncedDTO):
    username: Optional[str] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    password_hash: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    role: Optional[str] = None
    active: bool = _flag("is_active", True)


@dataclass
class SupplierDTO(SyncedDTO):
    name: Optional[str] = None
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    payment_terms: Optional[str] = None
    credit_limit: Optional[float] = None


@dataclass
class CustomerDTO(SyncedDTO):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    loyalty_points: Optional[int] = None


@dataclass
class CategoryDTO(SyncedDTO):
    name: Optional[str] = None
    description: Optional[str] = None
    parent_id: Optional[int] = _local_key()
    parent_uuid: Optional[str] = _twin()


@dataclass
class UnitDTO(SyncedDTO):
    name: Optional[str] = None
    abbreviation: Optional[str] = None


@dataclass
class ProductDTO(SyncedDTO):
    sku: Optional[str] = None
    barcode: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    product_type: Optional[str] = None
    category_id: Optional[int] = _local_key()
    category_uuid: Optional[str] = _twin()
    unit_id: Optional[int] = _local_key()
    unit_uuid: Optional[str] = _twin()
    supplier_id: Optional[int] = _local_key()
    supplier_uuid: Optional[str] = _twin()
    purchase_price: Optional[float] = None
    selling_price: Optional[float] = None
    tax_rate: Optional[float] = None
    min_stock_level: Optional[float] = None
    reorder_quantity: Optional[float] = None
    current_stock: Optional[float] = None
    active: bool = _flag("is_active", True)


@dataclass
class ProductSupplierDTO(SyncedDTO):
    product_id: Optional[int] = _local_key()
    product_uuid: Optional[str] = _twin()
    supplier_id: Optional[int] = _local_key()
    supplier_uuid: Optional[str] = _twin()
    supplier_product_code: Optional[str] = None


@dataclass
class SaleItemDTO(SyncedDTO):
    sale_id: Optional[int] = _local_key()
    sale_uuid: Optional[str] = _twin()
    product_id: Optional[int] = _local_key()
    product_uuid: Optional[str] = _twin()
    supplier_product_code: Optional[str] = None
    quantity: Optional[float] = None
    unit_price: Optional[float] = None
    cost_at_sale: Optional[float] = None
    tax_rate: Optional[float] = None
    discount: Optional[float] = None
    total: Optional[float] = None


@dataclass
class SaleDTO(SyncedDTO):
    type: Optional[str] = None
    user_id: Optional[int] = None
    user_uuid: Optional[str] = _twin()
    customer_id: Optional[int] = _local_key()
    customer_uuid: Optional[str] = _twin()
    supplier_id: Optional[int] = _local_key()
    supplier_uuid: Optional[str] = _twin()
    subtotal: Optional[float] = None
    payment_method: Optional[str] = None
    tax: Optional[float] = None
    discount: Optional[float] = None
    total: Optional[float] = None
    payment_status: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = _timestamp()
    # Children travel with the header on the wire but are loaded and
    # written by the caller; they take no part in equality.
    items: list[SaleItemDTO] = field(
        default_factory=list,
        compare=False,
        metadata={"virtual": True, "children": SaleItemDTO},
    )


@dataclass
class PaymentDTO(SyncedDTO):
    sale_id: Optional[int] = _local_key()
    sale_uuid: Optional[str] = _twin()
    amount: Optional[float] = None
    payment_method: Optional[str] = None
    reference: Optional[str] = None
    user_id: Optional[int] = None
    created_at: Optional[datetime] = _timestamp()


@dataclass
class StockLedgerDTO(SyncedDTO):
    product_id: Optional[int] = _local_key()
    product_uuid: Optional[str] = _twin()
    quantity_delta: Optional[float] = None
    reason: Optional[str] = None
    sale_item_id: Optional[int] = _local_key()
    sale_item_uuid: Optional[str] = _twin()
    user_id: Optional[int] = None
    user_uuid: Optional[str] = _twin()
    notes: Optional[str] = None
    created_at: Optional[datetime] = _timestamp()


# ------------------------------ introspection ------------------------------

def column_name(f: dataclasses.Field) -> str:
    return f.metadata.get("column", f.name)


def column_fields(cls) -> list[dataclasses.Field]:
    """Fields backed by a table column, in declaration order."""
    return [f for f in dataclasses.fields(cls) if not f.metadata.get("virtual")]


def decode_value(f: dataclasses.Field, value: Any) -> Any:
    """Storage/wire scalar -> attribute value."""
    if value is None:
        return None
    codec = f.metadata.get("codec")
    if codec == "datetime":
        return parse_iso_datetime(value) if isinstance(value, str) else value
    if codec == "date":
        return date.fromisoformat(value) if isinstance(value, str) else value
    if codec == "bool":
        return bool(value)
    return value


def encode_value(f: dataclasses.Field, value: Any) -> Any:
    """Attribute value -> storage/wire scalar."""
    if value is None:
        return None
    codec = f.metadata.get("codec")
    if codec == "datetime":
        return format_iso_datetime(value)
    if codec == "date":
        return value.isoformat()
    return value


# ------------------------------ wire codec ------------------------------

def to_wire(dto) -> Optional[dict]:
    """
    Transfer object -> JSON-ready dict for the backend.

    Local keys and the sync flag are dropped; absent values are kept as None
    so the payload always has the same shape.
    """
    if dto is None:
        return None
    out: dict[str, Any] = {}
    for f in dataclasses.fields(dto):
        if f.metadata.get("local"):
            continue
        value = getattr(dto, f.name)
        if "children" in f.metadata:
            out[column_name(f)] = [to_wire(child) for child in value or []]
        else:
            out[column_name(f)] = encode_value(f, value)
    return out


def from_wire(cls: type[T], data: Optional[dict]) -> Optional[T]:
    """JSON dict from the backend -> transfer object. Unknown keys are ignored."""
    if data is None:
        return None
    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(cls):
        if f.metadata.get("local"):
            continue
        key = column_name(f)
        if key not in data:
            continue
        child_cls = f.metadata.get("children")
        if child_cls is not None:
            kwargs[f.name] = [from_wire(child_cls, c) for c in data[key] or []]
        elif f.metadata.get("codec") == "bool":
            # an explicit null flag falls back to the declared default
            if data[key] is not None:
                kwargs[f.name] = bool(data[key])
        else:
            kwargs[f.name] = decode_value(f, data[key])
    return cls(**kwargs)


def dumps(dto) -> str:
    return json.dumps(to_wire(dto))


def loads(cls: type[T], text: str) -> Optional[T]:
    return from_wire(cls, json.loads(text))
