# utils/model_mapper.py
"""
Anti-corruption boundary between transfer objects (syncpos.dto) and domain
models (syncpos.models).

Every function is total: None in -> None out, and absent (None) fields
never make it raise. Measures that may be absent on the transfer side go through the
helpers.or_* combinators so every entity defaults them the same way.
Timestamps cross via time_utils (aware UTC <-> naive UTC).

Child collections are never cascaded: sale_to_transfer returns a header
with an empty `items` list, and the caller attaches items it loaded in the
same transaction.
"""
from __future__ import annotations

from typing import Optional

from .. import dto as t
from .. import models as m
from .helpers import or_false, or_zero, or_zero_int
from .time_utils import to_local_time, to_wire_time


# ---------------------------- shared fields ----------------------------

def _common_to_domain(d: t.SyncedDTO) -> dict:
    return dict(
        local_id=d.local_id,
        uuid=d.uuid,
        tenant_id=d.tenant_id,
        last_updated_at=to_local_time(d.last_updated_at),
        is_synced=or_false(d.synced),
        is_deleted=or_false(d.deleted),
    )


def _common_to_transfer(x: m.SyncedModel) -> dict:
    return dict(
        local_id=x.local_id,
        uuid=x.uuid,
        tenant_id=x.tenant_id,
        last_updated_at=to_wire_time(x.last_updated_at),
        synced=or_false(x.is_synced),
        deleted=or_false(x.is_deleted),
    )


# -------------------------------- tenant --------------------------------

def tenant_to_domain(d: Optional[t.TenantDTO]) -> Optional[m.Tenant]:
    if d is None:
        return None
    return m.Tenant(
        local_id=d.local_id,
        uuid=d.uuid,
        license_key=d.license_key,
        owner_email=d.owner_email,
        status=d.status,
        expiry_date=d.expiry_date,
        created_at=to_local_time(d.created_at),
        is_synced=or_false(d.synced),
    )


def tenant_to_transfer(x: Optional[m.Tenant]) -> Optional[t.TenantDTO]:
    if x is None:
        return None
    return t.TenantDTO(
        local_id=x.local_id,
        uuid=x.uuid,
        license_key=x.license_key,
        owner_email=x.owner_email,
        status=x.status,
        expiry_date=x.expiry_date,
        created_at=to_wire_time(x.created_at),
        synced=or_false(x.is_synced),
    )


# ------------------------------- setting -------------------------------

def setting_to_domain(d: Optional[t.SettingDTO]) -> Optional[m.Setting]:
    if d is None:
        return None
    return m.Setting(
        **_common_to_domain(d),
        setting_key=d.setting_key,
        setting_value=d.setting_value,
    )


def setting_to_transfer(x: Optional[m.Setting]) -> Optional[t.SettingDTO]:
    if x is None:
        return None
    return t.SettingDTO(
        **_common_to_transfer(x),
        setting_key=x.setting_key,
        setting_value=x.setting_value,
    )


# -------------------------------- user --------------------------------

def user_to_domain(d: Optional[t.UserDTO]) -> Optional[m.User]:
    if d is None:
        return None
    return m.User(
        **_common_to_domain(d),
        username=d.username,
        firstname=d.firstname,
        lastname=d.lastname,
        password_hash=d.password_hash,
        email=d.email,
        phone=d.phone,
        role=d.role,
        is_active=or_false(d.active),
    )


def user_to_transfer(x: Optional[m.User]) -> Optional[t.UserDTO]:
    if x is None:
        return None
    return t.UserDTO(
        **_common_to_transfer(x),
        username=x.username,
        firstname=x.firstname,
        lastname=x.lastname,
        password_hash=x.password_hash,
        email=x.email,
        phone=x.phone,
        role=x.role,
        active=or_false(x.is_active),
    )


# ------------------------------ supplier ------------------------------

def supplier_to_domain(d: Optional[t.SupplierDTO]) -> Optional[m.Supplier]:
    if d is None:
        return None
    return m.Supplier(
        **_common_to_domain(d),
        name=d.name,
        contact_person=d.contact_person,
        email=d.email,
        phone=d.phone,
        address=d.address,
        payment_terms=d.payment_terms,
        credit_limit=or_zero(d.credit_limit),
    )


def supplier_to_transfer(x: Optional[m.Supplier]) -> Optional[t.SupplierDTO]:
    if x is None:
        return None
    return t.SupplierDTO(
        **_common_to_transfer(x),
        name=x.name,
        contact_person=x.contact_person,
        email=x.email,
        phone=x.phone,
        address=x.address,
        payment_terms=x.payment_terms,
        credit_limit=x.credit_limit,
    )


# ------------------------------ customer ------------------------------

def customer_to_domain(d: Optional[t.CustomerDTO]) -> Optional[m.Customer]:
    if d is None:
        return None
    return m.Customer(
        **_common_to_domain(d),
        name=d.name,
        email=d.email,
        phone=d.phone,
        address=d.address,
        loyalty_points=or_zero_int(d.loyalty_points),
    )


def customer_to_transfer(x: Optional[m.Customer]) -> Optional[t.CustomerDTO]:
    if x is None:
        return None
    return t.CustomerDTO(
        **_common_to_transfer(x),
        name=x.name,
        email=x.email,
        phone=x.phone,
        address=x.address,
        loyalty_points=x.loyalty_points,
    )


# ------------------------------ category ------------------------------

def category_to_domain(d: Optional[t.CategoryDTO]) -> Optional[m.Category]:
    if d is None:
        return None
    return m.Category(
        **_common_to_domain(d),
        name=d.name,
        description=d.description,
        parent_id=d.parent_id,
        parent_uuid=d.parent_uuid,
    )


def category_to_transfer(x: Optional[m.Category]) -> Optional[t.CategoryDTO]:
    if x is None:
        return None
    return t.CategoryDTO(
        **_common_to_transfer(x),
        name=x.name,
        description=x.description,
        parent_id=x.parent_id,
        parent_uuid=x.parent_uuid,
    )


# -------------------------------- unit --------------------------------

def unit_to_domain(d: Optional[t.UnitDTO]) -> Optional[m.Unit]:
    if d is None:
        return None
    return m.Unit(**_common_to_domain(d), name=d.name, abbreviation=d.abbreviation)


def unit_to_transfer(x: Optional[m.Unit]) -> Optional[t.UnitDTO]:
    if x is None:
        return None
    return t.UnitDTO(**_common_to_transfer(x), name=x.name, abbreviation=x.abbreviation)


# ------------------------------ product ------------------------------

def product_to_domain(d: Optional[t.ProductDTO]) -> Optional[m.Product]:
    if d is None:
        return None
    return m.Product(
        **_common_to_domain(d),
        sku=d.sku,
        barcode=d.barcode,
        name=d.name,
        description=d.description,
        product_type=d.product_type,
        category_id=d.category_id,
        category_uuid=d.category_uuid,
        unit_id=d.unit_id,
        unit_uuid=d.unit_uuid,
        supplier_id=d.supplier_id,
        supplier_uuid=d.supplier_uuid,
        purchase_price=or_zero(d.purchase_price),
        selling_price=or_zero(d.selling_price),
        tax_rate=or_zero(d.tax_rate),
        min_stock_level=or_zero(d.min_stock_level),
        reorder_quantity=or_zero(d.reorder_quantity),
        current_stock=or_zero(d.current_stock),
        is_active=or_false(d.active),
    )


def product_to_transfer(x: Optional[m.Product]) -> Optional[t.ProductDTO]:
    if x is None:
        return None
    return t.ProductDTO(
        **_common_to_transfer(x),
        sku=x.sku,
        barcode=x.barcode,
        name=x.name,
        description=x.description,
        product_type=x.product_type,
        category_id=x.category_id,
        category_uuid=x.category_uuid,
        unit_id=x.unit_id,
        unit_uuid=x.unit_uuid,
        supplier_id=x.supplier_id,
        supplier_uuid=x.supplier_uuid,
        purchase_price=x.purchase_price,
        selling_price=x.selling_price,
        tax_rate=x.tax_rate,
        min_stock_level=x.min_stock_level,
        reorder_quantity=x.reorder_quantity,
        current_stock=x.current_stock,
        active=or_false(x.is_active),
    )


# -------------------------- product supplier --------------------------

def product_supplier_to_domain(
    d: Optional[t.ProductSupplierDTO],
) -> Optional[m.ProductSupplier]:
    # supplier_name is join-derived display data; left unset here.
    if d is None:
        return None
    return m.ProductSupplier(
        **_common_to_domain(d),
        product_id=d.product_id,
        product_uuid=d.product_uuid,
        supplier_id=d.supplier_id,
        supplier_uuid=d.supplier_uuid,
        supplier_product_code=d.supplier_product_code,
    )


def product_supplier_to_transfer(
    x: Optional[m.ProductSupplier],
) -> Optional[t.ProductSupplierDTO]:
    if x is None:
        return None
    return t.ProductSupplierDTO(
        **_common_to_transfer(x),
        product_id=x.product_id,
        product_uuid=x.product_uuid,
        supplier_id=x.supplier_id,
        supplier_uuid=x.supplier_uuid,
        supplier_product_code=x.supplier_product_code,
    )


# -------------------------------- sale --------------------------------

def sale_to_domain(d: Optional[t.SaleDTO]) -> Optional[m.Sale]:
    """Header fields only; `d.items` is ignored."""
    if d is None:
        return None
    return m.Sale(
        **_common_to_domain(d),
        type=d.type,
        user_id=d.user_id,
        user_uuid=d.user_uuid,
        customer_id=d.customer_id,
        customer_uuid=d.customer_uuid,
        supplier_id=d.supplier_id,
        supplier_uuid=d.supplier_uuid,
        subtotal=or_zero(d.subtotal),
        payment_method=d.payment_method,
        tax=or_zero(d.tax),
        discount=or_zero(d.discount),
        total=or_zero(d.total),
        payment_status=d.payment_status,
        notes=d.notes,
        created_at=to_local_time(d.created_at),
    )


def sale_to_transfer(x: Optional[m.Sale]) -> Optional[t.SaleDTO]:
    if x is None:
        return None
    return t.SaleDTO(
        **_common_to_transfer(x),
        type=x.type,
        user_id=x.user_id,
        user_uuid=x.user_uuid,
        customer_id=x.customer_id,
        customer_uuid=x.customer_uuid,
        supplier_id=x.supplier_id,
        supplier_uuid=x.supplier_uuid,
        subtotal=x.subtotal,
        payment_method=x.payment_method,
        tax=x.tax,
        discount=x.discount,
        total=x.total,
        payment_status=x.payment_status,
        notes=x.notes,
        created_at=to_wire_time(x.created_at),
        items=[],
    )


# ------------------------------ sale item ------------------------------

def sale_item_to_domain(d: Optional[t.SaleItemDTO]) -> Optional[m.SaleItem]:
    if d is None:
        return None
    return m.SaleItem(
        **_common_to_domain(d),
        sale_id=d.sale_id,
        sale_uuid=d.sale_uuid,
        product_id=d.product_id,
        product_uuid=d.product_uuid,
        supplier_product_code=d.supplier_product_code,
        quantity=or_zero(d.quantity),
        unit_price=or_zero(d.unit_price),
        cost_at_sale=or_zero(d.cost_at_sale),
        tax_rate=or_zero(d.tax_rate),
        discount=or_zero(d.discount),
        total=or_zero(d.total),
    )


def sale_item_to_transfer(x: Optional[m.SaleItem]) -> Optional[t.SaleItemDTO]:
    if x is None:
        return None
    return t.SaleItemDTO(
        **_common_to_transfer(x),
        sale_id=x.sale_id,
        sale_uuid=x.sale_uuid,
        product_id=x.product_id,
        product_uuid=x.product_uuid,
        supplier_product_code=x.supplier_product_code,
        quantity=x.quantity,
        unit_price=x.unit_price,
        cost_at_sale=x.cost_at_sale,
        tax_rate=x.tax_rate,
        discount=x.discount,
        total=x.total,
    )


# ------------------------------- payment -------------------------------

def payment_to_domain(d: Optional[t.PaymentDTO]) -> Optional[m.Payment]:
    if d is None:
        return None
    return m.Payment(
        **_common_to_domain(d),
        sale_id=d.sale_id,
        sale_uuid=d.sale_uuid,
        amount=or_zero(d.amount),
        payment_method=d.payment_method,
        reference=d.reference,
        user_id=d.user_id,
        created_at=to_local_time(d.created_at),
    )


def payment_to_transfer(x: Optional[m.Payment]) -> Optional[t.PaymentDTO]:
    if x is None:
        return None
    return t.PaymentDTO(
        **_common_to_transfer(x),
        sale_id=x.sale_id,
        sale_uuid=x.sale_uuid,
        amount=x.amount,
        payment_method=x.payment_method,
        reference=x.reference,
        user_id=x.user_id,
        created_at=to_wire_time(x.created_at),
    )


# ----------------------------- stock ledger -----------------------------

def stock_ledger_to_domain(d: Optional[t.StockLedgerDTO]) -> Optional[m.StockLedger]:
    if d is None:
        return None
    return m.StockLedger(
        **_common_to_domain(d),
        product_id=d.product_id,
        product_uuid=d.product_uuid,
        quantity_delta=or_zero(d.quantity_delta),
        reason=d.reason,
        sale_item_id=d.sale_item_id,
        sale_item_uuid=d.sale_item_uuid,
        user_id=d.user_id,
        user_uuid=d.user_uuid,
        notes=d.notes,
        created_at=to_local_time(d.created_at),
    )


def stock_ledger_to_transfer(x: Optional[m.StockLedger]) -> Optional[t.StockLedgerDTO]:
    if x is None:
        return None
    return t.StockLedgerDTO(
        **_common_to_transfer(x),
        product_id=x.product_id,
        product_uuid=x.product_uuid,
        quantity_delta=x.quantity_delta,
        reason=x.reason,
        sale_item_id=x.sale_item_id,
        sale_item_uuid=x.sale_item_uuid,
        user_id=x.user_id,
        user_uuid=x.user_uuid,
        notes=x.notes,
        created_at=to_wire_time(x.created_at),
    )
