import dataclasses
from datetime import date, datetime, timedelta, timezone

import pytest

from syncpos import dto as t
from syncpos import models as m
from syncpos.utils import model_mapper as mm

WIRE_TS = datetime(2025, 3, 1, 10, 30, tzinfo=timezone.utc)
LOCAL_TS = datetime(2025, 3, 1, 10, 30)

PAIRS = [
    (mm.tenant_to_domain, mm.tenant_to_transfer),
    (mm.setting_to_domain, mm.setting_to_transfer),
    (mm.user_to_domain, mm.user_to_transfer),
    (mm.supplier_to_domain, mm.supplier_to_transfer),
    (mm.customer_to_domain, mm.customer_to_transfer),
    (mm.category_to_domain, mm.category_to_transfer),
    (mm.unit_to_domain, mm.unit_to_transfer),
    (mm.product_to_domain, mm.product_to_transfer),
    (mm.product_supplier_to_domain, mm.product_supplier_to_transfer),
    (mm.sale_to_domain, mm.sale_to_transfer),
    (mm.sale_item_to_domain, mm.sale_item_to_transfer),
    (mm.payment_to_domain, mm.payment_to_transfer),
    (mm.stock_ledger_to_domain, mm.stock_ledger_to_transfer),
]


def _common(**kw):
    base = dict(local_id=7, uuid="u-7", tenant_id="t-1", last_updated_at=WIRE_TS, synced=True)
    base.update(kw)
    return base


@pytest.mark.parametrize("to_domain,to_transfer", PAIRS)
def test_none_maps_to_none(to_domain, to_transfer):
    assert to_domain(None) is None
    assert to_transfer(None) is None


def test_product_round_trip():
    d = t.ProductDTO(
        **_common(),
        sku="COLA-1",
        barcode="400",
        name="Cola",
        product_type="PHYSICAL",
        category_id=3,
        category_uuid="c-3",
        unit_id=4,
        unit_uuid="n-4",
        supplier_id=5,
        supplier_uuid="s-5",
        purchase_price=0.8,
        selling_price=1.5,
        tax_rate=7.7,
        min_stock_level=2.0,
        reorder_quantity=12.0,
        current_stock=30.0,
        active=True,
    )
    domain = mm.product_to_domain(d)
    assert domain.last_updated_at == LOCAL_TS
    assert domain.last_updated_at.tzinfo is None
    assert domain.is_synced is True
    assert domain.category_uuid == "c-3"
    assert mm.product_to_transfer(domain) == d


def test_absent_measures_default_to_zero():
    domain = mm.product_to_domain(t.ProductDTO(name="Bare"))
    assert domain.purchase_price == 0.0
    assert domain.selling_price == 0.0
    assert domain.tax_rate == 0.0
    assert domain.min_stock_level == 0.0
    assert domain.reorder_quantity == 0.0
    assert domain.current_stock == 0.0
    assert domain.last_updated_at is None

    assert mm.supplier_to_domain(t.SupplierDTO(name="S")).credit_limit == 0.0
    assert mm.customer_to_domain(t.CustomerDTO(name="C")).loyalty_points == 0
    assert mm.sale_item_to_domain(t.SaleItemDTO()).quantity == 0.0
    assert mm.stock_ledger_to_domain(t.StockLedgerDTO()).quantity_delta == 0.0


def test_wire_offset_is_normalized_to_utc():
    cet = timezone(timedelta(hours=1))
    d = t.PaymentDTO(**_common(last_updated_at=datetime(2025, 3, 1, 11, 30, tzinfo=cet)))
    assert mm.payment_to_domain(d).last_updated_at == LOCAL_TS
    back = mm.payment_to_transfer(mm.payment_to_domain(d))
    assert back.last_updated_at == WIRE_TS
    assert back.last_updated_at.utcoffset() == timedelta(0)


def test_sale_items_are_not_cascaded():
    d = t.SaleDTO(
        **_common(),
        type="SALE",
        user_id=2,
        customer_id=9,
        subtotal=3.0,
        tax=0.0,
        discount=0.0,
        total=3.0,
        created_at=WIRE_TS,
        items=[t.SaleItemDTO(quantity=1)],
    )
    domain = mm.sale_to_domain(d)
    assert not hasattr(domain, "items")
    back = mm.sale_to_transfer(domain)
    assert back.items == []
    assert back == d  # items take no part in equality
    assert back.user_id == 2


def test_product_supplier_drops_display_name():
    domain = m.ProductSupplier(
        local_id=1, uuid="ps-1", product_id=2, supplier_id=3, supplier_name="Acme"
    )
    d = mm.product_supplier_to_transfer(domain)
    assert not hasattr(d, "supplier_name")
    again = mm.product_supplier_to_domain(d)
    assert again.supplier_name is None
    assert again == domain


def test_flags_and_user_round_trip():
    d = t.UserDTO(**_common(deleted=True), username="u", role="ADMIN", active=False)
    domain = mm.user_to_domain(d)
    assert domain.is_deleted is True
    assert domain.is_active is False
    assert mm.user_to_transfer(domain) == d



# ------------------------- fully populated pairs -------------------------

def _full(dto_cls, model_cls, **fields):
    """A transfer object with every field set, and the domain model it maps to."""
    dto = dto_cls(**_common(deleted=True), **fields)
    domain_fields = {}
    for key, value in fields.items():
        if isinstance(value, datetime):
            value = value.replace(tzinfo=None)
        domain_fields["is_active" if key == "active" else key] = value
    domain = model_cls(
        local_id=7,
        uuid="u-7",
        tenant_id="t-1",
        last_updated_at=LOCAL_TS,
        is_synced=True,
        is_deleted=True,
        **domain_fields,
    )
    return dto, domain


FULL = [
    (
        mm.tenant_to_domain, mm.tenant_to_transfer,
        t.TenantDTO(local_id=1, uuid="t-1", license_key="LIC", owner_email="o@shop.test",
                    status="active", expiry_date=date(2026, 12, 31), created_at=WIRE_TS, synced=True),
        m.Tenant(local_id=1, uuid="t-1", license_key="LIC", owner_email="o@shop.test",
                 status="active", expiry_date=date(2026, 12, 31), created_at=LOCAL_TS, is_synced=True),
    ),
    (
        mm.setting_to_domain, mm.setting_to_transfer,
        *_full(t.SettingDTO, m.Setting, setting_key="currency", setting_value="CHF"),
    ),
    (
        mm.user_to_domain, mm.user_to_transfer,
        *_full(t.UserDTO, m.User, username="cashier", firstname="Cay", lastname="Shier",
               password_hash="$2b$12$abc", email="cay@shop.test", phone="555-0100",
               role="CASHIER", active=False),
    ),
    (
        mm.supplier_to_domain, mm.supplier_to_transfer,
        *_full(t.SupplierDTO, m.Supplier, name="Acme", contact_person="Wile",
               email="sales@acme.test", phone="555-0101", address="1 Desert Rd",
               payment_terms="NET30", credit_limit=500.0),
    ),
    (
        mm.customer_to_domain, mm.customer_to_transfer,
        *_full(t.CustomerDTO, m.Customer, name="Ann", email="ann@mail.test", phone="555-0202",
               address="2 Main St", loyalty_points=12),
    ),
    (
        mm.category_to_domain, mm.category_to_transfer,
        *_full(t.CategoryDTO, m.Category, name="Drinks", description="Cold drinks",
               parent_id=1, parent_uuid="c-1"),
    ),
    (
        mm.unit_to_domain, mm.unit_to_transfer,
        *_full(t.UnitDTO, m.Unit, name="Piece", abbreviation="pc"),
    ),
    (
        mm.product_to_domain, mm.product_to_transfer,
        *_full(t.ProductDTO, m.Product, sku="COLA-1", barcode="400", name="Cola",
               description="0.5 l", product_type="PHYSICAL", category_id=3, category_uuid="c-3",
               unit_id=4, unit_uuid="n-4", supplier_id=5, supplier_uuid="s-5",
               purchase_price=0.8, selling_price=1.5, tax_rate=7.7, min_stock_level=2.0,
               reorder_quantity=12.0, current_stock=30.0, active=False),
    ),
    (
        mm.product_supplier_to_domain, mm.product_supplier_to_transfer,
        *_full(t.ProductSupplierDTO, m.ProductSupplier, product_id=2, product_uuid="p-2",
               supplier_id=3, supplier_uuid="s-3", supplier_product_code="AC-1"),
    ),
    (
        mm.sale_to_domain, mm.sale_to_transfer,
        *_full(t.SaleDTO, m.Sale, type="SALE", user_id=2, user_uuid="usr-2", customer_id=9,
               customer_uuid="cu-9", supplier_id=3, supplier_uuid="s-3", subtotal=3.0,
               payment_method="CASH", tax=0.2, discount=0.1, total=3.1, payment_status="paid",
               notes="till 2", created_at=WIRE_TS),
    ),
    (
        mm.sale_item_to_domain, mm.sale_item_to_transfer,
        *_full(t.SaleItemDTO, m.SaleItem, sale_id=1, sale_uuid="s-1", product_id=2,
               product_uuid="p-2", supplier_product_code="AC-1", quantity=2.0, unit_price=1.5,
               cost_at_sale=1.0, tax_rate=7.7, discount=0.5, total=2.5),
    ),
    (
        mm.payment_to_domain, mm.payment_to_transfer,
        *_full(t.PaymentDTO, m.Payment, sale_id=1, sale_uuid="s-1", amount=3.1,
               payment_method="CARD", reference="TX-1", user_id=2, created_at=WIRE_TS),
    ),
    (
        mm.stock_ledger_to_domain, mm.stock_ledger_to_transfer,
        *_full(t.StockLedgerDTO, m.StockLedger, product_id=2, product_uuid="p-2",
               quantity_delta=-1.0, reason="SALE", sale_item_id=4, sale_item_uuid="si-4",
               user_id=2, user_uuid="usr-2", notes="till 2", created_at=WIRE_TS),
    ),
]
FULL_IDS = [type(case[2]).__name__ for case in FULL]


def test_full_cases_cover_every_pair():
    assert [(c[0], c[1]) for c in FULL] == PAIRS


@pytest.mark.parametrize("to_domain,to_transfer,dto,domain", FULL, ids=FULL_IDS)
def test_transfer_first_round_trip(to_domain, to_transfer, dto, domain):
    assert all(getattr(dto, f.name) is not None for f in dataclasses.fields(dto))
    assert to_domain(dto) == domain
    assert to_transfer(to_domain(dto)) == dto


@pytest.mark.parametrize("to_domain,to_transfer,dto,domain", FULL, ids=FULL_IDS)
def test_domain_first_round_trip(to_domain, to_transfer, dto, domain):
    assert to_transfer(domain) == dto
    assert to_domain(to_transfer(domain)) == domain
