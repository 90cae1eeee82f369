import json
from datetime import date, datetime, timezone

from syncpos.dto import (
    CategoryDTO,
    PaymentDTO,
    ProductDTO,
    SaleDTO,
    SaleItemDTO,
    TenantDTO,
    UserDTO,
    dumps,
    from_wire,
    loads,
    to_wire,
)

TS = datetime(2025, 3, 1, 10, 30, tzinfo=timezone.utc)


def test_local_keys_never_reach_the_wire():
    p = ProductDTO(
        local_id=11,
        uuid="p-1",
        tenant_id="t-1",
        name="Cola",
        category_id=3,
        category_uuid="c-3",
        unit_id=4,
        supplier_id=5,
        synced=True,
    )
    wire = to_wire(p)
    for key in ("local_id", "id", "is_synced", "synced", "category_id", "unit_id", "supplier_id"):
        assert key not in wire
    assert wire["uuid"] == "p-1"
    assert wire["category_uuid"] == "c-3"
    assert wire["unit_uuid"] is None
    assert wire["is_deleted"] is False
    assert wire["is_active"] is True


def test_absent_fields_are_explicit_nulls():
    wire = to_wire(CategoryDTO(uuid="c-1"))
    assert wire["description"] is None
    assert wire["parent_uuid"] is None
    assert wire["last_updated_at"] is None


def test_timestamps_carry_offset():
    wire = to_wire(PaymentDTO(uuid="pay-1", last_updated_at=TS, created_at=TS))
    assert wire["created_at"] == "2025-03-01T10:30:00+00:00"
    assert wire["last_updated_at"].endswith("+00:00")


def test_user_id_travels_as_is():
    assert to_wire(PaymentDTO(user_id=3))["user_id"] == 3
    assert to_wire(SaleDTO(user_id=3))["user_id"] == 3


def test_from_wire_accepts_z_suffix_and_ignores_unknown_keys():
    p = from_wire(
        PaymentDTO,
        {"uuid": "pay-1", "created_at": "2025-03-01T10:30:00Z", "amount": 3.5, "server_only": 1},
    )
    assert p.uuid == "pay-1"
    assert p.created_at == TS
    assert p.amount == 3.5
    assert p.local_id is None


def test_from_wire_null_flag_takes_default():
    u = from_wire(UserDTO, {"uuid": "u-1", "is_active": None, "is_deleted": None})
    assert u.active is True
    assert u.deleted is False


def test_sale_items_travel_with_header():
    sale = SaleDTO(
        uuid="s-1",
        total=3.0,
        items=[SaleItemDTO(uuid="i-1", sale_id=1, sale_uuid="s-1", quantity=2.0)],
    )
    wire = to_wire(sale)
    assert wire["items"] == [to_wire(sale.items[0])]
    assert "sale_id" not in wire["items"][0]

    back = from_wire(SaleDTO, wire)
    assert [i.uuid for i in back.items] == ["i-1"]
    assert back.items[0].quantity == 2.0


def test_tenant_dates():
    tenant = TenantDTO(uuid="t-1", license_key="LIC", status="active", expiry_date=date(2026, 1, 31))
    wire = to_wire(tenant)
    assert wire["expiry_date"] == "2026-01-31"
    assert from_wire(TenantDTO, wire) == tenant


def test_json_helpers():
    text = dumps(CategoryDTO(uuid="c-1", name="Drinks", last_updated_at=TS))
    assert json.loads(text)["name"] == "Drinks"
    back = loads(CategoryDTO, text)
    assert back.name == "Drinks"
    assert back.last_updated_at == TS
    assert to_wire(None) is None
    assert from_wire(CategoryDTO, None) is None
