import pytest
from pydantic import ValidationError

from whmapping.schemas.auth.identity_schemas import CurrentUser
from whmapping.schemas.inventory.ledger_schemas import (
    AdjustRequest,
    MoveRequest,
    PutawayItem,
    PutawayRequest,
)


def test_codes_are_trimmed_and_uppercased():
    payload = MoveRequest(
        from_location_code=" a1-01 ",
        to_location_code="b1-01",
        sku_code=" ean-1 ",
        qty=1,
        handler_name="  ",
    )

    assert payload.from_location_code == "A1-01"
    assert payload.to_location_code == "B1-01"
    assert payload.sku_code == "EAN-1"
    assert payload.handler_name is None


def test_numeric_sku_code_is_accepted():
    assert PutawayItem(sku_code=5901234123457, qty=1).sku_code == "5901234123457"


@pytest.mark.parametrize("qty", [0, -1])
def test_putaway_qty_must_be_positive(qty):
    with pytest.raises(ValidationError):
        PutawayItem(sku_code="SKU1", qty=qty)


def test_putaway_requires_items():
    with pytest.raises(ValidationError):
        PutawayRequest(location_code="A1-01", items=[])


@pytest.mark.parametrize(
    "kwargs",
    [
        {"location_code": "   "},
        {"location_code": "L" * 51},
        {"location_code": None},
    ],
)
def test_location_code_bounds(kwargs):
    with pytest.raises(ValidationError):
        PutawayRequest(items=[PutawayItem(sku_code="SKU1", qty=1)], **kwargs)


def test_sku_code_max_length():
    PutawayItem(sku_code="9" * 100, qty=1)
    with pytest.raises(ValidationError):
        PutawayItem(sku_code="9" * 101, qty=1)


def test_adjust_allows_signed_qty_and_keeps_note_raw():
    payload = AdjustRequest(location_code="a1", sku_code="s1", qty=-5, note="  ")

    assert payload.qty == -5
    assert payload.note == "  "


def test_current_user_display_name_fallbacks():
    assert CurrentUser(sub="u1", name="Alice", email="a@x").display_name == "Alice"
    assert CurrentUser(sub="u1", email="a@x").display_name == "a@x"
    assert CurrentUser(sub="u1").display_name == "u1"
    assert CurrentUser(sub="u1", role="ADMIN").is_admin
