import pytest

from whmapping.constants.error_codes import ErrorCode
from whmapping.schemas.inventory.ledger_schemas import (
    AdjustRequest,
    MoveRequest,
    PutawayItem,
    PutawayRequest,
)
from whmapping.services.inventory.ledger_service import adjust, move, putaway
from whmapping.services.inventory.location_service import list_locations
from whmapping.services.inventory.lookup_service import (
    get_available_qty,
    lookup_by_location,
    lookup_by_sku,
)
from whmapping.services.inventory.sku_service import list_skus


@pytest.fixture
def warehouse(run_db):
    run_db(
        putaway,
        PutawayRequest(
            location_code="A1-01",
            items=[
                PutawayItem(sku_code="5901234123457", item_code="WID-A", qty=10),
                PutawayItem(sku_code="4006381333931", qty=4),
            ],
        ),
    )
    run_db(
        putaway,
        PutawayRequest(
            location_code="B2-01",
            items=[PutawayItem(sku_code="5901234123457", qty=6)],
        ),
    )
    # emptied balance: row stays at 0 and must not be listed
    run_db(
        adjust,
        AdjustRequest(location_code="A1-01", sku_code="4006381333931", qty=-4, note="scrap"),
    )


def test_lookup_by_location(run_db, warehouse):
    result = run_db(lookup_by_location, " a1-01 ")

    assert result.success
    data = result.data
    assert data.location_code == "A1-01"
    assert [i.sku_code for i in data.items] == ["5901234123457"]
    assert data.items[0].item_code == "WID-A"
    assert data.total_items == 1
    assert data.total_qty == 10


def test_lookup_by_location_not_found(run_db):
    result = run_db(lookup_by_location, "Q9-99")

    assert result.error_code == ErrorCode.NOT_FOUND
    assert result.message == 'Location "Q9-99" not found'


def test_lookup_by_location_blank_code(run_db):
    result = run_db(lookup_by_location, "   ")

    assert result.error_code == ErrorCode.VALIDATION_ERROR


def test_lookup_by_sku(run_db, warehouse):
    result = run_db(lookup_by_sku, "5901234123457")

    assert result.success
    data = result.data
    assert [l.location_code for l in data.locations] == ["A1-01", "B2-01"]
    assert data.total_locations == 2
    assert data.total_qty == 16


def test_lookup_by_sku_falls_back_to_item_code(run_db, warehouse):
    result = run_db(lookup_by_sku, "wid-a")

    assert result.success
    assert result.data.sku_code == "5901234123457"


def test_lookup_by_sku_not_found(run_db, warehouse):
    result = run_db(lookup_by_sku, "nope")

    assert result.error_code == ErrorCode.NOT_FOUND
    assert result.message == 'EN "NOPE" not found'


def test_available_qty(run_db, warehouse):
    assert run_db(get_available_qty, "a1-01", "5901234123457").data.qty == 10

    missing = run_db(get_available_qty, "A1-01", "0000000000000")
    assert missing.success
    assert missing.data.qty == 0
    assert missing.data.sku_name is None


def test_available_qty_follows_moves(run_db, warehouse):
    run_db(
        move,
        MoveRequest(
            from_location_code="A1-01",
            to_location_code="B2-01",
            sku_code="5901234123457",
            qty=3,
        ),
    )

    assert run_db(get_available_qty, "A1-01", "5901234123457").data.qty == 7
    assert run_db(get_available_qty, "B2-01", "5901234123457").data.qty == 9


def test_list_locations_counts_stocked_skus(run_db, warehouse):
    items = run_db(list_locations, None, 20)

    assert [(l.code, l.sku_count) for l in items] == [("A1-01", 1), ("B2-01", 1)]


def test_list_locations_search(run_db, warehouse):
    items = run_db(list_locations, "b2", 20)

    assert [l.code for l in items] == ["B2-01"]


def test_list_skus_totals(run_db, warehouse):
    items = {s.code: s for s in run_db(list_skus, None, 20)}

    assert items["5901234123457"].total_qty == 16
    assert items["5901234123457"].location_count == 2
    assert items["4006381333931"].total_qty == 0
    assert items["4006381333931"].location_count == 0


def test_list_skus_search_by_code(run_db, warehouse):
    items = run_db(list_skus, "400638", 20)

    assert [s.code for s in items] == ["4006381333931"]
