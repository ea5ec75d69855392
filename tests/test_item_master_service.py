import pytest
from openpyxl import Workbook

from whmapping.constants.error_codes import ErrorCode
from whmapping.schemas.inventory.ledger_schemas import PutawayItem, PutawayRequest
from whmapping.services.inventory.item_master_service import (
    import_item_master,
    read_item_master_rows,
)
from whmapping.services.inventory.ledger_service import putaway
from whmapping.services.inventory.sku_service import get_sku_by_code


def _write_workbook(path, rows):
    wb = Workbook()
    ws = wb.active
    for row in rows:
        ws.append(row)
    wb.save(path)
    return str(path)


@pytest.fixture
def item_master(tmp_path):
    return _write_workbook(
        tmp_path / "Item Master.xlsx",
        [
            [],
            ["Item Name", "EAN", "Item Code", "Details", "Ignored"],
            ["Widget A", 5901234123457, "wid-a", "Blue, 10 pack", "x"],
            ["Widget B", "4006381333931", "WID-B", None, None],
            ["No code", "1111111111111", None, None, None],
            ["Too long", "9" * 101, "LONG", None, None],
        ],
    )


def test_read_rows_maps_headers(item_master):
    rows = read_item_master_rows(item_master)

    assert rows[0] == {
        "item_code": "wid-a",
        "ean": "5901234123457",
        "name": "Widget A",
        "details": "Blue, 10 pack",
    }
    assert rows[1]["details"] == ""
    assert len(rows) == 4


def test_read_rows_accepts_item_details_header(tmp_path):
    path = _write_workbook(
        tmp_path / "im.xlsx",
        [["EAN", "Item Code", "Item Details"], ["123", "C1", "boxed"]],
    )

    assert read_item_master_rows(path)[0]["details"] == "boxed"


def test_import_creates_skus(run_db, item_master):
    result = run_db(import_item_master, item_master)

    assert result.success
    summary = result.data
    assert summary.imported == 2
    assert summary.skipped == 2
    assert summary.total == 4

    sku = run_db(get_sku_by_code, "5901234123457")
    assert sku.item_code == "WID-A"
    assert sku.name == "Widget A"
    assert sku.details == "Blue, 10 pack"


def test_import_only_fills_missing_fields(run_db, item_master):
    run_db(
        putaway,
        PutawayRequest(
            location_code="A1-01",
            items=[PutawayItem(sku_code="5901234123457", item_code="OLD", qty=1)],
        ),
    )

    summary = run_db(import_item_master, item_master).data

    assert summary.imported == 1
    assert summary.updated == 1
    sku = run_db(get_sku_by_code, "5901234123457")
    assert sku.item_code == "OLD"
    assert sku.name == "Widget A"


def test_import_twice_is_unchanged(run_db, item_master):
    run_db(import_item_master, item_master)

    summary = run_db(import_item_master, item_master).data

    assert summary.imported == 0
    assert summary.updated == 0
    assert summary.unchanged == 2


def test_import_missing_file(run_db, tmp_path):
    result = run_db(import_item_master, str(tmp_path / "Item Master.xlsx"))

    assert result.error_code == ErrorCode.NOT_FOUND
    assert result.message == "Item Master.xlsx not found"


def test_import_corrupt_workbook(run_db, tmp_path):
    path = tmp_path / "Item Master.xlsx"
    path.write_bytes(b"not a workbook")

    result = run_db(import_item_master, str(path))

    assert not result.success
    assert result.error_code == ErrorCode.VALIDATION_ERROR
    assert result.message == "Invalid Item Master workbook"
