"""
Item master import (EAN -> item code / name / details) from an .xlsx export.

Expected header row (first sheet): "Item Code", "EAN", "Item Name" and
"Details" or "Item Details". Column order does not matter; extra columns are
ignored. Existing SKUs are only completed, never overwritten.
"""

import asyncio
import os
import zipfile
from typing import Any, BinaryIO

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from whmapping.constants.error_codes import ErrorCode
from whmapping.core.exceptions import NotFoundError, ValidationError
from whmapping.models.inventory.sku_models import Sku
from whmapping.schemas.inventory.ledger_schemas import SKU_CODE_MAX
from whmapping.schemas.inventory.sku_schemas import ItemMasterImportSummary
from whmapping.services.inventory.sku_service import get_sku_by_code
from whmapping.utils.response import ActionResult
from whmapping.utils.logger import get_logger

logger = get_logger(__name__)

ITEM_CODE_HEADER = "item code"
EAN_HEADER = "ean"
NAME_HEADER = "item name"
DETAILS_HEADERS = ("details", "item details")


# =====================================================
# WORKBOOK READING
# =====================================================
def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    # EANs typed as numbers come back as int/float
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def read_item_master_rows(source: str | BinaryIO) -> list[dict[str, str]]:
    """Return one dict per data row with keys item_code, ean, name, details."""
    workbook = load_workbook(source, read_only=True, data_only=True)
    try:
        if not workbook.worksheets:
            raise ValidationError("No sheets found in workbook")

        rows = workbook.worksheets[0].iter_rows(values_only=True)

        header: dict[str, int] | None = None
        records: list[dict[str, str]] = []

        for row in rows:
            cells = [_cell_text(v) for v in row]

            if header is None:
                if not any(cells):
                    continue
                header = {c.lower(): i for i, c in enumerate(cells) if c}
                continue

            def pick(*names: str) -> str:
                for name in names:
                    idx = header.get(name)
                    if idx is not None and idx < len(cells) and cells[idx]:
                        return cells[idx]
                return ""

            records.append(
                {
                    "item_code": pick(ITEM_CODE_HEADER),
                    "ean": pick(EAN_HEADER),
                    "name": pick(NAME_HEADER),
                    "details": pick(*DETAILS_HEADERS),
                }
            )

        return records
    finally:
        workbook.close()


# =====================================================
# IMPORT
# =====================================================
async def import_item_master(
    db: AsyncSession,
    source: str | BinaryIO,
) -> ActionResult[ItemMasterImportSummary]:
    if isinstance(source, str) and not os.path.exists(source):
        return ActionResult.fail(
            NotFoundError.error_code, f"{os.path.basename(source)} not found"
        )

    try:
        rows = await asyncio.to_thread(read_item_master_rows, source)
    except ValidationError as exc:
        return ActionResult.fail(exc.error_code, exc.message)
    except (InvalidFileException, zipfile.BadZipFile, KeyError):
        logger.warning("Item master workbook unreadable", extra={"source": str(source)})
        return ActionResult.fail(
            ErrorCode.VALIDATION_ERROR, "Invalid Item Master workbook"
        )

    imported = updated = unchanged = skipped = 0

    try:
        for row in rows:
            ean = row["ean"].upper()
            item_code = row["item_code"].upper()

            if not ean or not item_code:
                skipped += 1
                continue

            if len(ean) > SKU_CODE_MAX or len(item_code) > SKU_CODE_MAX:
                logger.warning(
                    "Item master row skipped: code too long",
                    extra={"ean": ean[:SKU_CODE_MAX], "item_code": item_code[:SKU_CODE_MAX]},
                )
                skipped += 1
                continue

            sku = await get_sku_by_code(db, ean)

            if not sku:
                db.add(
                    Sku(
                        code=ean,
                        item_code=item_code,
                        name=row["name"] or None,
                        details=row["details"] or None,
                    )
                )
                await db.flush()
                imported += 1
                continue

            changed = False
            for field, value in (
                ("item_code", item_code),
                ("name", row["name"]),
                ("details", row["details"]),
            ):
                if value and not getattr(sku, field):
                    setattr(sku, field, value)
                    changed = True

            if changed:
                await db.flush()
                updated += 1
            else:
                unchanged += 1

        await db.commit()

    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Item master import failed")
        return ActionResult.fail(
            ErrorCode.TRANSACTION_ERROR, "Failed to import Item Master data"
        )

    summary = ItemMasterImportSummary(
        imported=imported,
        updated=updated,
        unchanged=unchanged,
        skipped=skipped,
        total=len(rows),
    )
    logger.info("Item master imported", extra=summary.model_dump())
    return ActionResult.ok(summary)
