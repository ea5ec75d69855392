from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from whmapping.constants.error_codes import ErrorCode
from whmapping.models.inventory.location_models import Location
from whmapping.models.inventory.sku_models import Sku
from whmapping.models.inventory.inventory_balance_models import InventoryBalance
from whmapping.schemas.inventory.ledger_schemas import normalize_code
from whmapping.schemas.inventory.inventory_schemas import (
    AvailableQty,
    LocationInventory,
    LocationItem,
    SkuLocation,
    SkuLocations,
)
from whmapping.services.inventory.location_service import get_location_by_code
from whmapping.services.inventory.sku_service import find_sku
from whmapping.utils.response import ActionResult
from whmapping.utils.logger import get_logger

logger = get_logger(__name__)


# =====================================================
# BY LOCATION
# =====================================================
async def lookup_by_location(
    db: AsyncSession,
    location_code: str,
) -> ActionResult[LocationInventory]:
    code = normalize_code(location_code)
    if not code:
        return ActionResult.fail(ErrorCode.VALIDATION_ERROR, "Location code is required")

    try:
        location = await get_location_by_code(db, code)
        if not location:
            return ActionResult.fail(
                ErrorCode.NOT_FOUND, f'Location "{code}" not found'
            )

        rows = (
            await db.execute(
                select(InventoryBalance.qty, Sku)
                .join(Sku, InventoryBalance.sku_id == Sku.id)
                .where(
                    InventoryBalance.location_id == location.id,
                    InventoryBalance.qty > 0,
                )
                .order_by(Sku.code.asc())
            )
        ).all()

    except SQLAlchemyError:
        logger.exception("Lookup by location failed", extra={"location_code": code})
        return ActionResult.fail(
            ErrorCode.TRANSACTION_ERROR, "Failed to lookup location"
        )

    items = [
        LocationItem(
            sku_id=sku.id,
            sku_code=sku.code,
            item_code=sku.item_code,
            sku_name=sku.name,
            qty=qty,
        )
        for qty, sku in rows
    ]

    return ActionResult.ok(
        LocationInventory(
            location_id=location.id,
            location_code=location.code,
            items=items,
            total_items=len(items),
            total_qty=sum(i.qty for i in items),
        )
    )


# =====================================================
# BY SKU
# =====================================================
async def lookup_by_sku(
    db: AsyncSession,
    sku_code: str,
) -> ActionResult[SkuLocations]:
    code = normalize_code(sku_code)
    if not code:
        return ActionResult.fail(ErrorCode.VALIDATION_ERROR, "EAN code is required")

    try:
        sku = await find_sku(db, code)
        if not sku:
            return ActionResult.fail(ErrorCode.NOT_FOUND, f'EN "{code}" not found')

        rows = (
            await db.execute(
                select(InventoryBalance.qty, Location.id, Location.code)
                .join(Location, InventoryBalance.location_id == Location.id)
                .where(
                    InventoryBalance.sku_id == sku.id,
                    InventoryBalance.qty > 0,
                )
                .order_by(Location.code.asc())
            )
        ).all()

    except SQLAlchemyError:
        logger.exception("Lookup by SKU failed", extra={"sku_code": code})
        return ActionResult.fail(ErrorCode.TRANSACTION_ERROR, "Failed to lookup SKU")

    locations = [
        SkuLocation(location_id=location_id, location_code=location_code, qty=qty)
        for qty, location_id, location_code in rows
    ]

    return ActionResult.ok(
        SkuLocations(
            sku_id=sku.id,
            sku_code=sku.code,
            item_code=sku.item_code,
            sku_name=sku.name,
            barcode=sku.barcode,
            locations=locations,
            total_locations=len(locations),
            total_qty=sum(l.qty for l in locations),
        )
    )


# =====================================================
# AVAILABLE QUANTITY (move pre-check)
# =====================================================
async def get_available_qty(
    db: AsyncSession,
    location_code: str,
    sku_code: str,
) -> ActionResult[AvailableQty]:
    try:
        row = (
            await db.execute(
                select(InventoryBalance.qty, Sku.name)
                .join(Sku, InventoryBalance.sku_id == Sku.id)
                .join(Location, InventoryBalance.location_id == Location.id)
                .where(
                    Location.code == normalize_code(location_code),
                    Sku.code == normalize_code(sku_code),
                )
            )
        ).first()

    except SQLAlchemyError:
        logger.exception(
            "Available quantity check failed",
            extra={"location_code": location_code, "sku_code": sku_code},
        )
        return ActionResult.fail(
            ErrorCode.TRANSACTION_ERROR, "Failed to get available quantity"
        )

    if not row:
        return ActionResult.ok(AvailableQty(qty=0, sku_name=None))

    return ActionResult.ok(AvailableQty(qty=row.qty, sku_name=row.name))
