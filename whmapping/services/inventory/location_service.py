from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from whmapping.models.inventory.location_models import Location
from whmapping.models.inventory.inventory_balance_models import InventoryBalance
from whmapping.schemas.inventory.location_schemas import LocationSummary
from whmapping.utils.logger import get_logger

logger = get_logger(__name__)

MAX_LIST_LIMIT = 100


# =====================================================
# RESOLVE
# =====================================================
async def get_location_by_code(db: AsyncSession, code: str) -> Location | None:
    return await db.scalar(
        select(Location).where(Location.code == code)
    )


async def get_or_create_location(db: AsyncSession, code: str) -> Location:
    """Return the location with ``code``, inserting it on first reference.

    Runs inside the caller's transaction; nothing is committed here.
    """
    location = await get_location_by_code(db, code)
    if location:
        return location

    location = Location(code=code)
    db.add(location)
    await db.flush()
    await db.refresh(location)

    logger.info("Location created", extra={"location_code": code})
    return location


async def location_exists(db: AsyncSession, code: str) -> bool:
    location_id = await db.scalar(
        select(Location.id).where(Location.code == code.strip().upper())
    )
    return location_id is not None


# =====================================================
# LIST LOCATIONS
# =====================================================
async def list_locations(
    db: AsyncSession,
    search: str | None,
    limit: int,
) -> list[LocationSummary]:
    sku_count = (
        select(func.count(InventoryBalance.id))
        .where(
            InventoryBalance.location_id == Location.id,
            InventoryBalance.qty > 0,
        )
        .correlate(Location)
        .scalar_subquery()
    )

    stmt = select(Location.id, Location.code, sku_count.label("sku_count"))

    if search:
        stmt = stmt.where(Location.code.ilike(f"%{search.strip().upper()}%"))

    stmt = stmt.order_by(Location.code.asc()).limit(min(limit, MAX_LIST_LIMIT))

    rows = (await db.execute(stmt)).all()

    return [
        LocationSummary(id=r.id, code=r.code, sku_count=r.sku_count or 0)
        for r in rows
    ]
