from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, and_

from whmapping.models.inventory.sku_models import Sku
from whmapping.models.inventory.inventory_balance_models import InventoryBalance
from whmapping.schemas.inventory.sku_schemas import SkuSummary
from whmapping.utils.logger import get_logger

logger = get_logger(__name__)

MAX_LIST_LIMIT = 100


# =====================================================
# RESOLVE
# =====================================================
async def get_sku_by_code(db: AsyncSession, code: str) -> Sku | None:
    return await db.scalar(select(Sku).where(Sku.code == code))


async def find_sku(db: AsyncSession, code: str) -> Sku | None:
    """EAN code first, then the secondary item code (case-insensitive)."""
    sku = await get_sku_by_code(db, code)
    if sku:
        return sku

    return await db.scalar(
        select(Sku)
        .where(func.upper(Sku.item_code) == code.upper())
        .order_by(Sku.code.asc())
        .limit(1)
    )


async def get_or_create_sku(
    db: AsyncSession,
    code: str,
    item_code: str | None = None,
) -> Sku:
    """Return the SKU with ``code``, inserting it on first reference.

    An existing SKU without an item code picks up ``item_code``; an item code
    already on file is never replaced.
    """
    sku = await get_sku_by_code(db, code)

    if not sku:
        sku = Sku(code=code, item_code=item_code)
        db.add(sku)
        await db.flush()
        await db.refresh(sku)
        logger.info("SKU created", extra={"sku_code": code})
        return sku

    if item_code and not sku.item_code:
        sku.item_code = item_code
        await db.flush()
        await db.refresh(sku)
        logger.info(
            "SKU item code backfilled",
            extra={"sku_code": code, "item_code": item_code},
        )

    return sku


async def sku_exists(db: AsyncSession, code: str) -> bool:
    sku_id = await db.scalar(
        select(Sku.id).where(Sku.code == code.strip().upper())
    )
    return sku_id is not None


# =====================================================
# LIST SKUS
# =====================================================
async def list_skus(
    db: AsyncSession,
    search: str | None,
    limit: int,
) -> list[SkuSummary]:
    stmt = (
        select(
            Sku,
            func.coalesce(func.sum(InventoryBalance.qty), 0).label("total_qty"),
            func.count(InventoryBalance.id).label("location_count"),
        )
        .outerjoin(
            InventoryBalance,
            and_(
                InventoryBalance.sku_id == Sku.id,
                InventoryBalance.qty > 0,
            ),
        )
        .group_by(Sku.id)
    )

    if search:
        term = f"%{search.strip().upper()}%"
        stmt = stmt.where(
            or_(
                Sku.code.ilike(term),
                Sku.barcode.ilike(term),
                Sku.name.ilike(term),
            )
        )

    stmt = stmt.order_by(Sku.code.asc()).limit(min(limit, MAX_LIST_LIMIT))

    rows = (await db.execute(stmt)).all()

    return [
        SkuSummary(
            id=sku.id,
            code=sku.code,
            item_code=sku.item_code,
            name=sku.name,
            barcode=sku.barcode,
            total_qty=total_qty,
            location_count=location_count,
        )
        for sku, total_qty, location_count in rows
    ]
