from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import aliased

from whmapping.constants.error_codes import ErrorCode
from whmapping.constants.movement_action import MovementAction
from whmapping.models.inventory.location_models import Location
from whmapping.models.inventory.sku_models import Sku
from whmapping.models.inventory.movement_log_models import MovementLog
from whmapping.schemas.inventory.movement_log_schemas import (
    DeleteResult,
    MovementLogFilters,
    MovementLogListData,
    MovementLogStats,
    MovementRecord,
    Pagination,
)
from whmapping.utils.response import ActionResult
from whmapping.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_LIMIT = 50
MAX_LIMIT = 200


# =====================================================
# FILTERS
# =====================================================
def _parse_action(value: str | None) -> MovementAction | None:
    if not value:
        return None
    try:
        return MovementAction(value.strip().upper())
    except ValueError:
        # unknown actions are ignored, not rejected
        return None


def _build_filters(filters: MovementLogFilters, *, partial_match: bool) -> list:
    """``partial_match`` switches sku/location to case-insensitive substring search."""
    conditions = []

    action = _parse_action(filters.action)
    if action:
        conditions.append(MovementLog.action == action)

    if filters.sku:
        sku_code = filters.sku.strip().upper()
        sku_ids = select(Sku.id).where(
            Sku.code.ilike(f"%{sku_code}%") if partial_match else Sku.code == sku_code
        )
        conditions.append(MovementLog.sku_id.in_(sku_ids))

    if filters.location:
        location_code = filters.location.strip().upper()
        location_ids = select(Location.id).where(
            Location.code.ilike(f"%{location_code}%")
            if partial_match
            else Location.code == location_code
        )
        conditions.append(
            or_(
                MovementLog.from_location_id.in_(location_ids),
                MovementLog.to_location_id.in_(location_ids),
            )
        )

    if filters.user:
        conditions.append(MovementLog.user == filters.user)

    return conditions


# =====================================================
# MAPPER
# =====================================================
def _map_log(log: MovementLog) -> MovementRecord:
    return MovementRecord(
        id=log.id,
        action=log.action,
        sku_code=log.sku.code,
        item_code=log.sku.item_code,
        sku_name=log.sku.name,
        from_location_code=log.from_location.code if log.from_location else None,
        to_location_code=log.to_location.code if log.to_location else None,
        qty=log.qty,
        user=log.user,
        handler_name=log.handler_name,
        note=log.note,
        created_at=log.created_at,
    )


# =====================================================
# LIST
# =====================================================
async def list_movement_logs(
    db: AsyncSession,
    filters: MovementLogFilters,
    limit: int = DEFAULT_LIMIT,
    offset: int = 0,
) -> ActionResult[MovementLogListData]:
    limit = max(1, min(limit, MAX_LIMIT))
    offset = max(0, offset)
    conditions = _build_filters(filters, partial_match=False)

    try:
        total = await db.scalar(
            select(func.count(MovementLog.id)).where(*conditions)
        )

        logs = (
            await db.execute(
                select(MovementLog)
                .where(*conditions)
                .order_by(MovementLog.created_at.desc(), MovementLog.id.desc())
                .offset(offset)
                .limit(limit)
            )
        ).scalars().all()

    except SQLAlchemyError:
        logger.exception("Fetching movement logs failed")
        return ActionResult.fail(
            ErrorCode.TRANSACTION_ERROR, "Failed to fetch movement logs"
        )

    total = total or 0

    logger.info(
        "Movement logs fetched",
        extra={"total": total, "limit": limit, "offset": offset},
    )

    return ActionResult.ok(
        MovementLogListData(
            items=[_map_log(log) for log in logs],
            pagination=Pagination(
                total=total,
                limit=limit,
                offset=offset,
                has_more=offset + limit < total,
            ),
        )
    )


# =====================================================
# STATS
# =====================================================
async def movement_log_stats(
    db: AsyncSession,
    filters: MovementLogFilters,
) -> ActionResult[MovementLogStats]:
    FromLocation = aliased(Location)
    ToLocation = aliased(Location)

    stmt = (
        select(
            FromLocation.code,
            ToLocation.code,
            Sku.item_code,
            Sku.code,
            MovementLog.qty,
        )
        .join(Sku, MovementLog.sku_id == Sku.id)
        .outerjoin(FromLocation, MovementLog.from_location_id == FromLocation.id)
        .outerjoin(ToLocation, MovementLog.to_location_id == ToLocation.id)
        .where(*_build_filters(filters, partial_match=True))
    )

    try:
        rows = (await db.execute(stmt)).all()
    except SQLAlchemyError:
        logger.exception("Fetching movement log stats failed")
        return ActionResult.fail(ErrorCode.TRANSACTION_ERROR, "Failed to fetch stats")

    locations: set[str] = set()
    item_codes: set[str] = set()
    eans: set[str] = set()
    total_quantity = 0

    for from_code, to_code, item_code, sku_code, qty in rows:
        if from_code:
            locations.add(from_code)
        if to_code:
            locations.add(to_code)
        if item_code:
            item_codes.add(item_code)
        eans.add(sku_code)
        total_quantity += qty

    return ActionResult.ok(
        MovementLogStats(
            total_locations=len(locations),
            total_skus=len(item_codes),
            total_eans=len(eans),
            total_quantity=total_quantity,
        )
    )


# =====================================================
# MAINTENANCE DELETE
# =====================================================
async def delete_movement_logs(
    db: AsyncSession,
    ids: list[int],
) -> ActionResult[DeleteResult]:
    if not ids:
        return ActionResult.fail(
            ErrorCode.VALIDATION_ERROR, "Invalid request: ids array is required"
        )

    try:
        result = await db.execute(
            delete(MovementLog).where(MovementLog.id.in_(ids))
        )
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Bulk delete of movement logs failed")
        return ActionResult.fail(ErrorCode.TRANSACTION_ERROR, "Failed to delete logs")

    logger.info("Movement logs deleted", extra={"deleted": result.rowcount})
    return ActionResult.ok(DeleteResult(deleted=result.rowcount))


async def delete_movement_log(
    db: AsyncSession,
    log_id: int,
) -> ActionResult[DeleteResult]:
    try:
        log = await db.get(MovementLog, log_id)
        if not log:
            return ActionResult.fail(
                ErrorCode.NOT_FOUND, f"Movement log {log_id} not found"
            )

        await db.delete(log)
        await db.commit()
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Delete of movement log failed", extra={"log_id": log_id})
        return ActionResult.fail(ErrorCode.TRANSACTION_ERROR, "Failed to delete log")

    logger.info("Movement log deleted", extra={"log_id": log_id})
    return ActionResult.ok(DeleteResult(deleted=1))
