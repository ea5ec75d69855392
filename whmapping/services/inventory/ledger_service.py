from typing import Awaitable, Callable, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import lazyload
from pydantic import ValidationError as SchemaValidationError

from whmapping.core.config import DEFAULT_ACTOR
from whmapping.core.exceptions import (
    LedgerError,
    ValidationError,
    NotFoundError,
    InsufficientQuantityError,
    NegativeBalanceError,
    TransactionError,
)
from whmapping.constants.movement_action import MovementAction
from whmapping.models.inventory.location_models import Location
from whmapping.models.inventory.sku_models import Sku
from whmapping.models.inventory.inventory_balance_models import InventoryBalance
from whmapping.models.inventory.movement_log_models import MovementLog
from whmapping.schemas.inventory.ledger_schemas import (
    PutawayRequest,
    PutawayItem,
    MoveRequest,
    AdjustRequest,
)
from whmapping.schemas.inventory.inventory_schemas import InventoryRecord, MoveResult
from whmapping.services.inventory.location_service import (
    get_location_by_code,
    get_or_create_location,
)
from whmapping.services.inventory.sku_service import get_sku_by_code, get_or_create_sku
from whmapping.utils.response import ActionResult
from whmapping.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


# =====================================================
# HELPERS
# =====================================================
def _actor(user: str | None) -> str:
    if user and user.strip():
        return user.strip()
    return DEFAULT_ACTOR


def _map_record(
    balance: InventoryBalance,
    location: Location,
    sku: Sku,
) -> InventoryRecord:
    return InventoryRecord(
        id=balance.id,
        location_code=location.code,
        sku_code=sku.code,
        item_code=sku.item_code,
        sku_name=sku.name,
        qty=balance.qty,
        updated_at=balance.updated_at,
    )


def _rejected(exc: LedgerError, operation: str, **context) -> ActionResult:
    logger.warning(
        "%s rejected: %s",
        operation,
        exc.message,
        extra={"error_code": exc.error_code.value, **context},
    )
    return ActionResult.fail(exc.error_code, exc.message)


async def _run_in_transaction(
    db: AsyncSession,
    operation: str,
    work: Callable[[], Awaitable[T]],
    **context,
) -> ActionResult[T]:
    """Run ``work`` and commit, or roll everything back.

    Balance writes and their movement log rows share this one transaction.
    """
    try:
        data = await work()
        await db.commit()

    except LedgerError as exc:
        await db.rollback()
        return _rejected(exc, operation, **context)

    except IntegrityError:
        await db.rollback()
        logger.exception("%s hit a constraint violation", operation, extra=context)
        return _rejected(
            TransactionError("Concurrent inventory update detected"),
            operation,
            **context,
        )

    except SQLAlchemyError:
        await db.rollback()
        logger.exception("%s transaction failed", operation, extra=context)
        return _rejected(
            TransactionError(f"Failed to {operation} inventory"),
            operation,
            **context,
        )

    logger.info("%s committed", operation, extra=context)
    return ActionResult.ok(data)


# =====================================================
# BALANCE PRIMITIVES (caller's transaction)
# =====================================================
async def _lock_balance(
    db: AsyncSession,
    location_id: int,
    sku_id: int,
) -> InventoryBalance | None:
    return await db.scalar(
        select(InventoryBalance)
        .options(lazyload("*"))
        .where(
            InventoryBalance.location_id == location_id,
            InventoryBalance.sku_id == sku_id,
        )
        .with_for_update()
    )


async def _increment_balance(
    db: AsyncSession,
    location: Location,
    sku: Sku,
    qty: int,
) -> InventoryBalance:
    balance = await _lock_balance(db, location.id, sku.id)

    if not balance:
        balance = InventoryBalance(location_id=location.id, sku_id=sku.id, qty=qty)
        db.add(balance)
    else:
        balance.qty = InventoryBalance.qty + qty

    await db.flush()
    await db.refresh(balance)
    return balance


async def _decrement_balance(
    db: AsyncSession,
    balance: InventoryBalance,
    qty: int,
) -> InventoryBalance:
    balance.qty = InventoryBalance.qty - qty
    await db.flush()
    await db.refresh(balance)
    return balance


def _append_log(
    db: AsyncSession,
    *,
    action: MovementAction,
    sku: Sku,
    qty: int,
    user: str,
    from_location: Location | None = None,
    to_location: Location | None = None,
    handler_name: str | None = None,
    note: str | None = None,
) -> None:
    db.add(
        MovementLog(
            action=action,
            sku_id=sku.id,
            from_location_id=from_location.id if from_location else None,
            to_location_id=to_location.id if to_location else None,
            qty=qty,
            user=user,
            handler_name=handler_name,
            note=note,
        )
    )


# =====================================================
# PUTAWAY
# =====================================================
async def putaway(
    db: AsyncSession,
    payload: PutawayRequest,
    user: str | None = None,
) -> ActionResult[list[InventoryRecord]]:
    """Add stock of one or more SKUs to a location.

    The location and any unknown SKU are created on first reference. Every
    item gets its own PUTAWAY log row; a failure on any item discards the
    whole batch.
    """
    actor = _actor(user)

    async def work() -> list[InventoryRecord]:
        location = await get_or_create_location(db, payload.location_code)
        records: list[InventoryRecord] = []

        for item in payload.items:
            sku = await get_or_create_sku(db, item.sku_code, item.item_code)
            balance = await _increment_balance(db, location, sku, item.qty)

            _append_log(
                db,
                action=MovementAction.PUTAWAY,
                sku=sku,
                to_location=location,
                qty=item.qty,
                user=actor,
                handler_name=payload.handler_name,
                note=payload.note,
            )
            records.append(_map_record(balance, location, sku))

        await db.flush()
        return records

    return await _run_in_transaction(
        db,
        "putaway",
        work,
        location_code=payload.location_code,
        item_count=len(payload.items),
        user=actor,
    )


async def putaway_single(
    db: AsyncSession,
    location_code: str,
    sku_code: str,
    qty: int,
    user: str | None = None,
    note: str | None = None,
) -> ActionResult[InventoryRecord]:
    try:
        payload = PutawayRequest(
            location_code=location_code,
            items=[PutawayItem(sku_code=sku_code, qty=qty)],
            note=note,
        )
    except SchemaValidationError as exc:
        return _rejected(
            ValidationError(exc.errors()[0]["msg"]),
            "putaway",
            location_code=location_code,
            sku_code=sku_code,
            qty=qty,
        )

    result = await putaway(db, payload, user)

    if not result.success:
        return ActionResult.fail(result.error_code, result.message)

    if not result.data:
        return ActionResult.fail(
            TransactionError.error_code, "No inventory record created"
        )

    return ActionResult.ok(result.data[0])


# =====================================================
# MOVE
# =====================================================
async def move(
    db: AsyncSession,
    payload: MoveRequest,
    user: str | None = None,
) -> ActionResult[MoveResult]:
    """Transfer ``qty`` of a SKU between two locations.

    The source location and the SKU must already exist; the destination is
    created if needed. Unlike putaway, an unknown SKU is an error here.
    """
    actor = _actor(user)
    context = {
        "from_location_code": payload.from_location_code,
        "to_location_code": payload.to_location_code,
        "sku_code": payload.sku_code,
        "qty": payload.qty,
        "user": actor,
    }

    if payload.from_location_code == payload.to_location_code:
        return _rejected(
            ValidationError("Source and destination locations must be different"),
            "move",
            **context,
        )

    async def work() -> MoveResult:
        from_location = await get_location_by_code(db, payload.from_location_code)
        if not from_location:
            raise NotFoundError(
                f'Source location "{payload.from_location_code}" not found'
            )

        to_location = await get_or_create_location(db, payload.to_location_code)

        sku = await get_sku_by_code(db, payload.sku_code)
        if not sku:
            raise NotFoundError(f'EN "{payload.sku_code}" not found')

        source = await _lock_balance(db, from_location.id, sku.id)
        available = source.qty if source else 0
        if available < payload.qty:
            raise InsufficientQuantityError(available, payload.qty)

        source = await _decrement_balance(db, source, payload.qty)
        destination = await _increment_balance(db, to_location, sku, payload.qty)

        _append_log(
            db,
            action=MovementAction.MOVE,
            sku=sku,
            from_location=from_location,
            to_location=to_location,
            qty=payload.qty,
            user=actor,
            handler_name=payload.handler_name,
            note=payload.note,
        )
        await db.flush()

        return MoveResult(
            from_inventory=_map_record(source, from_location, sku),
            to_inventory=_map_record(destination, to_location, sku),
        )

    return await _run_in_transaction(db, "move", work, **context)


# =====================================================
# ADJUST
# =====================================================
async def adjust(
    db: AsyncSession,
    payload: AdjustRequest,
    user: str | None = None,
) -> ActionResult[InventoryRecord]:
    """Apply a signed correction to one balance. A note is mandatory."""
    actor = _actor(user)
    context = {
        "location_code": payload.location_code,
        "sku_code": payload.sku_code,
        "qty": payload.qty,
        "user": actor,
    }

    note = payload.note.strip() if payload.note else ""
    if not note:
        return _rejected(
            ValidationError("Adjustment note is required"),
            "adjust",
            **context,
        )

    async def work() -> InventoryRecord:
        location = await get_or_create_location(db, payload.location_code)
        sku = await get_or_create_sku(db, payload.sku_code)

        balance = await _lock_balance(db, location.id, sku.id)
        current = balance.qty if balance else 0

        if current + payload.qty < 0:
            raise NegativeBalanceError(current, payload.qty)

        if not balance:
            balance = InventoryBalance(
                location_id=location.id,
                sku_id=sku.id,
                qty=max(0, payload.qty),
            )
            db.add(balance)
        else:
            balance.qty = InventoryBalance.qty + payload.qty

        await db.flush()
        await db.refresh(balance)

        _append_log(
            db,
            action=MovementAction.ADJUST,
            sku=sku,
            to_location=location,
            qty=payload.qty,
            user=actor,
            handler_name=payload.handler_name,
            note=note,
        )
        await db.flush()

        return _map_record(balance, location, sku)

    return await _run_in_transaction(db, "adjust", work, **context)
