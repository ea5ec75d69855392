from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from whmapping.core.db import get_db
from whmapping.schemas.auth.identity_schemas import CurrentUser
from whmapping.schemas.inventory.ledger_schemas import (
    PutawayRequest,
    MoveRequest,
    AdjustRequest,
)
from whmapping.schemas.inventory.inventory_schemas import InventoryRecord, MoveResult
from whmapping.services.inventory.ledger_service import putaway, move, adjust
from whmapping.utils.get_user import get_current_user
from whmapping.utils.response import APIResponse, result_response
from whmapping.utils.logger import get_logger

router = APIRouter(prefix="/inventory", tags=["Inventory Ledger"])
logger = get_logger(__name__)


@router.post("/putaway", response_model=APIResponse[list[InventoryRecord]])
async def putaway_api(
    payload: PutawayRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    logger.info(
        "Putaway requested",
        extra={"location_code": payload.location_code, "item_count": len(payload.items)},
    )
    result = await putaway(db, payload, user.display_name)
    return result_response(result, "Putaway completed")


@router.post("/move", response_model=APIResponse[MoveResult])
async def move_api(
    payload: MoveRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    logger.info(
        "Move requested",
        extra={
            "from_location_code": payload.from_location_code,
            "to_location_code": payload.to_location_code,
            "sku_code": payload.sku_code,
        },
    )
    result = await move(db, payload, user.display_name)
    return result_response(result, "Inventory moved")


@router.post("/adjust", response_model=APIResponse[InventoryRecord])
async def adjust_api(
    payload: AdjustRequest,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    result = await adjust(db, payload, user.display_name)
    return result_response(result, "Inventory adjusted")
