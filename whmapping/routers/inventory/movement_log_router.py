from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from whmapping.core.db import get_db
from whmapping.schemas.auth.identity_schemas import CurrentUser
from whmapping.schemas.inventory.movement_log_schemas import (
    BulkDeleteRequest,
    DeleteResult,
    MovementLogFilters,
    MovementLogListData,
    MovementLogStats,
)
from whmapping.services.inventory.movement_log_service import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    delete_movement_log,
    delete_movement_logs,
    list_movement_logs,
    movement_log_stats,
)
from whmapping.utils.check_roles import require_admin
from whmapping.utils.get_user import get_current_user
from whmapping.utils.response import APIResponse, result_response
from whmapping.utils.logger import get_logger

router = APIRouter(prefix="/logs", tags=["Movement Logs"])
logger = get_logger(__name__)


def _scoped_filters(
    user: CurrentUser,
    action: str | None,
    sku: str | None,
    location: str | None,
    user_filter: str | None,
) -> MovementLogFilters:
    # non-admins only ever see their own rows
    return MovementLogFilters(
        action=action,
        sku=sku,
        location=location,
        user=user_filter if user.is_admin else user.display_name,
    )


@router.get("/", response_model=APIResponse[MovementLogListData])
async def list_movement_logs_api(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
    action: str | None = Query(None),
    sku: str | None = Query(None),
    location: str | None = Query(None),
    user_filter: str | None = Query(None, alias="user"),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    offset: int = Query(0, ge=0),
):
    filters = _scoped_filters(user, action, sku, location, user_filter)
    result = await list_movement_logs(db, filters, limit=limit, offset=offset)
    return result_response(result, "Movement logs fetched")


@router.get("/stats", response_model=APIResponse[MovementLogStats])
async def movement_log_stats_api(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
    action: str | None = Query(None),
    sku: str | None = Query(None),
    location: str | None = Query(None),
    user_filter: str | None = Query(None, alias="user"),
):
    filters = _scoped_filters(user, action, sku, location, user_filter)
    result = await movement_log_stats(db, filters)
    return result_response(result, "Movement log stats fetched")


@router.delete("/bulk", response_model=APIResponse[DeleteResult])
async def bulk_delete_movement_logs_api(
    payload: BulkDeleteRequest,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
):
    logger.warning(
        "Bulk movement log delete",
        extra={"count": len(payload.ids), "actor": admin.display_name},
    )
    result = await delete_movement_logs(db, payload.ids)
    return result_response(result, "Movement logs deleted")


@router.delete("/{log_id}", response_model=APIResponse[DeleteResult])
async def delete_movement_log_api(
    log_id: int,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
):
    logger.warning(
        "Movement log delete",
        extra={"log_id": log_id, "actor": admin.display_name},
    )
    result = await delete_movement_log(db, log_id)
    return result_response(result, "Movement log deleted")
