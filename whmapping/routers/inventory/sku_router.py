from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from whmapping.core.config import ITEM_MASTER_PATH
from whmapping.core.db import get_db
from whmapping.schemas.inventory.sku_schemas import SkuListData, ItemMasterImportSummary
from whmapping.services.inventory.sku_service import list_skus
from whmapping.services.inventory.item_master_service import import_item_master
from whmapping.utils.check_roles import require_admin
from whmapping.utils.get_user import get_current_user
from whmapping.utils.response import APIResponse, success_response, result_response
from whmapping.utils.logger import get_logger

router = APIRouter(prefix="/skus", tags=["SKUs"])
logger = get_logger(__name__)


@router.get("/", response_model=APIResponse[SkuListData])
async def list_skus_api(
    db: AsyncSession = Depends(get_db),
    user=Depends(get_current_user),
    search: str | None = Query(None, description="Search by code, barcode or name"),
    limit: int = Query(20, ge=1, le=100),
):
    items = await list_skus(db, search=search, limit=limit)
    return success_response("SKUs fetched", {"items": items})


@router.post("/import-item-master", response_model=APIResponse[ItemMasterImportSummary])
async def import_item_master_api(
    db: AsyncSession = Depends(get_db),
    admin=Depends(require_admin),
):
    logger.info("Item master import requested", extra={"path": ITEM_MASTER_PATH})
    result = await import_item_master(db, ITEM_MASTER_PATH)
    return result_response(result, "Item master imported")
