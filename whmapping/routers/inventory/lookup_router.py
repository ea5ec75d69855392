from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from whmapping.core.db import get_db
from whmapping.schemas.inventory.inventory_schemas import (
    AvailableQty,
    LocationInventory,
    SkuLocations,
)
from whmapping.services.inventory.lookup_service import (
    get_available_qty,
    lookup_by_location,
    lookup_by_sku,
)
from whmapping.utils.get_user import get_current_user
from whmapping.utils.response import APIResponse, result_response

router = APIRouter(
    prefix="/inventory",
    tags=["Inventory Lookup"],
    dependencies=[Depends(get_current_user)],
)


@router.get("/available", response_model=APIResponse[AvailableQty])
async def available_qty_api(
    location: str = Query(..., min_length=1, max_length=50),
    sku: str = Query(..., min_length=1, max_length=100),
    db: AsyncSession = Depends(get_db),
):
    result = await get_available_qty(db, location, sku)
    return result_response(result, "Available quantity fetched")


@router.get("/location/{code}", response_model=APIResponse[LocationInventory])
async def location_inventory_api(
    code: str,
    db: AsyncSession = Depends(get_db),
):
    result = await lookup_by_location(db, code)
    return result_response(result, "Location inventory fetched")


@router.get("/sku/{code}", response_model=APIResponse[SkuLocations])
async def sku_inventory_api(
    code: str,
    db: AsyncSession = Depends(get_db),
):
    result = await lookup_by_sku(db, code)
    return result_response(result, "EN inventory fetched")
