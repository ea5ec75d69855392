from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from whmapping.core.db import get_db
from whmapping.schemas.inventory.location_schemas import LocationListData
from whmapping.services.inventory.location_service import list_locations
from whmapping.utils.get_user import get_current_user
from whmapping.utils.response import APIResponse, success_response

router = APIRouter(
    prefix="/locations",
    tags=["Locations"],
    dependencies=[Depends(get_current_user)],
)


@router.get("/", response_model=APIResponse[LocationListData])
async def list_locations_api(
    db: AsyncSession = Depends(get_db),
    search: str | None = Query(None, description="Substring of the location code"),
    limit: int = Query(20, ge=1, le=100),
):
    items = await list_locations(db, search=search, limit=limit)
    return success_response("Locations fetched", {"items": items})
