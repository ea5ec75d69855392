from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from whmapping.constants.movement_action import MovementAction


class MovementRecord(BaseModel):
    id: int
    action: MovementAction
    sku_code: str
    item_code: Optional[str] = None
    sku_name: Optional[str] = None
    from_location_code: Optional[str] = None
    to_location_code: Optional[str] = None
    qty: int
    user: str
    handler_name: Optional[str] = None
    note: Optional[str] = None
    created_at: datetime


class Pagination(BaseModel):
    total: int
    limit: int
    offset: int
    has_more: bool


class MovementLogListData(BaseModel):
    items: List[MovementRecord]
    pagination: Pagination


class MovementLogStats(BaseModel):
    total_locations: int
    total_skus: int
    total_eans: int
    total_quantity: int


class MovementLogFilters(BaseModel):
    action: Optional[str] = None
    sku: Optional[str] = None
    location: Optional[str] = None
    user: Optional[str] = None


class BulkDeleteRequest(BaseModel):
    ids: List[int] = Field(default_factory=list)


class DeleteResult(BaseModel):
    deleted: int
