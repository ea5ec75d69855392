from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime


class InventoryRecord(BaseModel):
    id: int
    location_code: str
    sku_code: str
    item_code: Optional[str] = None
    sku_name: Optional[str] = None
    qty: int
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MoveResult(BaseModel):
    from_inventory: InventoryRecord
    to_inventory: InventoryRecord


# -------------------------
# LOOKUPS
# -------------------------
class LocationItem(BaseModel):
    sku_id: int
    sku_code: str
    item_code: Optional[str] = None
    sku_name: Optional[str] = None
    qty: int


class LocationInventory(BaseModel):
    location_id: int
    location_code: str
    items: List[LocationItem]
    total_items: int
    total_qty: int


class SkuLocation(BaseModel):
    location_id: int
    location_code: str
    qty: int


class SkuLocations(BaseModel):
    sku_id: int
    sku_code: str
    item_code: Optional[str] = None
    sku_name: Optional[str] = None
    barcode: Optional[str] = None
    locations: List[SkuLocation]
    total_locations: int
    total_qty: int


class AvailableQty(BaseModel):
    qty: int
    sku_name: Optional[str] = None
