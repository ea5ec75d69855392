from pydantic import BaseModel
from typing import List, Optional


class SkuSummary(BaseModel):
    id: int
    code: str
    item_code: Optional[str] = None
    name: Optional[str] = None
    barcode: Optional[str] = None
    total_qty: int
    location_count: int


class SkuListData(BaseModel):
    items: List[SkuSummary]


class ItemMasterImportSummary(BaseModel):
    imported: int
    updated: int
    unchanged: int
    skipped: int
    total: int
