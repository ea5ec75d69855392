from pydantic import BaseModel
from typing import List


class LocationSummary(BaseModel):
    id: int
    code: str
    sku_count: int


class LocationListData(BaseModel):
    items: List[LocationSummary]
