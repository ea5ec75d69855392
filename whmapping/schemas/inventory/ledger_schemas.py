# whmapping/schemas/inventory/ledger_schemas.py

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


LOCATION_CODE_MAX = 50
SKU_CODE_MAX = 100


def normalize_code(value) -> str:
    """Scanned codes are compared trimmed and upper-cased."""
    if value is None:
        raise ValueError("code is required")
    return str(value).strip().upper()


def normalize_optional_text(value) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


# =====================================================
# PUTAWAY
# =====================================================
class PutawayItem(BaseModel):
    sku_code: str = Field(..., min_length=1, max_length=SKU_CODE_MAX)
    item_code: Optional[str] = Field(None, max_length=SKU_CODE_MAX)
    qty: int = Field(gt=0)

    @field_validator("sku_code", mode="before")
    @classmethod
    def normalize_sku_code(cls, value):
        return normalize_code(value)

    @field_validator("item_code", mode="before")
    @classmethod
    def normalize_item_code(cls, value):
        value = normalize_optional_text(value)
        return value.upper() if value else None


class PutawayRequest(BaseModel):
    location_code: str = Field(..., min_length=1, max_length=LOCATION_CODE_MAX)
    items: List[PutawayItem] = Field(..., min_length=1)
    handler_name: Optional[str] = Field(None, max_length=255)
    note: Optional[str] = None

    @field_validator("location_code", mode="before")
    @classmethod
    def normalize_location_code(cls, value):
        return normalize_code(value)

    @field_validator("handler_name", "note", mode="before")
    @classmethod
    def normalize_text(cls, value):
        return normalize_optional_text(value)


# =====================================================
# MOVE
# =====================================================
class MoveRequest(BaseModel):
    from_location_code: str = Field(..., min_length=1, max_length=LOCATION_CODE_MAX)
    to_location_code: str = Field(..., min_length=1, max_length=LOCATION_CODE_MAX)
    sku_code: str = Field(..., min_length=1, max_length=SKU_CODE_MAX)
    qty: int = Field(gt=0)
    handler_name: Optional[str] = Field(None, max_length=255)
    note: Optional[str] = None

    @field_validator("from_location_code", "to_location_code", "sku_code", mode="before")
    @classmethod
    def normalize_codes(cls, value):
        return normalize_code(value)

    @field_validator("handler_name", "note", mode="before")
    @classmethod
    def normalize_text(cls, value):
        return normalize_optional_text(value)


# =====================================================
# ADJUST
# =====================================================
class AdjustRequest(BaseModel):
    location_code: str = Field(..., min_length=1, max_length=LOCATION_CODE_MAX)
    sku_code: str = Field(..., min_length=1, max_length=SKU_CODE_MAX)
    qty: int  # signed delta
    handler_name: Optional[str] = Field(None, max_length=255)
    # blank notes are rejected by the ledger, not here
    note: Optional[str] = None

    @field_validator("location_code", "sku_code", mode="before")
    @classmethod
    def normalize_codes(cls, value):
        return normalize_code(value)

    @field_validator("handler_name", mode="before")
    @classmethod
    def normalize_handler_name(cls, value):
        return normalize_optional_text(value)
