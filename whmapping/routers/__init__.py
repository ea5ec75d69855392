# whmapping/routers/__init__.py

from .inventory.ledger_router import router as ledger_router
from .inventory.lookup_router import router as lookup_router
from .inventory.location_router import router as location_router
from .inventory.sku_router import router as sku_router
from .inventory.movement_log_router import router as movement_log_router


__all__ = [
"ledger_router",
"lookup_router",
"location_router",
"sku_router",
"movement_log_router",
]
