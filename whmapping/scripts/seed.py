# python -m whmapping.scripts.seed
import asyncio

from whmapping.core.db import session_scope, init_models
from whmapping.schemas.inventory.ledger_schemas import MoveRequest, PutawayItem, PutawayRequest
from whmapping.services.inventory.ledger_service import move, putaway
from whmapping.services.inventory.location_service import get_or_create_location
from whmapping.services.inventory.sku_service import get_sku_by_code
from whmapping.models import Sku

LOCATIONS = [
    "A1-R01-S01-B01", "A1-R01-S01-B02", "A1-R01-S02-B01", "A1-R02-S01-B01",
    "A2-R01-S01-B01", "B1-R01-S01-B01", "B1-R01-S01-B02", "B1-R02-S01-B01",
    "RECV-01", "RECV-02", "SHIP-01", "SHIP-02",
]

SKUS = [
    ("SKU-001", "Widget A", "1234567890123"),
    ("SKU-002", "Widget B", "1234567890124"),
    ("SKU-003", "Gadget X", "1234567890125"),
    ("SKU-004", "Gadget Y", "1234567890126"),
    ("SKU-005", "Component Alpha", "1234567890127"),
    ("SKU-006", "Component Beta", "1234567890128"),
    ("PART-100", "Spare Part 100", "2345678901234"),
    ("PART-101", "Spare Part 101", "2345678901235"),
    ("PART-102", "Spare Part 102", "2345678901236"),
    ("RAW-001", "Raw Material 001", "3456789012345"),
]

# (location, sku, qty)
STOCK = [
    ("A1-R01-S01-B01", "SKU-001", 125),
    ("A1-R01-S01-B01", "SKU-002", 50),
    ("A1-R01-S01-B02", "SKU-003", 75),
    ("B1-R01-S01-B01", "SKU-002", 200),
]


async def seed():
    await init_models()

    async with session_scope() as session:
        for code in LOCATIONS:
            await get_or_create_location(session, code)

        for code, name, barcode in SKUS:
            if not await get_sku_by_code(session, code):
                session.add(Sku(code=code, name=name, barcode=barcode))
        await session.commit()
        print(f"Seeded {len(LOCATIONS)} locations and {len(SKUS)} SKUs")

        for location_code, sku_code, qty in STOCK:
            result = await putaway(
                session,
                PutawayRequest(
                    location_code=location_code,
                    items=[PutawayItem(sku_code=sku_code, qty=qty)],
                    note="Initial stock",
                ),
            )
            if not result.success:
                print(f"Putaway failed: {result.message}")

        result = await move(
            session,
            MoveRequest(
                from_location_code="A1-R01-S01-B01",
                to_location_code="A1-R01-S01-B02",
                sku_code="SKU-001",
                qty=25,
                note="Stock redistribution",
            ),
        )
        if not result.success:
            print(f"Move failed: {result.message}")

    print("Seed completed")


if __name__ == "__main__":
    asyncio.run(seed())
