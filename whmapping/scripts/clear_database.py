# python -m whmapping.scripts.clear_database
# Wipes movement logs, balances and locations. SKUs (item master) are kept.
import asyncio

from sqlalchemy import delete

from whmapping.core.db import session_scope
from whmapping.models import InventoryBalance, Location, MovementLog


async def clear_database() -> dict[str, int]:
    async with session_scope() as session:
        counts = {}
        # FK order
        for label, model in (
            ("movement logs", MovementLog),
            ("inventory records", InventoryBalance),
            ("locations", Location),
        ):
            result = await session.execute(delete(model))
            counts[label] = result.rowcount
        await session.commit()
    return counts


if __name__ == "__main__":
    print("Starting database cleanup (keeping SKUs)...")
    for label, count in asyncio.run(clear_database()).items():
        print(f"Deleted {count} {label}")
    print("Database cleared (SKUs preserved)")
