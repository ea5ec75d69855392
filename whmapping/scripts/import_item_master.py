# python -m whmapping.scripts.import_item_master [path/to/Item Master.xlsx]
import asyncio
import sys

from whmapping.core.config import ITEM_MASTER_PATH
from whmapping.core.db import session_scope
from whmapping.services.inventory.item_master_service import import_item_master


async def main(path: str) -> int:
    async with session_scope() as session:
        result = await import_item_master(session, path)

    if not result.success:
        print(f"Import failed: {result.message}")
        return 1

    summary = result.data
    print(f"Found {summary.total} rows in {path}")
    print(f"   Imported:  {summary.imported}")
    print(f"   Updated:   {summary.updated}")
    print(f"   Unchanged: {summary.unchanged}")
    print(f"   Skipped:   {summary.skipped}")
    return 0


if __name__ == "__main__":
    source = sys.argv[1] if len(sys.argv) > 1 else ITEM_MASTER_PATH
    sys.exit(asyncio.run(main(source)))
