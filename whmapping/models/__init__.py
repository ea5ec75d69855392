# Inventory
from whmapping.models.inventory.location_models import Location
from whmapping.models.inventory.sku_models import Sku
from whmapping.models.inventory.inventory_balance_models import InventoryBalance
from whmapping.models.inventory.movement_log_models import MovementLog
