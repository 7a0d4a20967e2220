"""
core/inventory - Virtual machine inventory

Classes:
    - InventoryItem: one VM (id, name, resource group, location)
    - InventoryClient: paginated, all-or-nothing fetch (core.inventory.client)

Usage:
    from core.inventory.client import InventoryClient

    items = InventoryClient(arm_client).fetch_all(subscription_id)
"""

from .types import InventoryItem, parse_resource_group

__all__: list[str] = ["InventoryItem", "parse_resource_group"]
