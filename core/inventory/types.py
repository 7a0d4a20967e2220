"""
core/inventory/types.py - Inventory item dataclass

One virtual machine as returned by the Compute list API.
"""

from __future__ import annotations

from dataclasses import dataclass


def parse_resource_group(resource_id: str) -> str:
    """Extract the resource group name from an ARM resource id

    /subscriptions/<sub>/resourceGroups/<rg>/providers/... -> <rg>

    Returns an empty string when the id carries no resourceGroups segment.
    """
    parts = resource_id.strip("/").split("/")
    for index, part in enumerate(parts[:-1]):
        if part.lower() == "resourcegroups":
            return parts[index + 1]
    return ""


@dataclass(frozen=True)
class InventoryItem:
    """Virtual machine to check for backup protection"""

    id: str
    name: str
    resource_group: str
    location: str

    @classmethod
    def from_resource(cls, resource_id: str, name: str, location: str) -> InventoryItem:
        return cls(
            id=resource_id,
            name=name,
            resource_group=parse_resource_group(resource_id),
            location=location,
        )
