"""
core/inventory/client.py - Inventory client

Fetches every virtual machine of a subscription, following nextLink until
the provider stops returning one. The fetch is all-or-nothing: a failure
on any page raises a single FetchError and no partial list is returned.
"""

from __future__ import annotations

import logging

import requests

from core.azure.client import COMPUTE_API_VERSION, ArmClient
from core.azure.schemas import parse_inventory_page
from core.exceptions import FetchError, ProviderError

from .types import InventoryItem

logger = logging.getLogger(__name__)

VIRTUAL_MACHINES_PATH = "/subscriptions/{subscription_id}/providers/Microsoft.Compute/virtualMachines"


class InventoryClient:
    """Paginated VM inventory fetch

    Example:
        client = InventoryClient(arm_client)
        items = client.fetch_all("11111111-2222-3333-4444-555555555555")
    """

    def __init__(self, arm_client: ArmClient):
        self._arm = arm_client

    def fetch_all(self, subscription_id: str) -> list[InventoryItem]:
        """Fetch all pages of the subscription's VM list

        Args:
            subscription_id: target subscription

        Returns:
            every VM across all pages (may be empty)

        Raises:
            FetchError: transport, authorization or schema failure on any page
        """
        items: list[InventoryItem] = []
        url: str | None = VIRTUAL_MACHINES_PATH.format(subscription_id=subscription_id)
        params: dict[str, str] | None = {"api-version": COMPUTE_API_VERSION}
        pages = 0

        logger.info(f"인벤토리 조회 시작: subscription={subscription_id}")

        while url:
            try:
                payload = self._arm.get_json(url, params=params)
                page = parse_inventory_page(payload)
            except (ProviderError, requests.RequestException) as e:
                logger.error(f"인벤토리 조회 실패 (page {pages + 1}): {e}")
                raise FetchError.from_exception(e) from e

            pages += 1
            items.extend(page.items)
            url = page.next_link
            # nextLink already carries api-version and skip token
            params = None

        logger.info(f"인벤토리 조회 완료: {len(items)}개 VM, {pages} page(s)")
        return items
