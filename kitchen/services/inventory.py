from __future__ import annotations

import logging
from typing import List

import httpx
from pydantic import ValidationError

from kitchen.core.models import InventoryItem
from .exceptions import UpstreamError
from .http import BackendClient, unwrap

logger = logging.getLogger(__name__)


class InventoryClient(BackendClient):
    """Read-only view of the inventory service."""

    async def get_all_items(self) -> List[InventoryItem]:
        try:
            async with self._client() as client:
                resp = await client.get("/inventory")
                resp.raise_for_status()
                data = unwrap(resp.json())
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamError(f"Inventory fetch failed: {e}") from e

        items: List[InventoryItem] = []
        for row in data or []:
            try:
                items.append(InventoryItem.model_validate(row))
            except ValidationError as e:
                # one bad row shouldn't hide the rest of the pantry
                logger.warning("Skipping inventory row %r: %s", row, e)
        return items
