from __future__ import annotations

import logging
from typing import Sequence

import httpx
from pydantic import ValidationError

from kitchen.core.models import GapResult
from .exceptions import GapLookupFailure
from .http import BackendClient, unwrap

logger = logging.getLogger(__name__)


class HTTPShoppingClient(BackendClient):
    """
    Asks the shopping service which of the given ingredients it can deliver.
    No retries; any failure surfaces as GapLookupFailure.
    """

    async def check_availability(self, ingredient_names: Sequence[str]) -> GapResult:
        payload = {"recipeIngredients": list(ingredient_names)}
        try:
            async with self._client() as client:
                resp = await client.post("/recipes/missing-ingredients", json=payload)
                resp.raise_for_status()
                data = unwrap(resp.json())
            return GapResult.model_validate(data or {})
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            logger.warning("Missing-ingredient lookup failed for %d items: %s", len(payload["recipeIngredients"]), e)
            raise GapLookupFailure(f"Could not check missing ingredients: {e}") from e
