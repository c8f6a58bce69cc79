# kitchen/core/gap.py
from __future__ import annotations

import logging
import time
from typing import Optional, Protocol, Sequence

from .models import GapResponse, GapResult, Recipe

logger = logging.getLogger(__name__)


class ShoppingClient(Protocol):
    async def check_availability(self, ingredient_names: Sequence[str]) -> GapResult: ...


class GapResolver:
    """
    Hands a recipe's missing ingredients to the shopping collaborator.

    One outbound call per resolve, no retries. GapLookupFailure from the client
    propagates to the caller; the recipe itself is never modified.
    """

    def __init__(self, shopping: ShoppingClient, metrics=None):
        self._shopping = shopping
        self._metrics = metrics

    async def resolve(self, recipe: Recipe) -> Optional[GapResult]:
        """Returns None (no-op) when nothing is missing."""
        if not recipe.missing_ingredients:
            return None
        names = list(recipe.missing_ingredients)
        t0 = time.perf_counter()
        result = await self._shopping.check_availability(names)
        dt_ms = (time.perf_counter() - t0) * 1000.0
        if self._metrics is not None:
            self._metrics.log_latency(
                name="gap_lookup",
                duration_ms=dt_ms,
                origin="backend",
                extra={"count": len(names), "has_order_url": bool(result.order_url)},
            )
        return result

    async def respond(self, recipe: Recipe) -> GapResponse:
        result = await self.resolve(recipe)
        if result is None:
            return GapResponse(status="noop")
        return GapResponse(status="ok", result=result, open_in_new_tab=bool(result.order_url))


class GapLookup:
    """
    Per-card lookup state: at most one request in flight, and nothing applied
    after the card has been disposed.
    """

    def __init__(self, resolver: GapResolver, recipe: Recipe):
        self.resolver = resolver
        self.recipe = recipe
        self.loading = False
        self.disposed = False
        self.result: Optional[GapResult] = None
        self.error: Optional[Exception] = None

    def dispose(self) -> None:
        self.disposed = True

    async def run(self) -> Optional[GapResponse]:
        """
        Returns None when the call was skipped (already loading) or its outcome
        was discarded because the card went away meanwhile.
        """
        if self.loading or self.disposed:
            return None
        self.loading = True
        self.error = None
        try:
            response = await self.resolver.respond(self.recipe)
        except Exception as e:
            if self.disposed:
                logger.debug("Gap lookup failed after dispose; error dropped: %s", e)
                return None
            self.error = e
            raise
        finally:
            self.loading = False
        if self.disposed:
            logger.debug("Gap lookup finished after dispose; result dropped")
            return None
        self.result = response.result
        return response
