from __future__ import annotations

import logging
import time
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request

from kitchen.config import Settings
from kitchen.core.display import build_card, visible_instructions
from kitchen.core.gap import GapResolver
from kitchen.core.models import (
    GapResponse,
    InstructionsRequest,
    InstructionsResponse,
    InventoryItem,
    NormalizeRequest,
    Recipe,
    RecipeCard,
    RecipeDefaults,
    SuggestionsResponse,
)
from kitchen.core.normalize import RecipeNormalizer
from kitchen.services.exceptions import GapLookupFailure, ServiceError
from kitchen.services.inventory import InventoryClient
from kitchen.services.metrics import MetricsLogger
from kitchen.services.shopping import HTTPShoppingClient
from kitchen.services.suggestions import RecipeSource, SimpleRecipeSource, build_source

logger = logging.getLogger(__name__)

router = APIRouter(tags=["recipes"])

NO_INVENTORY = "No items in inventory! Add some items to your kitchen inventory first to get recipe suggestions."
NO_RECIPES = "No recipes found. Try adding more items to your inventory."

# ---- Dependencies ------------------------------------------------------------

def get_settings() -> Settings:
    return Settings()

def get_defaults(settings: Settings = Depends(get_settings)) -> RecipeDefaults:
    return settings.recipe_defaults()

def get_normalizer(defaults: RecipeDefaults = Depends(get_defaults)) -> RecipeNormalizer:
    return RecipeNormalizer(defaults)

def get_metrics(settings: Settings = Depends(get_settings)) -> MetricsLogger:
    return MetricsLogger(settings)

def get_inventory_client(settings: Settings = Depends(get_settings)) -> InventoryClient:
    return InventoryClient(settings)

def get_source(settings: Settings = Depends(get_settings)) -> RecipeSource:
    try:
        return build_source(settings)
    except ServiceError as e:
        # misconfigured OpenAI etc.; keep the page usable
        logger.warning("Suggestion source %r unavailable (%s); using local ideas", settings.suggestion_source, e)
        return SimpleRecipeSource()

def get_resolver(
    settings: Settings = Depends(get_settings),
    metrics: MetricsLogger = Depends(get_metrics),
) -> GapResolver:
    return GapResolver(HTTPShoppingClient(settings), metrics=metrics)

# ---- Routes ------------------------------------------------------------------

@router.get("/api/v1/recipes/suggestions", response_model=SuggestionsResponse)
async def get_suggestions(
    expanded: bool = False,
    inventory_client: InventoryClient = Depends(get_inventory_client),
    source: RecipeSource = Depends(get_source),
    normalizer: RecipeNormalizer = Depends(get_normalizer),
    metrics: MetricsLogger = Depends(get_metrics),
    request: Request = None,
):
    try:
        inventory: List[InventoryItem] = await inventory_client.get_all_items()
    except ServiceError as e:
        raise HTTPException(status_code=502, detail=str(e))

    if not inventory:
        return SuggestionsResponse(cards=[], inventory_count=0, message=NO_INVENTORY)

    t0 = time.perf_counter()
    try:
        raws = await source.fetch(inventory)
    except ServiceError as e:
        # Fall back to local ideas rather than an empty page
        logger.warning("Suggestion source %s failed: %s", source.name, e)
        source = SimpleRecipeSource()
        raws = await source.fetch(inventory)
    dt_ms = (time.perf_counter() - t0) * 1000.0
    metrics.log_latency(
        name="suggest_fetch",
        duration_ms=dt_ms,
        origin="backend",
        extra={"source": source.name, "count": len(raws), "inventory": len(inventory)},
        corr_id=request.headers.get("X-Correlation-Id") if request else None,
    )

    cards: List[RecipeCard] = [
        build_card(normalizer.normalize(raw, inventory), expanded, normalizer.defaults)
        for raw in raws
    ]
    return SuggestionsResponse(
        cards=cards,
        inventory_count=len(inventory),
        message=None if cards else NO_RECIPES,
    )


@router.post("/api/v1/recipes/normalize", response_model=RecipeCard)
def normalize_suggestion(
    payload: NormalizeRequest,
    normalizer: RecipeNormalizer = Depends(get_normalizer),
):
    recipe = normalizer.normalize(payload.raw, payload.inventory)
    return build_card(recipe, payload.expanded, normalizer.defaults)


@router.post("/api/v1/recipes/instructions", response_model=InstructionsResponse)
def render_instructions(
    payload: InstructionsRequest,
    defaults: RecipeDefaults = Depends(get_defaults),
):
    limit = defaults.preview_limit if payload.limit is None else payload.limit
    full = visible_instructions(payload.recipe, True, limit, defaults)
    return InstructionsResponse(
        text=visible_instructions(payload.recipe, payload.expanded, limit, defaults),
        can_expand=len(full) > limit,
    )


@router.post("/api/v1/recipes/missing", response_model=GapResponse)
async def check_missing_ingredients(
    recipe: Recipe,
    resolver: GapResolver = Depends(get_resolver),
):
    try:
        return await resolver.respond(recipe)
    except GapLookupFailure as e:
        raise HTTPException(status_code=502, detail=f"{e}. Please try again.")
