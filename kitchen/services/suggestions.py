from __future__ import annotations

import json
from typing import Any, List, Optional

import httpx
from openai import AsyncOpenAI

from kitchen.config import Settings
from kitchen.core.models import InventoryItem
from .exceptions import LLMError, UpstreamError
from .http import BackendClient, unwrap


class RecipeSource:
    """
    Produces raw suggestions. Whatever comes back is handed to the normalizer
    untouched, so sources never parse or validate recipe shape.
    """
    name = "base"

    async def fetch(self, inventory: List[InventoryItem]) -> List[Any]:  # pragma: no cover - interface
        raise NotImplementedError


class HTTPRecipeSource(BackendClient, RecipeSource):
    name = "http"

    async def fetch(self, inventory: List[InventoryItem]) -> List[Any]:
        try:
            async with self._client() as client:
                resp = await client.get("/recipes/suggestions")
                resp.raise_for_status()
                data = unwrap(resp.json())
        except (httpx.HTTPError, ValueError) as e:
            raise UpstreamError(f"Recipe suggestions failed: {e}") from e

        if isinstance(data, dict):
            recipes = data.get("recipes")
        else:
            recipes = data
        if not recipes:
            return []
        # a bare string or object is one suggestion
        if not isinstance(recipes, list):
            return [recipes]
        return recipes


class OpenAIRecipeSource(RecipeSource):
    name = "openai"
    _client: AsyncOpenAI
    _model: str

    def __init__(self, settings: Settings):
        if not settings.openai_api_key:
            raise LLMError("OPENAI_API_KEY is not set")
        try:
            self._client = AsyncOpenAI(api_key=settings.openai_api_key, timeout=settings.http_timeout_seconds)
        except Exception as e:
            raise LLMError("Could not initialize OpenAI client") from e
        self._model = settings.openai_model_suggest

    async def fetch(self, inventory: List[InventoryItem]) -> List[Any]:
        pantry_min = [
            {"name": it.name, "quantity": it.quantity, "unit": it.unit}
            for it in inventory
        ]
        prompt = (
            "Suggest up to 3 recipes that can be cooked mostly from this kitchen inventory. "
            "List which inventory items each recipe uses and which ingredients are missing.\n"
            "Answer as JSON in the following format:\n"
            "{\"recipes\":[{\"name\": str, \"description\": str, \"instructions\": str, "
            "\"availableIngredients\": [str], \"missingIngredients\": [str]}]}\n\n"
            f"Inventory: {json.dumps(pantry_min)}"
        )
        try:
            resp = await self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "system", "content": "You are a helpful cooking assistant."},
                          {"role": "user", "content": prompt}],
            )
        except Exception as e:
            raise LLMError(f"OpenAI suggest failed: {e}") from e
        content = resp.choices[0].message.content
        return [content] if content else []


class SimpleRecipeSource(RecipeSource):
    """Offline fallback that writes short prose ideas from the inventory.

    Output is deliberately unstructured text, so it goes through the same
    fallback path as an upstream reply that could not be parsed.
    """
    name = "local"

    async def fetch(self, inventory: List[InventoryItem]) -> List[Any]:
        by_name = [it.name for it in inventory]

        def has(*words: str) -> bool:
            return any(w in n.lower() for n in by_name for w in words)

        ideas: List[str] = []
        if has("egg") and has("onion"):
            ideas.append("Quick egg scramble: soften chopped onion in a hot pan, add beaten eggs, "
                         "stir gently until just set, season and serve.")
        if has("pasta", "noodle") and has("tomato"):
            ideas.append("Simple tomato pasta: boil the pasta, simmer chopped tomatoes with a little oil "
                         "into a sauce, toss together and season.")
        if has("rice") and has("onion"):
            ideas.append("One-pan fried rice: fry onion until golden, add cooked rice and any vegetables, "
                         "stir-fry on high heat and season.")
        if not ideas:
            base = ", ".join(by_name[:3]) or "what you have"
            ideas.append(f"Pantry toss: prep {base}, cook together in a pan until done and season to taste.")
        return ideas


def build_source(settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> RecipeSource:
    if settings.suggestion_source == "openai":
        return OpenAIRecipeSource(settings)
    if settings.suggestion_source == "local":
        return SimpleRecipeSource()
    return HTTPRecipeSource(settings, transport=transport)
