# kitchen/core/models.py
from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, validator


class CamelModel(BaseModel):
    """Accepts both snake_case and the camelCase keys the UI sends."""
    model_config = ConfigDict(populate_by_name=True)


# ---------- Inventory (read-only snapshot from the inventory service) ----------

class InventoryItem(CamelModel):
    name: str = Field(..., min_length=1)
    quantity: float = 0
    unit: Optional[str] = None
    category: Optional[str] = None
    expiry_date: Optional[str] = Field(None, alias="expiryDate")
    created_at: Optional[str] = Field(None, alias="createdAt")
    id: Optional[str] = Field(None, validation_alias=AliasChoices("id", "_id"))

    @validator("id", pre=True)
    def _id_as_str(cls, v: Any) -> Optional[str]:
        # Mongo-style ids come back as strings, SQL ones as ints
        return None if v is None else str(v)


PLACEHOLDER_NAME = "Recipe Suggestion"
PLACEHOLDER_DESCRIPTION = "AI-generated recipe based on your ingredients"


# ---------- Normalizer configuration ----------

class RecipeDefaults(BaseModel):
    """Constants injected into the normalizer instead of literals in the logic."""
    placeholder_name: str = PLACEHOLDER_NAME
    placeholder_description: str = PLACEHOLDER_DESCRIPTION
    placeholder_instructions: str = "No instructions available"
    fallback_missing: List[str] = Field(default_factory=lambda: ["Salt", "Pepper", "Oil"])
    fallback_available_count: int = Field(3, ge=0)
    preview_limit: int = Field(150, ge=0)
    ellipsis: str = "..."


# ---------- Canonical recipe ----------

class Recipe(CamelModel):
    """A normalized recipe. Both ingredient lists are always present."""
    name: str = PLACEHOLDER_NAME
    description: str = PLACEHOLDER_DESCRIPTION
    instructions: str = ""
    available_ingredients: List[str] = Field(default_factory=list, alias="availableIngredients")
    missing_ingredients: List[str] = Field(default_factory=list, alias="missingIngredients")


class RecipeCard(CamelModel):
    """Display model for one suggestion."""
    recipe: Recipe
    instructions: str
    expanded: bool = False
    can_expand: bool = Field(False, alias="canExpand")
    available_count: int = Field(0, alias="availableCount")
    missing_count: int = Field(0, alias="missingCount")
    can_order_missing: bool = Field(False, alias="canOrderMissing")


# ---------- Gap lookup ----------

class GapResult(CamelModel):
    missing_ingredients: List[str] = Field(default_factory=list, alias="missingIngredients")
    order_url: Optional[str] = Field(None, alias="orderUrl")


class GapResponse(CamelModel):
    status: Literal["noop", "ok"]
    result: Optional[GapResult] = None
    open_in_new_tab: bool = Field(False, alias="openInNewTab")


# ---------- API envelopes ----------

class SuggestionsResponse(CamelModel):
    cards: List[RecipeCard] = Field(default_factory=list)
    inventory_count: int = Field(0, alias="inventoryCount")
    message: Optional[str] = None


class NormalizeRequest(CamelModel):
    raw: Any = None
    inventory: List[Any] = Field(default_factory=list)
    expanded: bool = False


class InstructionsRequest(CamelModel):
    recipe: Recipe
    expanded: bool = False
    limit: Optional[int] = Field(None, ge=0)


class InstructionsResponse(CamelModel):
    text: str
    can_expand: bool = Field(False, alias="canExpand")
