# kitchen/core/display.py
from __future__ import annotations

from typing import Optional

from .models import Recipe, RecipeCard, RecipeDefaults
from .normalize import DEFAULTS, clean_instruction_text


def visible_instructions(
    recipe: Recipe,
    expanded: bool,
    limit: Optional[int] = None,
    defaults: Optional[RecipeDefaults] = None,
) -> str:
    """
    Cleaned instructions, cut to `limit` chars plus an ellipsis while collapsed.

    Plain character slice; no attempt to break on word boundaries.
    """
    d = defaults or DEFAULTS
    limit = d.preview_limit if limit is None else max(limit, 0)
    text = clean_instruction_text(recipe.instructions)
    if expanded or len(text) <= limit:
        return text
    return text[:limit] + d.ellipsis


def build_card(
    recipe: Recipe,
    expanded: bool = False,
    defaults: Optional[RecipeDefaults] = None,
) -> RecipeCard:
    d = defaults or DEFAULTS
    cleaned = clean_instruction_text(recipe.instructions)
    text = visible_instructions(recipe, expanded, d.preview_limit, d) if cleaned else d.placeholder_instructions
    return RecipeCard(
        recipe=recipe,
        instructions=text,
        expanded=expanded,
        can_expand=len(cleaned) > d.preview_limit,
        available_count=len(recipe.available_ingredients),
        missing_count=len(recipe.missing_ingredients),
        can_order_missing=bool(recipe.missing_ingredients),
    )
