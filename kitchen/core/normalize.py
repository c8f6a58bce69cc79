# kitchen/core/normalize.py
from __future__ import annotations

import enum
import json
import logging
import re
from typing import Any, Iterable, List, Mapping, Optional

from pydantic import BaseModel

from .models import InventoryItem, Recipe, RecipeDefaults

logger = logging.getLogger(__name__)

DEFAULTS = RecipeDefaults()

_FENCE_RE = re.compile(r"```(?:json)?")
# \" and \n, unless the backslash is itself escaped
_ESCAPE_RE = re.compile(r'(?<!\\)\\(["n])')
_UNESCAPED = {'"': '"', "n": "\n"}

RECIPE_FIELDS = (
    "title", "description", "instructions", "steps",
    "availableIngredients", "available_ingredients",
    "missingIngredients", "missing_ingredients",
)


class PayloadKind(str, enum.Enum):
    NAMED_OBJECT = "named_object"
    PARTIAL_OBJECT = "partial_object"
    WRAPPED_OBJECT = "wrapped_object"
    JSON_STRING = "json_string"
    PLAIN_STRING = "plain_string"
    UNRECOGNIZED = "unrecognized"


# ---- Text helpers -------------------------------------------------------------

def strip_code_fences(text: str) -> str:
    """Drop ```json / ``` markers wherever they appear."""
    return _FENCE_RE.sub("", text)


def _loads(text: str) -> Any:
    """json.loads that returns None instead of raising."""
    try:
        return json.loads(text)
    except (ValueError, TypeError, RecursionError):
        return None


def _first_candidate(recipes: Any) -> Optional[Any]:
    if isinstance(recipes, list) and recipes:
        return recipes[0]
    return None


def clean_instruction_text(text: Any) -> str:
    """
    Make upstream instruction text presentable.

    The generator sometimes double-encodes: a JSON document whose string fields hold
    more JSON. So: strip fences, unescape \\" and \\n, then try one more parse; if
    that yields {"recipes": [...]}, join each entry's instructions (or description).
    Otherwise the cleaned text is returned as-is.
    """
    if text is None:
        return ""
    if not isinstance(text, str):
        text = str(text)
    cleaned = _ESCAPE_RE.sub(lambda m: _UNESCAPED[m.group(1)], strip_code_fences(text))

    data = _loads(cleaned)
    if isinstance(data, dict) and isinstance(data.get("recipes"), list):
        parts = []
        for r in data["recipes"]:
            if isinstance(r, dict):
                parts.append(_as_text(r.get("instructions") or r.get("description")))
            else:
                parts.append("")
        return " ".join(parts)
    return cleaned


# ---- Field coercion -----------------------------------------------------------

def _as_text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        # steps given as a list
        return "\n".join(_as_text(v) for v in value)
    return str(value)


def _name_of(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, InventoryItem):
        return value.name
    if isinstance(value, Mapping):
        n = value.get("name")
        return n if isinstance(n, str) else None
    if value is None:
        return None
    return str(value)


def _as_names(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [p.strip() for p in value.split(",") if p.strip()]
    if isinstance(value, (list, tuple)):
        names = []
        for v in value:
            n = _name_of(v)
            if n is not None:
                names.append(n)
        return names
    return []


def _sample_names(inventory_sample: Any) -> List[str]:
    try:
        return [n for n in (_name_of(i) for i in inventory_sample or ()) if n]
    except TypeError:
        return []


def _as_mapping(raw: Any) -> Optional[Mapping]:
    if isinstance(raw, Mapping):
        return raw
    if isinstance(raw, BaseModel):
        return raw.model_dump(by_alias=True)
    return None


def _has_name(obj: Mapping) -> bool:
    n = obj.get("name")
    return isinstance(n, str) and n != ""


def _has_recipe_fields(obj: Mapping) -> bool:
    return any(obj.get(k) is not None for k in RECIPE_FIELDS)


def _pick(obj: Mapping, *keys: str) -> Any:
    for k in keys:
        if k in obj and obj[k] is not None:
            return obj[k]
    return None


# ---- Classification -----------------------------------------------------------

def classify(raw: Any) -> PayloadKind:
    """Resolve which shape a raw suggestion has. Never raises."""
    try:
        if isinstance(raw, str):
            parsed = _loads(strip_code_fences(raw))
            if isinstance(parsed, dict) and _first_candidate(parsed.get("recipes")) is not None:
                return PayloadKind.JSON_STRING
            return PayloadKind.PLAIN_STRING
        obj = _as_mapping(raw)
        if obj is not None:
            if _has_name(obj):
                return PayloadKind.NAMED_OBJECT
            if _first_candidate(obj.get("recipes")) is not None:
                return PayloadKind.WRAPPED_OBJECT
            if _has_recipe_fields(obj):
                return PayloadKind.PARTIAL_OBJECT
            return PayloadKind.UNRECOGNIZED
        if isinstance(raw, (list, tuple)) and raw and _as_mapping(raw[0]) is not None:
            return PayloadKind.WRAPPED_OBJECT
    except Exception:  # pragma: no cover - adversarial __eq__/__getitem__ etc.
        logger.debug("classify failed on %r", type(raw), exc_info=True)
    return PayloadKind.UNRECOGNIZED


# ---- Normalizer ---------------------------------------------------------------

class RecipeNormalizer:
    """
    Turns any raw suggestion into exactly one canonical Recipe.

    Order of precedence (first match wins):
      1. object with a name, or at least some recipe fields -> fill the rest
         with defaults
      2. string -> parse (after fence stripping); first entry of "recipes" wins,
         otherwise a synthetic recipe built from the raw text
      3. anything else -> the default-filled empty recipe
    Parse failures are a degraded result, never an exception.
    """

    def __init__(self, defaults: Optional[RecipeDefaults] = None):
        self.defaults = defaults or DEFAULTS

    def fill(self, obj: Mapping) -> Recipe:
        d = self.defaults
        name = _pick(obj, "name", "title")
        description = obj.get("description")
        return Recipe(
            name=_as_text(name, d.placeholder_name) or d.placeholder_name,
            description=_as_text(description, d.placeholder_description),
            instructions=_as_text(_pick(obj, "instructions", "steps")),
            available_ingredients=_as_names(_pick(obj, "availableIngredients", "available_ingredients")),
            missing_ingredients=_as_names(_pick(obj, "missingIngredients", "missing_ingredients")),
        )

    def synthetic(self, text: str, inventory_sample: Iterable[Any] = ()) -> Recipe:
        """Best-guess recipe for prose the upstream failed to structure."""
        d = self.defaults
        names = _sample_names(inventory_sample)
        return Recipe(
            name=d.placeholder_name,
            description=d.placeholder_description,
            instructions=text,
            available_ingredients=names[: d.fallback_available_count],
            missing_ingredients=list(d.fallback_missing),
        )

    def empty(self) -> Recipe:
        return Recipe(name=self.defaults.placeholder_name, description=self.defaults.placeholder_description)

    def _from_candidate(self, candidate: Any, raw_text: Optional[str], inventory_sample) -> Recipe:
        obj = _as_mapping(candidate)
        if obj is not None:
            return self.fill(obj)
        if isinstance(candidate, str):
            return self.synthetic(candidate, inventory_sample)
        if raw_text is not None:
            return self.synthetic(raw_text, inventory_sample)
        return self.empty()

    def normalize(self, raw: Any, inventory_sample: Iterable[Any] = ()) -> Recipe:
        try:
            kind = classify(raw)
            if kind in (PayloadKind.NAMED_OBJECT, PayloadKind.PARTIAL_OBJECT):
                return self.fill(_as_mapping(raw))
            if kind is PayloadKind.JSON_STRING:
                parsed = json.loads(strip_code_fences(raw))
                return self._from_candidate(parsed["recipes"][0], raw, inventory_sample)
            if kind is PayloadKind.PLAIN_STRING:
                logger.debug("Unstructured suggestion (%d chars); using fallback recipe", len(raw))
                return self.synthetic(raw, inventory_sample)
            if kind is PayloadKind.WRAPPED_OBJECT:
                obj = _as_mapping(raw)
                candidate = obj["recipes"][0] if obj is not None else raw[0]
                return self._from_candidate(candidate, None, inventory_sample)
        except Exception:
            logger.warning("Recipe normalization failed; returning fallback", exc_info=True)
            if isinstance(raw, str):
                return self.synthetic(raw, inventory_sample)
        return self.empty()


def normalize(raw: Any, inventory_sample: Iterable[Any] = (), defaults: Optional[RecipeDefaults] = None) -> Recipe:
    """Module-level shortcut around RecipeNormalizer."""
    return RecipeNormalizer(defaults).normalize(raw, inventory_sample)
