# tests/unit/test_normalize.py
import json

from kitchen.core.models import InventoryItem, Recipe, RecipeDefaults
from kitchen.core.normalize import PayloadKind, RecipeNormalizer, classify, normalize

INVENTORY = [{"name": "Eggs"}, {"name": "Butter"}, {"name": "Milk"}, {"name": "Flour"}]


def test_named_object_gets_defaults_filled():
    r = normalize({"name": "Toast"}, INVENTORY)
    assert r.name == "Toast"
    assert r.description == "AI-generated recipe based on your ingredients"
    assert r.instructions == ""
    assert r.available_ingredients == []
    assert r.missing_ingredients == []


def test_canonical_object_is_returned_unchanged():
    raw = {
        "name": "Pancakes",
        "description": "Fluffy",
        "instructions": "Mix. Fry.",
        "availableIngredients": ["Eggs", "Milk"],
        "missingIngredients": ["Baking powder"],
    }
    r = normalize(raw, INVENTORY)
    assert r.model_dump(by_alias=True) == raw
    assert normalize(r, INVENTORY) == r


def test_json_string_takes_first_recipe_only():
    raw = json.dumps({"recipes": [
        {"name": "First", "instructions": "one"},
        {"name": "Second", "instructions": "two", "missingIngredients": ["x"]},
    ]})
    r = normalize(raw, INVENTORY)
    assert r == normalize({"name": "First", "instructions": "one"}, INVENTORY)


def test_fenced_json_string_is_parsed():
    raw = "```json\n{\"recipes\":[{\"name\":\"Omelette\",\"instructions\":\"Beat eggs. Cook.\"}]}\n```"
    r = normalize(raw, INVENTORY)
    assert r.name == "Omelette"
    assert r.instructions == "Beat eggs. Cook."


def test_plain_text_falls_back_to_placeholder_recipe():
    raw = "Just fry the eggs with salt."
    r = normalize(raw, [{"name": "Eggs"}, {"name": "Butter"}])
    assert r.instructions == raw
    assert r.available_ingredients == ["Eggs", "Butter"]
    assert r.missing_ingredients == ["Salt", "Pepper", "Oil"]
    assert r.name == "Recipe Suggestion"


def test_malformed_json_keeps_raw_text_and_first_three_inventory_names():
    raw = '{"recipes": [{"name": "Broken"'
    r = normalize(raw, INVENTORY)
    assert r.instructions == raw
    assert r.available_ingredients == ["Eggs", "Butter", "Milk"]


def test_json_without_recipes_uses_fallback():
    raw = json.dumps({"recipes": []})
    r = normalize(raw, INVENTORY)
    assert r.instructions == raw
    assert r.missing_ingredients == ["Salt", "Pepper", "Oil"]


def test_inventory_sample_accepts_models_and_strings():
    items = [InventoryItem(name="Rice"), "Onion"]
    r = normalize("make something", items)
    assert r.available_ingredients == ["Rice", "Onion"]


def test_unrecognized_inputs_give_empty_recipe():
    for raw in (None, 42, {"foo": "bar"}, {"name": ""}, []):
        r = normalize(raw, INVENTORY)
        assert r.name == "Recipe Suggestion"
        assert r.available_ingredients == []
        assert r.missing_ingredients == []


def test_nameless_object_keeps_its_content():
    r = normalize({"instructions": "Boil pasta.", "missingIngredients": ["Basil"]}, INVENTORY)
    assert r.name == "Recipe Suggestion"
    assert r.description == "AI-generated recipe based on your ingredients"
    assert r.instructions == "Boil pasta."
    assert r.missing_ingredients == ["Basil"]
    assert r.available_ingredients == []


def test_blank_name_still_counts_as_named():
    raw = {"name": "  ", "instructions": "Fry.", "missingIngredients": ["Oil"]}
    assert classify(raw) is PayloadKind.NAMED_OBJECT
    r = normalize(raw, INVENTORY)
    assert r.name == "  "
    assert r.instructions == "Fry."
    assert r.missing_ingredients == ["Oil"]


def test_wrapped_object_uses_first_recipe():
    r = normalize({"recipes": [{"name": "Soup"}, {"name": "Stew"}]}, INVENTORY)
    assert r.name == "Soup"


def test_lenient_ingredient_shapes():
    r = normalize({
        "name": "Curry",
        "availableIngredients": [{"name": "Rice"}, "Onion", None],
        "missingIngredients": "Garam masala, Cumin",
    })
    assert r.available_ingredients == ["Rice", "Onion"]
    assert r.missing_ingredients == ["Garam masala", "Cumin"]


def test_injected_defaults_are_used():
    d = RecipeDefaults(placeholder_name="Idea", fallback_missing=["Water"], fallback_available_count=1)
    r = RecipeNormalizer(d).normalize("boil it", INVENTORY)
    assert r.name == "Idea"
    assert r.missing_ingredients == ["Water"]
    assert r.available_ingredients == ["Eggs"]


def test_classify():
    assert classify({"name": "x"}) is PayloadKind.NAMED_OBJECT
    assert classify({"recipes": [{}]}) is PayloadKind.WRAPPED_OBJECT
    assert classify('{"recipes": [{"name": "x"}]}') is PayloadKind.JSON_STRING
    assert classify("hello") is PayloadKind.PLAIN_STRING
    assert classify('{"name": "x"}') is PayloadKind.PLAIN_STRING
    assert classify(3.5) is PayloadKind.UNRECOGNIZED
    assert classify({"description": "x"}) is PayloadKind.PARTIAL_OBJECT
    assert classify({"name": None, "steps": None}) is PayloadKind.UNRECOGNIZED


def test_lists_are_never_missing():
    for raw in ({"name": "a", "availableIngredients": None}, "text", None, '{"recipes":[{"name":"b"}]}'):
        r = normalize(raw, INVENTORY)
        assert isinstance(r.available_ingredients, list)
        assert isinstance(r.missing_ingredients, list)
        assert isinstance(r, Recipe)
