# tests/unit/test_display.py
import json

from kitchen.core.display import build_card, visible_instructions
from kitchen.core.models import Recipe
from kitchen.core.normalize import clean_instruction_text


def _recipe(instructions: str) -> Recipe:
    return Recipe(name="r", description="d", instructions=instructions)


def test_clean_strips_fences_and_unescapes():
    assert clean_instruction_text('```json\nSay \\"hi\\"\\nthen go```') == '\nSay "hi"\nthen go'


def test_clean_joins_embedded_recipes():
    text = json.dumps({"recipes": [
        {"instructions": "Boil water."},
        {"description": "A salad."},
        {},
    ]})
    assert clean_instruction_text(text) == "Boil water. A salad. "


def test_clean_handles_double_encoded_json():
    inner = '{\\"recipes\\":[{\\"instructions\\":\\"Stir.\\"}]}'
    assert clean_instruction_text("```json" + inner + "```") == "Stir."


def test_clean_is_idempotent_on_plain_text():
    t = "Chop the onions.\nFry them slowly."
    assert clean_instruction_text(clean_instruction_text(t)) == clean_instruction_text(t)


def test_collapsed_text_is_cut_with_ellipsis():
    r = _recipe("x" * 200)
    out = visible_instructions(r, False, 150)
    assert out == "x" * 150 + "..."
    assert len(out) <= 153


def test_expanded_text_is_full():
    r = _recipe("x" * 200)
    assert visible_instructions(r, True, 150) == "x" * 200


def test_short_text_is_not_cut():
    r = _recipe("Short.")
    assert visible_instructions(r, False) == "Short."


def test_card_fields():
    r = Recipe(name="r", description="d", instructions="y" * 151,
               available_ingredients=["Eggs"], missing_ingredients=["Salt", "Oil"])
    card = build_card(r)
    assert card.can_expand
    assert card.instructions.endswith("...")
    assert card.available_count == 1
    assert card.missing_count == 2
    assert card.can_order_missing


def test_card_placeholder_for_empty_instructions():
    card = build_card(_recipe(""))
    assert card.instructions == "No instructions available"
    assert not card.can_expand
    assert not card.can_order_missing


def test_clean_leaves_escaped_backslash_alone():
    t = 'Use a\\\\"quote and a \\"real\\" one'
    once = clean_instruction_text(t)
    assert once == 'Use a\\\\"quote and a "real" one'
    assert clean_instruction_text(once) == once


def test_negative_limit_is_treated_as_zero():
    assert visible_instructions(_recipe("abcdef"), False, -2) == "..."
