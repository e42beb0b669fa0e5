"""Tests for decoding safe/unsafe ingredient payloads."""

import pytest

from food_diary.domain.marks import (
    FlatMark,
    WrappedMark,
    decode_mark_row,
    decode_marked_ingredients,
)
from food_diary.domain.models import Ingredient

EGGS = Ingredient(id=7, name="eggs")


def test_decode_flat_row() -> None:
    assert decode_mark_row({"id": 7, "name": "eggs"}) == FlatMark(ingredient=EGGS)


def test_decode_wrapped_row() -> None:
    row = {"id": 1, "ingredientId": 7, "ingredient": {"id": 7, "name": "eggs"}}

    assert decode_mark_row(row) == WrappedMark(id=1, ingredient_id=7, ingredient=EGGS)


@pytest.mark.parametrize("row", [None, 7, {"id": 1}, {"id": 1, "ingredient": "eggs"}])
def test_decode_rejects_unknown_rows(row: object) -> None:
    with pytest.raises(ValueError):
        decode_mark_row(row)


def test_mixed_payload_is_deduplicated() -> None:
    payload = [
        {"id": 7, "name": "eggs"},
        {"id": 3, "ingredientId": 7, "ingredient": {"id": 7, "name": "eggs"}},
        {"id": 4, "ingredientId": 8, "ingredient": {"id": 8, "name": "milk"}},
    ]

    assert decode_marked_ingredients(payload) == [EGGS, Ingredient(id=8, name="milk")]


def test_empty_and_missing_payloads() -> None:
    assert decode_marked_ingredients(None) == []
    assert decode_marked_ingredients([]) == []
    with pytest.raises(ValueError):
        decode_marked_ingredients({"items": []})
