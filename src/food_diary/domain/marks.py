"""Decoding of safe/unsafe ingredient list payloads.

The backend answers the safe and unsafe list endpoints in one of two shapes:
a flat list of ingredients, or a list of mark rows wrapping the ingredient::

    [{"id": 7, "name": "eggs"}]
    [{"id": 1, "ingredientId": 7, "ingredient": {"id": 7, "name": "eggs"}}]

Each row is decoded into one of the two variants below and then reduced to
plain ingredients.
"""

from dataclasses import dataclass

from food_diary.domain.models import Ingredient


@dataclass(frozen=True)
class FlatMark:
    """A mark returned as the bare ingredient."""

    ingredient: Ingredient


@dataclass(frozen=True)
class WrappedMark:
    """A mark row that wraps the ingredient it refers to."""

    id: int
    ingredient_id: int
    ingredient: Ingredient


MarkRow = FlatMark | WrappedMark


def decode_mark_row(row: object) -> MarkRow:
    """Decode a single list row into its variant."""
    if not isinstance(row, dict):
        raise ValueError(f"Unexpected ingredient mark row: {row!r}")
    nested = row.get("ingredient")
    if isinstance(nested, dict):
        ingredient = Ingredient.from_payload(nested)
        return WrappedMark(
            id=int(row["id"]),
            ingredient_id=int(row.get("ingredientId", ingredient.id)),
            ingredient=ingredient,
        )
    if "name" in row:
        return FlatMark(ingredient=Ingredient.from_payload(row))
    raise ValueError(f"Unexpected ingredient mark row: {row!r}")


def decode_marked_ingredients(payload: object) -> list[Ingredient]:
    """Return the ingredients of a safe/unsafe list payload, de-duplicated by id."""
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise ValueError("Ingredient mark payload must be a list")
    ingredients: list[Ingredient] = []
    seen: set[int] = set()
    for row in payload:
        ingredient = decode_mark_row(row).ingredient
        if ingredient.id in seen:
            continue
        seen.add(ingredient.id)
        ingredients.append(ingredient)
    return ingredients
