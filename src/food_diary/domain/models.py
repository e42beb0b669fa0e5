"""Domain models for the food diary."""

import datetime as dt
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Account:
    """The single configured account allowed to log in."""

    id: str
    username: str
    password_hash: str


@dataclass(frozen=True)
class Entry:
    """A single day's diary record."""

    id: int
    date: str
    symptomatic: bool

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "Entry":
        return cls(
            id=int(payload["id"]),
            date=str(payload["date"]),
            symptomatic=bool(payload.get("symptomatic", False)),
        )

    @property
    def day(self) -> dt.date:
        """Calendar date of the entry as sent by the backend."""
        return dt.datetime.fromisoformat(self.date).date()


@dataclass(frozen=True)
class Ingredient:
    """Global catalog ingredient."""

    id: int
    name: str

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "Ingredient":
        return cls(id=int(payload["id"]), name=str(payload.get("name") or ""))


@dataclass(frozen=True)
class Symptom:
    """Global catalog symptom."""

    id: int
    title: str

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "Symptom":
        return cls(id=int(payload["id"]), title=str(payload.get("title") or ""))


@dataclass(frozen=True)
class Supplement:
    """Global catalog supplement."""

    id: int
    name: str

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "Supplement":
        return cls(id=int(payload["id"]), name=str(payload.get("name") or ""))


@dataclass(frozen=True)
class EntryIngredient:
    """Association of an ingredient with an entry."""

    entry_id: int
    ingredient_id: int
    notes: str = ""

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "EntryIngredient":
        return cls(
            entry_id=int(payload["entryId"]),
            ingredient_id=int(payload["ingredientId"]),
            notes=str(payload.get("notes") or ""),
        )


@dataclass(frozen=True)
class EntrySymptom:
    """Association of a symptom with an entry."""

    entry_id: int
    symptom_id: int
    notes: str = ""
    symptom_title: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "EntrySymptom":
        title = payload.get("symptomTitle")
        return cls(
            entry_id=int(payload["entryId"]),
            symptom_id=int(payload["symptomId"]),
            notes=str(payload.get("notes") or ""),
            symptom_title=str(title) if title is not None else None,
        )


@dataclass(frozen=True)
class EntrySupplement:
    """Association of a supplement with an entry."""

    entry_id: int
    supplement_id: int
    supplement_name: str | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "EntrySupplement":
        name = payload.get("supplementName") or payload.get("supplementTitle")
        return cls(
            entry_id=int(payload["entryId"]),
            supplement_id=int(payload["supplementId"]),
            supplement_name=str(name) if name is not None else None,
        )


@dataclass(frozen=True)
class Meal:
    """A named, reusable group of ingredients."""

    id: int
    name: str
    ingredients: tuple[Ingredient, ...] = field(default_factory=tuple)

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "Meal":
        raw_ingredients = payload.get("ingredients") or []
        return cls(
            id=int(payload["id"]),
            name=str(payload.get("name") or ""),
            ingredients=tuple(
                Ingredient.from_payload(item)
                for item in raw_ingredients  # type: ignore[union-attr]
                if isinstance(item, dict)
            ),
        )


@dataclass(frozen=True)
class EntryMeal:
    """Association of a meal with an entry."""

    entry_id: int
    meal_id: int
    meal_name: str | None = None
    ingredients: tuple[Ingredient, ...] = field(default_factory=tuple)

    @classmethod
    def from_payload(cls, payload: dict[str, object]) -> "EntryMeal":
        raw_ingredients = payload.get("ingredients") or []
        name = payload.get("mealName")
        return cls(
            entry_id=int(payload["entryId"]),
            meal_id=int(payload["mealId"]),
            meal_name=str(name) if name is not None else None,
            ingredients=tuple(
                Ingredient.from_payload(item)
                for item in raw_ingredients  # type: ignore[union-attr]
                if isinstance(item, dict)
            ),
        )
