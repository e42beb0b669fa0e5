"""Pydantic models for proxy route request bodies."""

from pydantic import BaseModel, Field, StrictBool, StrictInt, StrictStr


class CreateEntryBody(BaseModel):
    """Body of ``POST /api/entries``."""

    date: StrictStr
    symptomatic: StrictBool = False


class NameBody(BaseModel):
    """Body carrying a catalog item name."""

    name: StrictStr


class TitleBody(BaseModel):
    """Body carrying a symptom title."""

    title: StrictStr


class NotesBody(BaseModel):
    """Body of the update-notes routes."""

    notes: StrictStr | None = None


class AddEntryIngredientBody(BaseModel):
    """Body of ``POST /api/entry-ingredients/{entry_id}``."""

    ingredient_id: StrictInt = Field(alias="ingredientId")
    notes: StrictStr | None = None


class AddEntrySymptomBody(BaseModel):
    """Body of ``POST /api/entry-symptoms/{entry_id}``."""

    symptom_id: StrictInt = Field(alias="symptomId")
    notes: StrictStr | None = None


class AddEntrySupplementBody(BaseModel):
    """Body of ``POST /api/entry-supplements``."""

    entry_id: StrictInt = Field(alias="entryId")
    supplement_id: StrictInt = Field(alias="supplementId")


class AddEntryMealBody(BaseModel):
    """Body of ``POST /api/entry-meals``."""

    entry_id: StrictInt = Field(alias="entryId")
    meal_id: StrictInt = Field(alias="mealId")


class IngredientRef(BaseModel):
    """Body naming a single ingredient."""

    ingredient_id: StrictInt = Field(alias="ingredientId")


class CreateMealBody(BaseModel):
    """Body of ``POST /api/meals``."""

    name: StrictStr
    ingredient_ids: list[StrictInt] = Field(default_factory=list, alias="ingredientIds")
