"""Stores for the ingredients, symptoms, supplements and meals of one entry.

Each store follows the selected entry: ``select(entry_id)`` issues one load
for that entry. Mutations act on the selected entry and are no-ops when none
is selected.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field, replace
from typing import Any, TypeVar

from food_diary.domain.models import EntryIngredient, EntryMeal, EntrySupplement, EntrySymptom
from food_diary.domain.results import ApiResult
from food_diary.sync.base import CollectionStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class EntryScopedStore(CollectionStore[T]):
    """A collection that belongs to the currently selected entry."""

    entry_id: int | None = field(default=None, init=False)

    _load_failure_message = "Failed to load entry data"

    async def select(self, entry_id: int | None) -> bool:
        """Switch to ``entry_id`` and load its collection."""
        self.entry_id = entry_id
        if entry_id is None:
            self._cancel_loads()
            self.items = []
            return False
        return await self._load_items(
            lambda: self._fetch(entry_id), self._decode, self._load_failure_message
        )

    async def reload(self) -> bool:
        """Load the selected entry's collection again."""
        return await self.select(self.entry_id)

    async def _fetch(self, entry_id: int) -> ApiResult:
        raise NotImplementedError

    def _decode(self, row: Any) -> T:
        raise NotImplementedError

    def _apply_for(self, entry_id: int, update: Callable[[list[T]], list[T]]) -> None:
        # A mutation that finished after the user moved to another entry must
        # not touch the new entry's list.
        if self.entry_id != entry_id:
            logger.debug("Skipping local update for entry %s", entry_id)
            return
        self._apply(update)

    async def _mutate_entry(
        self,
        call: Callable[[int], Awaitable[ApiResult]],
        failure_message: str,
    ) -> tuple[int, ApiResult] | None:
        entry_id = self.entry_id
        if entry_id is None:
            return None
        result = await self._mutate(lambda: call(entry_id), failure_message)
        return entry_id, result


@dataclass
class EntryIngredientsStore(EntryScopedStore[EntryIngredient]):
    """Ingredients attached to the selected entry."""

    _load_failure_message = "Failed to load entry ingredients"

    async def _fetch(self, entry_id: int) -> ApiResult:
        return await self.gateway.get_entry_ingredients(entry_id)

    def _decode(self, row: Any) -> EntryIngredient:
        return EntryIngredient.from_payload(row)

    async def add(self, ingredient_id: int, notes: str = "") -> bool:
        """Attach an ingredient to the selected entry."""
        outcome = await self._mutate_entry(
            lambda entry_id: self.gateway.add_entry_ingredient(entry_id, ingredient_id, notes),
            "Failed to add ingredient to entry",
        )
        if outcome is None or not outcome[1].ok:
            return False
        entry_id = outcome[0]
        record = EntryIngredient(entry_id=entry_id, ingredient_id=ingredient_id, notes=notes)
        self._apply_for(entry_id, lambda items: [*items, record])
        return True

    async def remove(self, ingredient_id: int) -> bool:
        """Detach an ingredient from the selected entry."""
        outcome = await self._mutate_entry(
            lambda entry_id: self.gateway.delete_entry_ingredient(entry_id, ingredient_id),
            "Failed to remove ingredient from entry",
        )
        if outcome is None or not outcome[1].ok:
            return False
        self._apply_for(
            outcome[0],
            lambda items: [ei for ei in items if ei.ingredient_id != ingredient_id],
        )
        return True

    async def update_notes(self, ingredient_id: int, notes: str) -> bool:
        """Replace the notes on an attached ingredient."""
        outcome = await self._mutate_entry(
            lambda entry_id: self.gateway.update_entry_ingredient_notes(
                entry_id, ingredient_id, notes
            ),
            "Failed to update ingredient notes",
        )
        if outcome is None or not outcome[1].ok:
            return False
        self._apply_for(
            outcome[0],
            lambda items: [
                replace(ei, notes=notes) if ei.ingredient_id == ingredient_id else ei
                for ei in items
            ],
        )
        return True


@dataclass
class EntrySymptomsStore(EntryScopedStore[EntrySymptom]):
    """Symptoms attached to the selected entry."""

    _load_failure_message = "Failed to load entry symptoms"

    async def _fetch(self, entry_id: int) -> ApiResult:
        return await self.gateway.get_entry_symptoms(entry_id)

    def _decode(self, row: Any) -> EntrySymptom:
        return EntrySymptom.from_payload(row)

    async def add(self, symptom_id: int, notes: str = "") -> bool:
        """Attach a symptom to the selected entry."""
        outcome = await self._mutate_entry(
            lambda entry_id: self.gateway.add_entry_symptom(entry_id, symptom_id, notes),
            "Failed to add symptom to entry",
        )
        if outcome is None or not outcome[1].ok:
            return False
        entry_id = outcome[0]
        record = EntrySymptom(entry_id=entry_id, symptom_id=symptom_id, notes=notes)
        self._apply_for(entry_id, lambda items: [*items, record])
        return True

    async def remove(self, symptom_id: int) -> bool:
        """Detach a symptom from the selected entry."""
        outcome = await self._mutate_entry(
            lambda entry_id: self.gateway.delete_entry_symptom(entry_id, symptom_id),
            "Failed to remove symptom from entry",
        )
        if outcome is None or not outcome[1].ok:
            return False
        self._apply_for(
            outcome[0],
            lambda items: [es for es in items if es.symptom_id != symptom_id],
        )
        return True

    async def update_notes(self, symptom_id: int, notes: str) -> bool:
        """Replace the notes on an attached symptom."""
        outcome = await self._mutate_entry(
            lambda entry_id: self.gateway.update_entry_symptom_notes(
                entry_id, symptom_id, notes
            ),
            "Failed to update symptom notes",
        )
        if outcome is None or not outcome[1].ok:
            return False
        self._apply_for(
            outcome[0],
            lambda items: [
                replace(es, notes=notes) if es.symptom_id == symptom_id else es
                for es in items
            ],
        )
        return True


@dataclass
class EntrySupplementsStore(EntryScopedStore[EntrySupplement]):
    """Supplements attached to the selected entry."""

    _load_failure_message = "Failed to load entry supplements"

    async def _fetch(self, entry_id: int) -> ApiResult:
        return await self.gateway.get_entry_supplements(entry_id)

    def _decode(self, row: Any) -> EntrySupplement:
        return EntrySupplement.from_payload(row)

    async def add(self, supplement_id: int) -> bool:
        """Attach a supplement to the selected entry."""
        outcome = await self._mutate_entry(
            lambda entry_id: self.gateway.add_entry_supplement(entry_id, supplement_id),
            "Failed to add supplement",
        )
        if outcome is None or not outcome[1].ok:
            return False
        entry_id = outcome[0]
        record = EntrySupplement(entry_id=entry_id, supplement_id=supplement_id)
        self._apply_for(entry_id, lambda items: [*items, record])
        return True

    async def remove(self, supplement_id: int) -> bool:
        """Detach a supplement from the selected entry."""
        outcome = await self._mutate_entry(
            lambda entry_id: self.gateway.delete_entry_supplement(entry_id, supplement_id),
            "Failed to remove supplement",
        )
        if outcome is None or not outcome[1].ok:
            return False
        self._apply_for(
            outcome[0],
            lambda items: [es for es in items if es.supplement_id != supplement_id],
        )
        return True


@dataclass
class EntryMealsStore(EntryScopedStore[EntryMeal]):
    """Meals attached to the selected entry.

    Unlike the other entry stores, every successful mutation re-fetches the
    list so the local copy is the backend's authoritative view.
    """

    _load_failure_message = "Failed to load entry meals"

    async def _fetch(self, entry_id: int) -> ApiResult:
        return await self.gateway.get_entry_meals(entry_id)

    def _decode(self, row: Any) -> EntryMeal:
        return EntryMeal.from_payload(row)

    async def add(self, meal_id: int) -> bool:
        """Attach a meal to the selected entry, then refresh."""
        outcome = await self._mutate_entry(
            lambda entry_id: self.gateway.add_entry_meal(entry_id, meal_id),
            "Failed to add meal to entry",
        )
        if outcome is None or not outcome[1].ok:
            return False
        if self.entry_id == outcome[0]:
            await self.reload()
        return True

    async def remove(self, meal_id: int) -> bool:
        """Detach a meal from the selected entry, then refresh."""
        outcome = await self._mutate_entry(
            lambda entry_id: self.gateway.delete_entry_meal(entry_id, meal_id),
            "Failed to remove meal from entry",
        )
        if outcome is None or not outcome[1].ok:
            return False
        if self.entry_id == outcome[0]:
            await self.reload()
        return True
