"""Stores for the global ingredient, symptom and supplement catalogs."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from food_diary.domain.models import Ingredient, Supplement, Symptom
from food_diary.domain.results import ApiResult
from food_diary.sync.base import CollectionStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class CatalogStore(CollectionStore[T]):
    """Catalog store with a case-insensitive search filter."""

    search_term: str = field(default="", init=False)

    @property
    def filtered(self) -> list[T]:
        """Items whose label contains the current search term."""
        needle = self.search_term.lower()
        return [item for item in self.items if needle in self._label(item).lower()]

    def _label(self, item: T) -> str:
        raise NotImplementedError

    async def _create(
        self,
        call: Callable[[], Awaitable[ApiResult]],
        decode: Callable[[Any], T],
        failure_message: str,
    ) -> T | None:
        result = await self._mutate(call, failure_message)
        if not result.ok:
            return None
        created = result.map(decode)
        if not created.ok or created.data is None:
            logger.warning("%s: backend returned no usable record, reloading", failure_message)
            await self.load()
            return None
        self._apply(lambda items: [*items, created.data])
        return created.data

    async def load(self) -> bool:
        raise NotImplementedError


@dataclass
class IngredientsStore(CatalogStore[Ingredient]):
    """Local copy of the ingredient catalog."""

    async def load(self) -> bool:
        return await self._load_items(
            self.gateway.get_ingredients,
            Ingredient.from_payload,
            "Failed to load ingredients",
        )

    async def add(self, name: str) -> Ingredient | None:
        """Create an ingredient and append it locally."""
        return await self._create(
            lambda: self.gateway.create_ingredient(name),
            Ingredient.from_payload,
            "Failed to add ingredient",
        )

    def _label(self, item: Ingredient) -> str:
        return item.name


@dataclass
class SymptomsStore(CatalogStore[Symptom]):
    """Local copy of the symptom catalog."""

    async def load(self) -> bool:
        return await self._load_items(
            self.gateway.get_symptoms,
            Symptom.from_payload,
            "Failed to load symptoms",
        )

    async def add(self, title: str) -> Symptom | None:
        """Create a symptom and append it locally."""
        return await self._create(
            lambda: self.gateway.create_symptom(title),
            Symptom.from_payload,
            "Failed to add symptom",
        )

    def _label(self, item: Symptom) -> str:
        return item.title


@dataclass
class SupplementsStore(CatalogStore[Supplement]):
    """Local copy of the supplement catalog."""

    async def load(self) -> bool:
        return await self._load_items(
            self.gateway.get_supplements,
            Supplement.from_payload,
            "Failed to load supplements",
        )

    async def add(self, name: str) -> Supplement | None:
        """Create a supplement and append it locally."""
        return await self._create(
            lambda: self.gateway.create_supplement(name),
            Supplement.from_payload,
            "Failed to add supplement",
        )

    async def delete(self, supplement_id: int) -> bool:
        """Delete a supplement and drop it locally."""
        result = await self._mutate(
            lambda: self.gateway.delete_supplement(supplement_id),
            "Failed to delete supplement",
        )
        if result.ok:
            self._apply(lambda items: [s for s in items if s.id != supplement_id])
        return result.ok

    def _label(self, item: Supplement) -> str:
        return item.name
