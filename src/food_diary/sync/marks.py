"""Store for the safe and unsafe ingredient lists."""

import asyncio
import logging
from dataclasses import dataclass, field

from food_diary.domain.marks import decode_marked_ingredients
from food_diary.domain.models import Ingredient
from food_diary.sync.base import StoreBase

logger = logging.getLogger(__name__)


@dataclass
class SafeUnsafeIngredientsStore(StoreBase):
    """Keeps the two mark lists disjoint on the client side.

    Marking an ingredient moves it out of the opposite list. If the moved
    ingredient is not known locally, both lists are fetched again.
    """

    safe: list[Ingredient] = field(default_factory=list, init=False)
    unsafe: list[Ingredient] = field(default_factory=list, init=False)

    async def load(self) -> bool:
        seq = self._begin_load()
        safe_result, unsafe_result = await asyncio.gather(
            self._call(self.gateway.get_safe_ingredients),
            self._call(self.gateway.get_unsafe_ingredients),
        )
        if not self._is_current(seq):
            return False
        self.is_loading = False
        safe_result = safe_result.map(decode_marked_ingredients)
        unsafe_result = unsafe_result.map(decode_marked_ingredients)
        for result in (safe_result, unsafe_result):
            if not result.ok:
                self.safe = []
                self.unsafe = []
                self._fail("Failed to load ingredient marks", result.error)
                return False
        self.safe = safe_result.data or []
        self.unsafe = unsafe_result.data or []
        return True

    async def mark_safe(self, ingredient_id: int) -> bool:
        """Mark an ingredient safe, moving it out of the unsafe list."""
        result = await self._mutate(
            lambda: self.gateway.mark_ingredient_safe(ingredient_id),
            "Failed to mark ingredient as safe",
        )
        if not result.ok:
            return False
        await self._move(ingredient_id, to_safe=True)
        return True

    async def mark_unsafe(self, ingredient_id: int) -> bool:
        """Mark an ingredient unsafe, moving it out of the safe list."""
        result = await self._mutate(
            lambda: self.gateway.mark_ingredient_unsafe(ingredient_id),
            "Failed to mark ingredient as unsafe",
        )
        if not result.ok:
            return False
        await self._move(ingredient_id, to_safe=False)
        return True

    async def remove_safe(self, ingredient_id: int) -> bool:
        result = await self._mutate(
            lambda: self.gateway.remove_safe_ingredient(ingredient_id),
            "Failed to remove safe ingredient",
        )
        if result.ok and not self.closed:
            self.safe = [i for i in self.safe if i.id != ingredient_id]
        return result.ok

    async def remove_unsafe(self, ingredient_id: int) -> bool:
        result = await self._mutate(
            lambda: self.gateway.remove_unsafe_ingredient(ingredient_id),
            "Failed to remove unsafe ingredient",
        )
        if result.ok and not self.closed:
            self.unsafe = [i for i in self.unsafe if i.id != ingredient_id]
        return result.ok

    async def _move(self, ingredient_id: int, to_safe: bool) -> None:
        if self.closed:
            return
        source, target = (self.unsafe, self.safe) if to_safe else (self.safe, self.unsafe)
        ingredient = next(
            (i for i in [*source, *target] if i.id == ingredient_id), None
        )
        if ingredient is None:
            logger.info("Ingredient %s not known locally, reloading marks", ingredient_id)
            await self.load()
            return
        remaining = [i for i in source if i.id != ingredient_id]
        moved = [i for i in target if i.id != ingredient_id] + [ingredient]
        if to_safe:
            self.unsafe, self.safe = remaining, moved
        else:
            self.safe, self.unsafe = remaining, moved
