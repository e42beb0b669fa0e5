"""Store for saved meals and their ingredient lists."""

import logging
from dataclasses import dataclass, replace

from food_diary.domain.models import Ingredient, Meal
from food_diary.sync.catalog import CatalogStore

logger = logging.getLogger(__name__)


@dataclass
class MealsStore(CatalogStore[Meal]):
    """Local copy of the saved meals."""

    async def load(self) -> bool:
        return await self._load_items(
            self.gateway.get_meals, Meal.from_payload, "Failed to load meals"
        )

    async def add(self, name: str, ingredient_ids: list[int] | None = None) -> Meal | None:
        """Create a meal and append it locally."""
        return await self._create(
            lambda: self.gateway.create_meal(name, list(ingredient_ids or [])),
            Meal.from_payload,
            "Failed to create meal",
        )

    async def add_ingredient(self, meal_id: int, ingredient: Ingredient) -> bool:
        result = await self._mutate(
            lambda: self.gateway.add_meal_ingredient(meal_id, ingredient.id),
            "Failed to add ingredient to meal",
        )
        if not result.ok:
            return False
        self._apply(
            lambda items: [
                replace(meal, ingredients=(*meal.ingredients, ingredient))
                if meal.id == meal_id
                and all(i.id != ingredient.id for i in meal.ingredients)
                else meal
                for meal in items
            ]
        )
        return True

    async def remove_ingredient(self, meal_id: int, ingredient_id: int) -> bool:
        result = await self._mutate(
            lambda: self.gateway.delete_meal_ingredient(meal_id, ingredient_id),
            "Failed to remove ingredient from meal",
        )
        if not result.ok:
            return False
        self._apply(
            lambda items: [
                replace(
                    meal,
                    ingredients=tuple(i for i in meal.ingredients if i.id != ingredient_id),
                )
                if meal.id == meal_id
                else meal
                for meal in items
            ]
        )
        return True

    def _label(self, item: Meal) -> str:
        return item.name
