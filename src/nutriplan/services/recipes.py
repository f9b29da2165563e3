"""Recipe catalog service backed by TheMealDB."""

import logging
import math
import random
from dataclasses import dataclass, field

from nutriplan.adapters.mealdb_client import MealDbClient
from nutriplan.domain.catalog import Ingredient, Meal
from nutriplan.domain.food_log import NutritionFacts
from nutriplan.services.cache import Cache
from nutriplan.services.providers import PayloadFetch, ProviderError, call_provider

MAX_INGREDIENTS = 20

_logger = logging.getLogger(__name__)


@dataclass
class NutritionEstimator:
    """Randomly estimated recipe nutrition.

    TheMealDB carries no nutrient data, so meal figures are a labeled
    estimate: calories are drawn from 200-499 and macros follow a fixed
    15/50/35 protein/carb/fat energy split.
    """

    rng: random.Random = field(default_factory=random.Random)

    def estimate(self, meal: Meal) -> NutritionFacts:
        """Return estimated nutrition for one serving of a meal."""
        calories = self.rng.randint(200, 499)
        carbohydrates = math.floor(calories * 0.50 / 4)
        return NutritionFacts(
            calories=float(calories),
            protein=float(math.floor(calories * 0.15 / 4)),
            carbohydrates=float(carbohydrates),
            fat=float(math.floor(calories * 0.35 / 9)),
            fiber=float(math.floor(carbohydrates * 0.1)),
            sugar=float(math.floor(carbohydrates * 0.2)),
        )


@dataclass
class RecipeService:
    """Service for recipe lookups with caching."""

    client: MealDbClient
    cache: Cache
    lookup_ttl_seconds: int = 3600
    list_ttl_seconds: int = 86400

    async def random_meals(self, count: int = 25) -> list[Meal]:
        """Collect up to ``count`` distinct random meals.

        Gives up after ``count * 3`` draws. A failure before any meal was
        collected raises ProviderError; a later failure returns what was
        collected so far.
        """
        meals: list[Meal] = []
        seen_ids: set[str] = set()
        attempts = 0
        while len(meals) < count and attempts < count * 3:
            attempts += 1
            try:
                payload = await call_provider(
                    self.client.random_meal, action="random_meal"
                )
            except ProviderError:
                if not meals:
                    raise
                break
            for meal in _parse_meals(payload)[:1]:
                if meal.id in seen_ids:
                    continue
                seen_ids.add(meal.id)
                meals.append(meal)
        _logger.info("Random meals: %s collected in %s draws", len(meals), attempts)
        return meals

    async def get_meal(self, meal_id: str) -> Meal | None:
        """Return a full meal record, or None when the id is unknown."""
        cache_key = f"mealdb:meal:{meal_id}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, Meal):
            return cached
        payload = await call_provider(
            lambda: self.client.by_id(meal_id), action=f"by_id:{meal_id}"
        )
        meals = _parse_meals(payload)
        if not meals:
            return None
        self.cache.set(cache_key, meals[0], ttl_seconds=self.lookup_ttl_seconds)
        return meals[0]

    async def by_category(self, category: str) -> list[Meal]:
        """Return meals filtered by category."""
        return await self._cached_meals(
            f"mealdb:category:{category.lower()}",
            lambda: self.client.by_category(category),
            action=f"by_category:{category}",
        )

    async def by_area(self, area: str) -> list[Meal]:
        """Return meals filtered by area."""
        return await self._cached_meals(
            f"mealdb:area:{area.lower()}",
            lambda: self.client.by_area(area),
            action=f"by_area:{area}",
        )

    async def search(self, query: str) -> list[Meal]:
        """Search meals by name."""
        return await self._cached_meals(
            f"mealdb:search:{query.lower()}",
            lambda: self.client.search(query),
            action="search",
        )

    async def categories(self) -> list[str]:
        """Return category names."""
        return await self._cached_names(
            "mealdb:categories", self.client.list_categories, "strCategory"
        )

    async def areas(self) -> list[str]:
        """Return area names."""
        return await self._cached_names(
            "mealdb:areas", self.client.list_areas, "strArea"
        )

    async def _cached_meals(
        self, cache_key: str, fetch: PayloadFetch, *, action: str
    ) -> list[Meal]:
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return list(cached)
        payload = await call_provider(fetch, action=action)
        meals = _parse_meals(payload)
        self.cache.set(cache_key, meals, ttl_seconds=self.lookup_ttl_seconds)
        return list(meals)

    async def _cached_names(
        self, cache_key: str, fetch: PayloadFetch, field_name: str
    ) -> list[str]:
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return list(cached)
        payload = await call_provider(fetch, action=cache_key)
        names = [
            str(entry[field_name])
            for entry in _entries(payload)
            if entry.get(field_name)
        ]
        self.cache.set(cache_key, names, ttl_seconds=self.list_ttl_seconds)
        return list(names)


def parse_meal(payload: dict[str, object]) -> Meal:
    """Build a Meal from a TheMealDB record."""
    ingredients: list[Ingredient] = []
    for index in range(1, MAX_INGREDIENTS + 1):
        name = _text(payload.get(f"strIngredient{index}"))
        if not name:
            continue
        measure = _text(payload.get(f"strMeasure{index}"))
        ingredients.append(Ingredient(name=name, measure=measure))
    tags = tuple(
        tag.strip() for tag in _text(payload.get("strTags")).split(",") if tag.strip()
    )
    return Meal(
        id=_text(payload.get("idMeal")),
        name=_text(payload.get("strMeal")) or "Unknown Meal",
        thumbnail=_text(payload.get("strMealThumb")),
        category=_text(payload.get("strCategory")) or None,
        area=_text(payload.get("strArea")) or None,
        tags=tags,
        instructions=_text(payload.get("strInstructions")),
        youtube_url=_text(payload.get("strYoutube")) or None,
        ingredients=tuple(ingredients),
    )


def _parse_meals(payload: dict[str, object]) -> list[Meal]:
    return [parse_meal(entry) for entry in _entries(payload) if entry.get("idMeal")]


def _entries(payload: dict[str, object]) -> list[dict[str, object]]:
    """Return the ``meals`` list; TheMealDB uses null for no results."""
    entries = payload.get("meals")
    if not isinstance(entries, list):
        return []
    return [entry for entry in entries if isinstance(entry, dict)]


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()
