"""Meal details page: recipe, estimated nutrition and logging."""

import asyncio
import logging
import re
from collections.abc import Awaitable
from dataclasses import dataclass, field

from nutriplan.domain.catalog import Meal
from nutriplan.domain.food_log import LogItem, NutritionFacts
from nutriplan.pages.base import PageController
from nutriplan.presentation.screen import Screen
from nutriplan.services.food_log import JournalStore
from nutriplan.services.providers import ProviderError
from nutriplan.services.recipes import NutritionEstimator, RecipeService
from nutriplan.services.router import HOME_ROUTE, HashRouter

# Reference daily values for the nutrition facts bars.
DAILY_VALUES = {
    "protein": 50.0,
    "carbohydrates": 250.0,
    "fat": 65.0,
    "fiber": 25.0,
    "sugar": 50.0,
}

_YOUTUBE_ID = re.compile(
    r"^.*(youtu.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*"
)

_logger = logging.getLogger(__name__)


@dataclass
class MealDetailsPage(PageController):
    """Shows one recipe and logs it to today's journal."""

    recipe_service: RecipeService
    router: HashRouter
    food_log: JournalStore
    screen: Screen
    estimator: NutritionEstimator = field(default_factory=NutritionEstimator)
    current_meal: Meal | None = None
    current_nutrition: NutritionFacts | None = None

    def init(self, meal_id: str) -> Awaitable[None]:
        """Activate the page and return the loading coroutine."""
        self._activate()
        self.current_meal = None
        self.current_nutrition = None
        self.screen.set_header(
            "Meal Details", "View recipe details and nutrition information"
        )
        return self.load_meal_details(meal_id)

    async def load_meal_details(self, meal_id: str) -> None:
        if self._is_active():
            self.screen.show_loading()
        try:
            meal = await self.recipe_service.get_meal(meal_id)
        except ProviderError:
            _logger.exception("Error loading meal details for %s", meal_id)
            if self._is_active():
                self.screen.show_error("Failed to load meal details")
            return
        if not self._is_active():
            _logger.debug("Discarding meal %s for a superseded navigation", meal_id)
            return
        if meal is None:
            self.current_meal = None
            self.current_nutrition = None
            self.screen.show_not_found("Meal not found")
            return
        self.current_meal = meal
        self.current_nutrition = self.estimator.estimate(meal)
        self.screen.show_content(render_meal(meal, self.current_nutrition))

    def log_meal(self) -> LogItem | None:
        """Add the displayed meal with its shown nutrition to today's log."""
        if self.current_meal is None or not self._is_active():
            return None
        nutrition = self.current_nutrition or self.estimator.estimate(
            self.current_meal
        )
        item = self.food_log.add_item(
            {
                "name": self.current_meal.name,
                "type": "meal",
                "image": self.current_meal.thumbnail,
                "nutrition": nutrition.as_dict(),
            }
        )
        self.screen.notify(
            "Meal Logged!",
            f"{self.current_meal.name} has been added to your food log.",
        )
        return item

    def back_to_meals(self) -> asyncio.Task[None] | None:
        return self.router.navigate(HOME_ROUTE)


def render_meal(meal: Meal, nutrition: NutritionFacts) -> dict[str, object]:
    """Build the detail view for a meal."""
    tags: list[dict[str, str]] = []
    if meal.category:
        tags.append({"text": meal.category, "color": "emerald"})
    if meal.area:
        tags.append({"text": meal.area, "color": "blue"})
    if meal.tags:
        tags.append({"text": meal.tags[0], "color": "purple"})

    steps = [line.strip() for line in meal.instructions.splitlines() if line.strip()]
    video_id = extract_youtube_id(meal.youtube_url or "")
    return {
        "id": meal.id,
        "name": meal.name,
        "image": meal.thumbnail,
        "tags": tags,
        "ingredients": [
            {"ingredient": ingredient.name, "measure": ingredient.measure}
            for ingredient in meal.ingredients
        ],
        "ingredient_count_label": f"{len(meal.ingredients)} items",
        "instructions": steps,
        "video_embed_url": (
            f"https://www.youtube.com/embed/{video_id}" if video_id else None
        ),
        "nutrition": {
            "estimated": True,
            "values": nutrition.as_dict(),
            "daily_value_percent": {
                name: min(nutrition.amount(name) / reference * 100.0, 100.0)
                for name, reference in DAILY_VALUES.items()
            },
        },
    }


def extract_youtube_id(url: str) -> str | None:
    """Return the 11-character video id of a YouTube link."""
    match = _YOUTUBE_ID.match(url)
    if match and len(match.group(2)) == 11:
        return match.group(2)
    return None
