"""Meals & recipes page."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from nutriplan.domain.catalog import Meal
from nutriplan.pages.base import PageController
from nutriplan.presentation.cards import meal_card
from nutriplan.presentation.screen import STATUS_EMPTY, Screen
from nutriplan.services.providers import ProviderError
from nutriplan.services.recipes import RecipeService
from nutriplan.services.router import HashRouter

MAX_CATEGORIES = 12
MAX_AREAS = 10

_logger = logging.getLogger(__name__)


@dataclass
class HomePage(PageController):
    """Recipe grid with category, area and text filters."""

    recipe_service: RecipeService
    router: HashRouter
    screen: Screen
    meal_count: int = 25
    debounce_seconds: float = 0.5
    meals: list[Meal] = field(default_factory=list)
    filtered_meals: list[Meal] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    areas: list[str] = field(default_factory=list)
    current_filter: dict[str, str | None] = field(
        default_factory=lambda: {"type": "all", "value": None}
    )
    _search_task: asyncio.Task[None] | None = field(
        default=None, init=False, repr=False
    )

    def init(self) -> Awaitable[None]:
        """Activate the page and return the loading coroutine."""
        self._activate()
        self.screen.set_header(
            "Meals & Recipes",
            "Discover delicious and nutritious recipes tailored for you",
        )
        return self.load_meals()

    async def load_meals(self) -> None:
        """Load random meals, then categories and areas."""
        if self._is_active():
            self.screen.show_loading()
        try:
            meals = await self.recipe_service.random_meals(self.meal_count)
        except ProviderError:
            _logger.exception("Error loading meals")
            if self._is_active():
                self.screen.show_error("Failed to load meals. Please try again.")
            return
        if not self._is_active():
            _logger.debug("Discarding meals loaded for a superseded navigation")
            return
        self.meals = meals
        self.filtered_meals = list(meals)
        self.current_filter = {"type": "all", "value": None}
        self.categories = await self._load_names(self.recipe_service.categories)
        self.areas = await self._load_names(self.recipe_service.areas)
        if self._is_active():
            self._render()

    async def filter_by_category(self, category: str) -> None:
        """Show meals from one category."""
        await self._apply_filter(
            "category", category, lambda: self.recipe_service.by_category(category)
        )

    async def filter_by_area(self, area: str) -> None:
        """Show meals from one area."""
        await self._apply_filter(
            "area", area, lambda: self.recipe_service.by_area(area)
        )

    async def search(self, query: str) -> None:
        """Search meals by name; an empty query restores the random meals."""
        query = query.strip()
        if not query:
            self.show_all()
            return
        await self._apply_filter(
            "search", query, lambda: self.recipe_service.search(query)
        )

    def on_search_input(self, text: str) -> asyncio.Task[None]:
        """Debounce search input, cancelling any pending search."""
        if self._search_task is not None and not self._search_task.done():
            self._search_task.cancel()
        self._search_task = asyncio.ensure_future(self._debounced_search(text))
        return self._search_task

    def show_all(self) -> None:
        """Clear filters and show the loaded random meals."""
        self.filtered_meals = list(self.meals)
        self.current_filter = {"type": "all", "value": None}
        if self._is_active():
            self._render()

    def open_meal(self, meal_id: str) -> asyncio.Task[None] | None:
        """Navigate to a meal's detail page."""
        return self.router.navigate(f"#meal/{meal_id}")

    async def _debounced_search(self, text: str) -> None:
        await asyncio.sleep(self.debounce_seconds)
        await self.search(text)

    async def _apply_filter(
        self, filter_type: str, value: str, fetch: Callable[[], Awaitable[list[Meal]]]
    ) -> None:
        if self._is_active():
            self.screen.show_loading()
        try:
            meals = await fetch()
        except ProviderError:
            _logger.exception("Error filtering meals by %s=%s", filter_type, value)
            if self._is_active():
                self.screen.show_error("Failed to load meals. Please try again.")
            return
        if not self._is_active():
            return
        self.filtered_meals = meals
        self.current_filter = {"type": filter_type, "value": value}
        self._render()

    async def _load_names(
        self, fetch: Callable[[], Awaitable[list[str]]]
    ) -> list[str]:
        try:
            return await fetch()
        except ProviderError:
            _logger.exception("Error loading recipe filters")
            return []

    def _render(self) -> None:
        content: dict[str, object] = {
            "recipes": [meal_card(meal) for meal in self.filtered_meals],
            "count_label": f"Showing {len(self.filtered_meals)} recipes",
            "categories": self.categories[:MAX_CATEGORIES],
            "areas": self.areas[:MAX_AREAS],
            "filter": dict(self.current_filter),
        }
        if not self.filtered_meals:
            self.screen.show_content(
                content, status=STATUS_EMPTY, message="No recipes found"
            )
            return
        self.screen.show_content(content)
