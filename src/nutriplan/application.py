"""Application shell wiring routes to pages."""

import asyncio
from collections.abc import Awaitable
from dataclasses import dataclass

from nutriplan.navigation import NavItem, nav_index, route_for_label
from nutriplan.pages.food_log import FoodLogPage
from nutriplan.pages.home import HomePage
from nutriplan.pages.meal_details import MealDetailsPage
from nutriplan.pages.product_scanner import ProductScannerPage
from nutriplan.presentation.screen import (
    FOOD_LOG_SECTION,
    HOME_SECTION,
    MEAL_DETAILS_SECTION,
    PRODUCTS_SECTION,
    Screen,
)
from nutriplan.services.router import HOME_ROUTE, HashRouter, RouteParams


@dataclass
class NutriPlanApp:
    """Registers the navigation surface and activates pages."""

    router: HashRouter
    screen: Screen
    home_page: HomePage
    meal_details_page: MealDetailsPage
    product_scanner_page: ProductScannerPage
    food_log_page: FoodLogPage

    def __post_init__(self) -> None:
        self.router.on_route("#home", self._show_home)
        self.router.on_route("#products", self._show_products)
        self.router.on_route("#foodlog", self._show_food_log)
        self.router.on_route("#meal/:id", self._show_meal)

    def start(self) -> asyncio.Task[None] | None:
        """Resolve the initial location."""
        return self.router.navigate(self.router.location.fragment or HOME_ROUTE)

    def select_nav(self, text: str) -> asyncio.Task[None] | None:
        """Follow a sidebar link by its text; unknown links are ignored."""
        route = route_for_label(text)
        if route is None:
            return None
        return self.router.navigate(route)

    def _show_home(self, params: RouteParams) -> Awaitable[None]:
        self.screen.activate(HOME_SECTION, nav_index(NavItem.MEALS))
        return self.home_page.init()

    def _show_products(self, params: RouteParams) -> None:
        self.screen.activate(PRODUCTS_SECTION, nav_index(NavItem.PRODUCTS))
        self.product_scanner_page.init()

    def _show_food_log(self, params: RouteParams) -> None:
        self.screen.activate(FOOD_LOG_SECTION, nav_index(NavItem.FOOD_LOG))
        self.food_log_page.init()

    def _show_meal(self, params: RouteParams) -> Awaitable[None]:
        self.screen.activate(MEAL_DETAILS_SECTION, nav_index(NavItem.MEALS))
        return self.meal_details_page.init(params["id"])
