"""Food log page: today's progress, logged items and the weekly chart."""

import asyncio
from dataclasses import dataclass

from nutriplan.domain.food_log import DailySummary
from nutriplan.pages.base import PageController
from nutriplan.presentation.cards import log_item_row
from nutriplan.presentation.screen import Screen
from nutriplan.services.food_log import JournalStore
from nutriplan.services.router import HOME_ROUTE, HashRouter

PRODUCTS_ROUTE = "#products"

_PROGRESS_UNITS = (
    ("calories", "kcal"),
    ("protein", "g"),
    ("carbohydrates", "g"),
    ("fat", "g"),
)

_CHART_SERIES = (
    ("calories", "Calories", "#10b981"),
    ("protein", "Protein (g)", "#3b82f6"),
    ("carbohydrates", "Carbs (g)", "#f59e0b"),
    ("fat", "Fat (g)", "#a855f7"),
)


@dataclass
class FoodLogPage(PageController):
    """Renders the journal and handles removals."""

    food_log: JournalStore
    router: HashRouter
    screen: Screen

    def init(self) -> None:
        self._activate()
        self.screen.set_header(
            "Food Log", "Track and monitor your daily nutrition intake"
        )
        self.render()

    def render(self) -> None:
        """Publish today's journal if the page is visible."""
        if not self._is_active():
            return
        items = self.food_log.get_today_items()
        self.screen.show_content(
            {
                "date_label": self.food_log.clock.now().strftime("%A, %b %d"),
                "progress": self._progress(),
                "items": [log_item_row(item) for item in items],
                "empty_message": None if items else "No meals logged today",
                "clear_visible": bool(items),
                "weekly_chart": weekly_chart(self.food_log.get_weekly_data()),
            }
        )

    def remove_item(self, item_id: str) -> None:
        self.food_log.remove_item(item_id)
        self.render()
        self.screen.notify("Item Removed")

    def clear_all(self) -> None:
        """Clear today's log; the caller has already confirmed."""
        self.food_log.clear_today()
        self.render()
        self.screen.notify("Cleared!")

    def quick_log(self, target: str) -> asyncio.Task[None] | None:
        """Jump to the page where meals or products are logged."""
        if target == "product":
            return self.router.navigate(PRODUCTS_ROUTE)
        return self.router.navigate(HOME_ROUTE)

    def _progress(self) -> list[dict[str, object]]:
        totals = self.food_log.get_today_totals()
        goals = self.food_log.goals
        progress = []
        for nutrient, unit in _PROGRESS_UNITS:
            goal = goals.get(nutrient) or 0.0
            progress.append(
                {
                    "nutrient": nutrient,
                    "value": totals.amount(nutrient),
                    "goal": goal,
                    "percent": self.food_log.get_progress(nutrient),
                    "label": f"{round(totals.amount(nutrient))} / {goal:g} {unit}",
                }
            )
        return progress


def weekly_chart(days: list[DailySummary]) -> dict[str, object]:
    """Line-chart series for the weekly overview."""
    labels = [day.weekday_label for day in days]
    return {
        "title": "Weekly Nutrition Overview",
        "dates": [day.date_key for day in days],
        "labels": labels,
        "series": [
            {
                "name": name,
                "color": color,
                "values": [getattr(day, nutrient) for day in days],
            }
            for nutrient, name, color in _CHART_SERIES
        ],
    }
