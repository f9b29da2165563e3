"""Sidebar navigation configuration."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class NavLink:
    """Declarative sidebar link."""

    label: str
    route: str


class NavItem(Enum):
    """Sidebar links in display order (single source of truth)."""

    MEALS = NavLink("Meals & Recipes", "#home")
    PRODUCTS = NavLink("Product Scanner", "#products")
    FOOD_LOG = NavLink("Food Log", "#foodlog")


def nav_index(item: NavItem) -> int:
    """Return the sidebar position of a link."""
    return list(NavItem).index(item)


def nav_links() -> list[dict[str, object]]:
    """Return links formatted for the presentation layer."""
    return [
        {"index": index, "label": entry.value.label, "route": entry.value.route}
        for index, entry in enumerate(NavItem)
    ]


def route_for_label(text: str) -> str | None:
    """Map clicked link text to its route."""
    if "Meals" in text:
        return NavItem.MEALS.value.route
    if "Product" in text:
        return NavItem.PRODUCTS.value.route
    if "Food Log" in text:
        return NavItem.FOOD_LOG.value.route
    return None
