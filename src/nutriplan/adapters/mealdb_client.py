"""TheMealDB recipe API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class MealDbClient(Protocol):
    """Interface for recipe catalog interactions."""

    async def random_meal(self) -> dict[str, object]:
        """Return a payload holding one random meal."""

    async def by_id(self, meal_id: str) -> dict[str, object]:
        """Return a payload holding the meal with the given id."""

    async def by_category(self, category: str) -> dict[str, object]:
        """Return a payload of meals in a category."""

    async def by_area(self, area: str) -> dict[str, object]:
        """Return a payload of meals from an area."""

    async def search(self, text: str) -> dict[str, object]:
        """Return a payload of meals whose name matches the text."""

    async def list_categories(self) -> dict[str, object]:
        """Return a payload listing category names."""

    async def list_areas(self) -> dict[str, object]:
        """Return a payload listing area names."""


@dataclass
class HttpxMealDbClient(MealDbClient):
    """HTTPX-backed TheMealDB client."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15.0

    @classmethod
    def create(cls, base_url: str, timeout: float = 15.0) -> "HttpxMealDbClient":
        """Create a client with a managed httpx session."""
        return cls(base_url=base_url, http_client=httpx.AsyncClient(), timeout=timeout)

    async def random_meal(self) -> dict[str, object]:
        """Fetch one random meal."""
        return await self._get("random.php")

    async def by_id(self, meal_id: str) -> dict[str, object]:
        """Look up a meal by id."""
        return await self._get("lookup.php", {"i": meal_id})

    async def by_category(self, category: str) -> dict[str, object]:
        """Filter meals by category."""
        return await self._get("filter.php", {"c": category})

    async def by_area(self, area: str) -> dict[str, object]:
        """Filter meals by area."""
        return await self._get("filter.php", {"a": area})

    async def search(self, text: str) -> dict[str, object]:
        """Search meals by name."""
        return await self._get("search.php", {"s": text})

    async def list_categories(self) -> dict[str, object]:
        """List meal categories."""
        return await self._get("list.php", {"c": "list"})

    async def list_areas(self) -> dict[str, object]:
        """List meal areas."""
        return await self._get("list.php", {"a": "list"})

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()

    async def _get(
        self, path: str, params: dict[str, str] | None = None
    ) -> dict[str, object]:
        response = await self.http_client.get(
            f"{self.base_url}/{path}", params=params, timeout=self.timeout
        )
        response.raise_for_status()
        return response.json()
