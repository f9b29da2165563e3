"""Open Food Facts product API client."""

from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote

import httpx

USER_AGENT = "NutriPlan/0.1 (nutrition tracker)"


class OpenFoodFactsClient(Protocol):
    """Interface for packaged-product lookups."""

    async def by_barcode(self, code: str) -> dict[str, object]:
        """Return the product payload for a barcode."""

    async def search(self, text: str, page_size: int = 20) -> dict[str, object]:
        """Return a payload of products matching the text."""


@dataclass
class HttpxOpenFoodFactsClient(OpenFoodFactsClient):
    """HTTPX-backed Open Food Facts client."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 15.0

    @classmethod
    def create(
        cls, base_url: str, timeout: float = 15.0
    ) -> "HttpxOpenFoodFactsClient":
        """Create a client with a managed httpx session."""
        return cls(
            base_url=base_url,
            http_client=httpx.AsyncClient(headers={"User-Agent": USER_AGENT}),
            timeout=timeout,
        )

    async def by_barcode(self, code: str) -> dict[str, object]:
        """Fetch a product by barcode."""
        barcode = quote(code.strip(), safe="")
        url = f"{self.base_url}/api/v0/product/{barcode}.json"
        response = await self.http_client.get(url, timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    async def search(self, text: str, page_size: int = 20) -> dict[str, object]:
        """Run a full-text product search."""
        url = f"{self.base_url}/cgi/search.pl"
        response = await self.http_client.get(
            url,
            params={"search_terms": text, "page_size": page_size, "json": "true"},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
