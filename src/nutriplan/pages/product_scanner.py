"""Product scanner page: search, barcode lookup and logging."""

import logging
from dataclasses import dataclass, field

from nutriplan.domain.catalog import Product
from nutriplan.domain.food_log import LogItem
from nutriplan.pages.base import PageController
from nutriplan.presentation.cards import product_card
from nutriplan.presentation.screen import STATUS_EMPTY, Screen
from nutriplan.services.food_log import JournalStore
from nutriplan.services.products import ProductService, filter_by_nutriscore
from nutriplan.services.providers import ProviderError
from nutriplan.services.router import HashRouter

_logger = logging.getLogger(__name__)


@dataclass
class ProductScannerPage(PageController):
    """Finds packaged products and logs them."""

    product_service: ProductService
    router: HashRouter
    food_log: JournalStore
    screen: Screen
    products: list[Product] = field(default_factory=list)
    filtered_products: list[Product] = field(default_factory=list)
    nutriscore_filter: str | None = None

    def init(self) -> None:
        """Activate the page and show the current results."""
        self._activate()
        self.screen.set_header(
            "Product Scanner",
            "Search for packaged food products to view nutrition information",
        )
        self._render()

    async def search_products(self, query: str) -> None:
        query = query.strip()
        if not query:
            return
        if self._is_active():
            self.screen.show_loading()
        try:
            products = await self.product_service.search(query)
        except ProviderError:
            _logger.exception("Error searching products for %r", query)
            if self._is_active():
                self.screen.show_error("Failed to search products. Please try again.")
            return
        self._set_products(products)

    async def lookup_barcode(self, barcode: str) -> None:
        barcode = barcode.strip()
        if not barcode:
            return
        if self._is_active():
            self.screen.show_loading()
        try:
            product = await self.product_service.by_barcode(barcode)
        except ProviderError:
            _logger.exception("Error looking up barcode %s", barcode)
            if self._is_active():
                self.screen.show_error("Failed to lookup barcode. Please try again.")
            return
        if product is None:
            if self._is_active():
                self.screen.show_not_found(
                    "Product not found. Please check the barcode and try again."
                )
            return
        self._set_products([product])

    def filter_by_nutriscore(self, grade: str | None) -> None:
        """Narrow the current results to one Nutri-Score grade."""
        self.nutriscore_filter = grade.lower() if grade else None
        self.filtered_products = filter_by_nutriscore(
            self.products, self.nutriscore_filter
        )
        if self._is_active():
            self._render()

    def add_product_to_log(self, barcode: str) -> LogItem | None:
        """Log a product from the current results by barcode."""
        product = next(
            (product for product in self.products if product.code == barcode), None
        )
        if product is None:
            return None
        item = self.food_log.add_item(
            {
                "name": product.name,
                "type": "product",
                "image": product.image_url,
                "nutrition": product.nutrition.as_dict(),
            }
        )
        self.screen.notify(
            "Product Logged!", f"{product.name} has been added to your food log."
        )
        return item

    def _set_products(self, products: list[Product]) -> None:
        self.products = products
        self.nutriscore_filter = None
        self.filtered_products = list(products)
        if self._is_active():
            self._render()

    def _render(self) -> None:
        count = len(self.filtered_products)
        content: dict[str, object] = {
            "products": [product_card(product) for product in self.filtered_products],
            "count_label": (
                f"Found {count} product(s)"
                if count
                else "Search for products to see results"
            ),
            "nutriscore_filter": self.nutriscore_filter,
        }
        if not count:
            self.screen.show_content(
                content, status=STATUS_EMPTY, message="No products to show"
            )
            return
        self.screen.show_content(content)
