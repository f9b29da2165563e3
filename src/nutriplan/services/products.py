"""Packaged-product service backed by Open Food Facts."""

import logging
import math
from dataclasses import dataclass

from nutriplan.adapters.openfoodfacts_client import OpenFoodFactsClient
from nutriplan.domain.catalog import Product
from nutriplan.domain.food_log import NutritionFacts
from nutriplan.services.cache import Cache
from nutriplan.services.providers import ProviderError, call_provider

SEARCH_PAGE_SIZE = 20
NUTRISCORE_GRADES = ("a", "b", "c", "d", "e")

_NUTRIMENT_KEYS = {
    "calories": "energy-kcal",
    "protein": "proteins",
    "carbohydrates": "carbohydrates",
    "fat": "fat",
    "fiber": "fiber",
    "sugar": "sugars",
}

_logger = logging.getLogger(__name__)


@dataclass
class ProductService:
    """Service for product lookups with caching."""

    client: OpenFoodFactsClient
    cache: Cache
    ttl_seconds: int = 3600

    async def by_barcode(self, code: str) -> Product | None:
        """Return the product for a barcode, or None when it is unknown."""
        code = code.strip()
        if not code:
            return None
        cache_key = f"off:product:{code}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, Product):
            return cached
        payload = await call_provider(
            lambda: self.client.by_barcode(code), action=f"by_barcode:{code}"
        )
        raw_product = payload.get("product")
        if payload.get("status") != 1 or not isinstance(raw_product, dict):
            return None
        product = parse_product(raw_product, fallback_code=code)
        self.cache.set(cache_key, product, ttl_seconds=self.ttl_seconds)
        return product

    async def search(self, query: str) -> list[Product]:
        """Look the query up as a barcode first, then as search terms."""
        query = query.strip()
        if not query:
            return []
        try:
            product = await self.by_barcode(query)
        except ProviderError:
            _logger.info("Barcode lookup for %r failed, trying text search", query)
            product = None
        if product is not None:
            return [product]

        cache_key = f"off:search:{query.lower()}"
        cached = self.cache.get(cache_key)
        if isinstance(cached, list):
            return list(cached)
        payload = await call_provider(
            lambda: self.client.search(query, page_size=SEARCH_PAGE_SIZE),
            action="search",
        )
        raw_products = payload.get("products")
        products = [
            parse_product(entry)
            for entry in (raw_products if isinstance(raw_products, list) else [])
            if isinstance(entry, dict)
        ]
        self.cache.set(cache_key, products, ttl_seconds=self.ttl_seconds)
        _logger.info("Product search: query=%s results=%s", query, len(products))
        return list(products)


def filter_by_nutriscore(products: list[Product], grade: str | None) -> list[Product]:
    """Keep products with the given Nutri-Score grade; no grade keeps all."""
    if not grade:
        return list(products)
    wanted = grade.strip().lower()
    return [
        product
        for product in products
        if (product.nutriscore_grade or "").lower() == wanted
    ]


def extract_product_nutrition(nutriments: object) -> NutritionFacts:
    """Return per-100 g nutrition rounded to whole units.

    Falls back to the unsuffixed value when no per-100 g figure exists.
    """
    if not isinstance(nutriments, dict):
        return NutritionFacts()
    values: dict[str, float] = {}
    for field_name, key in _NUTRIMENT_KEYS.items():
        amount = _number(nutriments.get(f"{key}_100g")) or _number(nutriments.get(key))
        values[field_name] = float(_round_half_up(amount))
    return NutritionFacts(**values)


def parse_product(payload: dict[str, object], fallback_code: str = "") -> Product:
    """Build a Product from an Open Food Facts record."""
    name = _text(payload.get("product_name")) or _text(payload.get("product_name_en"))
    image_url = _text(payload.get("image_url")) or _text(
        payload.get("image_front_url")
    )
    grade = _text(payload.get("nutriscore_grade")).lower()
    return Product(
        code=_text(payload.get("code")) or fallback_code,
        name=name or "Unknown Product",
        brand=_text(payload.get("brands")) or None,
        image_url=image_url,
        nutriscore_grade=grade if grade in NUTRISCORE_GRADES else None,
        nova_group=_nova_group(payload.get("nova_group")),
        quantity=_text(payload.get("quantity")) or None,
        nutrition=extract_product_nutrition(payload.get("nutriments")),
    )


def _nova_group(value: object) -> int | None:
    number = _number(value)
    if number <= 0:
        return None
    return int(number)


def _number(value: object) -> float:
    if isinstance(value, bool):
        return 0.0
    if not isinstance(value, int | float | str):
        return 0.0
    try:
        number = float(value)
    except (OverflowError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()
