"""Shared test fixtures."""

import random
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import httpx
import pytest

from nutriplan.adapters.local_blob_store import InMemoryBlobStore
from nutriplan.adapters.location import InMemoryLocation
from nutriplan.adapters.mealdb_client import MealDbClient
from nutriplan.adapters.openfoodfacts_client import OpenFoodFactsClient
from nutriplan.config import Settings
from nutriplan.containers import AppContainer, build_app
from nutriplan.services.cache import InMemoryCache
from nutriplan.services.food_log import JournalStore
from nutriplan.services.products import ProductService
from nutriplan.services.recipes import NutritionEstimator, RecipeService

# Friday
FIXED_NOW = datetime(2024, 3, 15, 12, 30, tzinfo=UTC)


@dataclass
class FixedClock:
    """Clock returning a settable instant."""

    current: datetime = FIXED_NOW

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current = self.current + timedelta(**kwargs)


def meal_payload(
    meal_id: str,
    name: str,
    category: str = "Seafood",
    area: str = "Japanese",
) -> dict[str, object]:
    return {
        "idMeal": meal_id,
        "strMeal": name,
        "strMealThumb": f"https://img.example/{meal_id}.jpg",
        "strCategory": category,
        "strArea": area,
        "strTags": "Fish,Dinner",
        "strInstructions": "Rinse the rice.\r\n\r\nCook the salmon.",
        "strYoutube": "https://www.youtube.com/watch?v=4aZr5hZXP_s",
        "strIngredient1": "Salmon",
        "strMeasure1": "2 fillets",
        "strIngredient2": "Rice",
        "strMeasure2": "300g",
        "strIngredient3": "",
        "strMeasure3": " ",
        "strIngredient4": None,
    }


def product_payload(
    code: str, name: str, grade: str = "a", calories: float = 52.0
) -> dict[str, object]:
    return {
        "code": code,
        "product_name": name,
        "brands": "Acme",
        "image_url": f"https://img.example/{code}.jpg",
        "nutriscore_grade": grade,
        "nova_group": 1,
        "quantity": "1 kg",
        "nutriments": {
            "energy-kcal_100g": calories,
            "proteins_100g": 0.3,
            "carbohydrates_100g": 13.8,
            "fat_100g": 0.2,
            "fiber_100g": 2.4,
            "sugars_100g": 10.4,
        },
    }


def _connect_error() -> httpx.ConnectError:
    return httpx.ConnectError("connection refused")


@dataclass
class FakeMealDbClient(MealDbClient):
    """Fake TheMealDB client with in-memory responses."""

    meals: dict[str, dict[str, object]] = field(
        default_factory=lambda: {
            "52772": meal_payload("52772", "Teriyaki Chicken Casserole", "Chicken"),
            "52959": meal_payload("52959", "Baked salmon with fennel"),
            "52819": meal_payload("52819", "Cajun spiced fish tacos", area="Mexican"),
        }
    )
    random_order: list[str] = field(
        default_factory=lambda: ["52772", "52959", "52819"]
    )
    categories: list[str] = field(
        default_factory=lambda: ["Beef", "Chicken", "Dessert", "Seafood"]
    )
    areas: list[str] = field(default_factory=lambda: ["Japanese", "Mexican"])
    fail: bool = False
    calls: list[str] = field(default_factory=list)

    def _check(self, call: str) -> None:
        self.calls.append(call)
        if self.fail:
            raise _connect_error()

    async def random_meal(self) -> dict[str, object]:
        self._check("random")
        draws = sum(1 for call in self.calls if call == "random")
        meal_id = self.random_order[(draws - 1) % len(self.random_order)]
        return {"meals": [self.meals[meal_id]]}

    async def by_id(self, meal_id: str) -> dict[str, object]:
        self._check(f"lookup:{meal_id}")
        meal = self.meals.get(meal_id)
        return {"meals": [meal] if meal else None}

    async def by_category(self, category: str) -> dict[str, object]:
        self._check(f"category:{category}")
        return self._summaries(
            meal for meal in self.meals.values() if meal["strCategory"] == category
        )

    async def by_area(self, area: str) -> dict[str, object]:
        self._check(f"area:{area}")
        return self._summaries(
            meal for meal in self.meals.values() if meal["strArea"] == area
        )

    async def search(self, text: str) -> dict[str, object]:
        self._check(f"search:{text}")
        found = [
            meal
            for meal in self.meals.values()
            if text.lower() in str(meal["strMeal"]).lower()
        ]
        return {"meals": found or None}

    async def list_categories(self) -> dict[str, object]:
        self._check("categories")
        return {"meals": [{"strCategory": name} for name in self.categories]}

    async def list_areas(self) -> dict[str, object]:
        self._check("areas")
        return {"meals": [{"strArea": name} for name in self.areas]}

    def _summaries(self, meals) -> dict[str, object]:  # type: ignore[no-untyped-def]
        summaries = [
            {
                "idMeal": meal["idMeal"],
                "strMeal": meal["strMeal"],
                "strMealThumb": meal["strMealThumb"],
            }
            for meal in meals
        ]
        return {"meals": summaries or None}


@dataclass
class FakeOpenFoodFactsClient(OpenFoodFactsClient):
    """Fake Open Food Facts client with in-memory responses."""

    products: dict[str, dict[str, object]] = field(
        default_factory=lambda: {
            "3017620422003": product_payload("3017620422003", "Apple Sauce"),
        }
    )
    search_results: list[dict[str, object]] = field(
        default_factory=lambda: [
            product_payload("111", "Oat Drink", grade="b", calories=46.4),
            product_payload("222", "Choco Spread", grade="e", calories=539.5),
        ]
    )
    fail_barcode: bool = False
    fail_search: bool = False
    calls: list[str] = field(default_factory=list)

    async def by_barcode(self, code: str) -> dict[str, object]:
        self.calls.append(f"barcode:{code}")
        if self.fail_barcode:
            raise _connect_error()
        product = self.products.get(code)
        if product is None:
            return {"status": 0, "status_verbose": "product not found"}
        return {"status": 1, "code": code, "product": product}

    async def search(self, text: str, page_size: int = 20) -> dict[str, object]:
        self.calls.append(f"search:{text}")
        if self.fail_search:
            raise _connect_error()
        return {"count": len(self.search_results), "products": self.search_results}


@dataclass
class FailingBlobStore:
    """Blob store whose backend is unavailable."""

    def get(self, key: str) -> str | None:
        raise OSError("storage unavailable")

    def set(self, key: str, value: str) -> None:
        raise OSError("storage unavailable")


@dataclass
class FlakyBlobStore(InMemoryBlobStore):
    """In-memory blob store whose next reads fail."""

    failing_reads: int = 0

    def get(self, key: str) -> str | None:
        if self.failing_reads > 0:
            self.failing_reads -= 1
            raise OSError("storage unavailable")
        return super().get(key)


@dataclass
class ReadOnlyBlobStore(InMemoryBlobStore):
    """In-memory blob store that rejects writes."""

    def set(self, key: str, value: str) -> None:
        raise OSError("storage is read-only")


@pytest.fixture
def settings() -> Settings:
    return Settings(
        storage_backend="memory",
        random_meal_count=3,
        search_debounce_seconds=0.01,
    )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def food_log(blob_store: InMemoryBlobStore, clock: FixedClock) -> JournalStore:
    return JournalStore(blob_store=blob_store, clock=clock)


@pytest.fixture
def mealdb_client() -> FakeMealDbClient:
    return FakeMealDbClient()


@pytest.fixture
def openfoodfacts_client() -> FakeOpenFoodFactsClient:
    return FakeOpenFoodFactsClient()


@pytest.fixture
def container(
    settings: Settings,
    food_log: JournalStore,
    mealdb_client: FakeMealDbClient,
    openfoodfacts_client: FakeOpenFoodFactsClient,
) -> AppContainer:
    recipe_service = RecipeService(client=mealdb_client, cache=InMemoryCache())
    product_service = ProductService(
        client=openfoodfacts_client, cache=InMemoryCache()
    )
    location = InMemoryLocation()
    router, screen, app = build_app(
        settings=settings,
        food_log=food_log,
        recipe_service=recipe_service,
        product_service=product_service,
        location=location,
        estimator=NutritionEstimator(rng=random.Random(7)),
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        food_log=food_log,
        recipe_service=recipe_service,
        product_service=product_service,
        location=location,
        router=router,
        screen=screen,
        app=app,
        close_resources=close_resources,
    )
