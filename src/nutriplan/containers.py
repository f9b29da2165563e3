"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from nutriplan.adapters.local_blob_store import FileBlobStore, InMemoryBlobStore
from nutriplan.adapters.location import InMemoryLocation
from nutriplan.adapters.mealdb_client import HttpxMealDbClient
from nutriplan.adapters.openfoodfacts_client import HttpxOpenFoodFactsClient
from nutriplan.adapters.supabase_blob_store import SupabaseBlobStore
from nutriplan.application import NutriPlanApp
from nutriplan.config import Settings, parse_storage_backend
from nutriplan.pages.food_log import FoodLogPage
from nutriplan.pages.home import HomePage
from nutriplan.pages.meal_details import MealDetailsPage
from nutriplan.pages.product_scanner import ProductScannerPage
from nutriplan.presentation.screen import Screen
from nutriplan.services.cache import InMemoryCache
from nutriplan.services.clock import SystemClock
from nutriplan.services.food_log import BlobStore, JournalStore
from nutriplan.services.products import ProductService
from nutriplan.services.recipes import NutritionEstimator, RecipeService
from nutriplan.services.router import HashRouter


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    food_log: JournalStore
    recipe_service: RecipeService
    product_service: ProductService
    location: InMemoryLocation
    router: HashRouter
    screen: Screen
    app: NutriPlanApp
    close_resources: Callable[[], Awaitable[None]]


def build_blob_store(settings: Settings) -> BlobStore:
    """Create the blob store selected by settings."""
    backend = parse_storage_backend(settings.storage_backend)
    if backend == "memory":
        return InMemoryBlobStore()
    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError(
                "SUPABASE_URL and SUPABASE_SERVICE_KEY are required "
                "for supabase storage"
            )
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseBlobStore(client, table=settings.supabase_table)
    return FileBlobStore(Path(settings.storage_path))


def build_app(  # noqa: PLR0913
    *,
    settings: Settings,
    food_log: JournalStore,
    recipe_service: RecipeService,
    product_service: ProductService,
    location: InMemoryLocation,
    estimator: NutritionEstimator | None = None,
) -> tuple[HashRouter, Screen, NutriPlanApp]:
    """Create the router, screen and pages around the given services."""
    router = HashRouter(location)
    screen = Screen()
    app = NutriPlanApp(
        router=router,
        screen=screen,
        home_page=HomePage(
            recipe_service=recipe_service,
            router=router,
            screen=screen,
            meal_count=settings.random_meal_count,
            debounce_seconds=settings.search_debounce_seconds,
        ),
        meal_details_page=MealDetailsPage(
            recipe_service=recipe_service,
            router=router,
            food_log=food_log,
            screen=screen,
            estimator=estimator or NutritionEstimator(),
        ),
        product_scanner_page=ProductScannerPage(
            product_service=product_service,
            router=router,
            food_log=food_log,
            screen=screen,
        ),
        food_log_page=FoodLogPage(food_log=food_log, router=router, screen=screen),
    )
    return router, screen, app


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    food_log = JournalStore(
        blob_store=build_blob_store(resolved_settings),
        clock=SystemClock(resolved_settings.timezone),
        storage_key=resolved_settings.storage_key,
    )
    mealdb_client = HttpxMealDbClient.create(
        base_url=resolved_settings.mealdb_base_url,
        timeout=resolved_settings.http_timeout_seconds,
    )
    openfoodfacts_client = HttpxOpenFoodFactsClient.create(
        base_url=resolved_settings.openfoodfacts_base_url,
        timeout=resolved_settings.http_timeout_seconds,
    )
    recipe_service = RecipeService(
        client=mealdb_client,
        cache=InMemoryCache(),
        lookup_ttl_seconds=resolved_settings.cache_ttl_seconds,
    )
    product_service = ProductService(
        client=openfoodfacts_client,
        cache=InMemoryCache(),
        ttl_seconds=resolved_settings.cache_ttl_seconds,
    )
    location = InMemoryLocation()
    router, screen, app = build_app(
        settings=resolved_settings,
        food_log=food_log,
        recipe_service=recipe_service,
        product_service=product_service,
        location=location,
    )

    async def close_resources() -> None:
        await mealdb_client.close()
        await openfoodfacts_client.close()

    return AppContainer(
        settings=resolved_settings,
        food_log=food_log,
        recipe_service=recipe_service,
        product_service=product_service,
        location=location,
        router=router,
        screen=screen,
        app=app,
        close_resources=close_resources,
    )
