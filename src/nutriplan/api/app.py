"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status

from nutriplan.api.models import (
    BarcodeRequest,
    LogItemRequest,
    MealFilterRequest,
    NavigateRequest,
    NavLinkRequest,
    NutriScoreFilterRequest,
    QueryRequest,
    QuickLogRequest,
)
from nutriplan.app_logging import configure_logging
from nutriplan.containers import AppContainer
from nutriplan.navigation import nav_links
from nutriplan.services.food_log import item_to_record


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        try:
            state_container.app.start()
            await state_container.router.wait_idle()
        except Exception:
            logger.exception("Failed to resolve the initial route")
        yield
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/screen")
    async def screen(request: Request) -> dict[str, object]:
        """Return the current route and screen state."""
        return _screen_response(request.app.state.container)

    @app.get("/nav")
    async def nav() -> dict[str, object]:
        return {"links": nav_links()}

    @app.post("/navigate")
    async def navigate(body: NavigateRequest, request: Request) -> dict[str, object]:
        """Navigate to a fragment and wait for the page to load."""
        state_container: AppContainer = request.app.state.container
        state_container.router.navigate(body.fragment)
        await state_container.router.wait_idle()
        return _screen_response(state_container)

    @app.post("/nav/select")
    async def select_nav(body: NavLinkRequest, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        state_container.app.select_nav(body.label)
        await state_container.router.wait_idle()
        return _screen_response(state_container)

    @app.post("/back")
    async def back(request: Request) -> dict[str, object]:
        """Go back one entry in the location history."""
        state_container: AppContainer = request.app.state.container
        state_container.location.back()
        await state_container.router.wait_idle()
        return _screen_response(state_container)

    @app.get("/foodlog/today")
    async def food_log_today(request: Request) -> dict[str, object]:
        """Return today's items, totals and goal progress."""
        food_log = request.app.state.container.food_log
        totals = food_log.get_today_totals()
        return {
            "date": food_log.today_key(),
            "items": [item_to_record(item) for item in food_log.get_today_items()],
            "totals": totals.as_dict(),
            "goals": food_log.goals.as_dict(),
            "progress": {
                nutrient: food_log.get_progress(nutrient)
                for nutrient in food_log.goals.as_dict()
            },
        }

    @app.get("/foodlog/weekly")
    async def food_log_weekly(request: Request) -> dict[str, object]:
        """Return the seven-day summary ending today."""
        food_log = request.app.state.container.food_log
        return {
            "days": [
                {
                    "date": day.date_key,
                    "day": day.weekday_label,
                    "calories": day.calories,
                    "protein": day.protein,
                    "carbohydrates": day.carbohydrates,
                    "fat": day.fat,
                }
                for day in food_log.get_weekly_data()
            ]
        }

    @app.post("/foodlog/items", status_code=status.HTTP_201_CREATED)
    async def add_food_log_item(
        body: LogItemRequest, request: Request
    ) -> dict[str, object]:
        """Add an item to today's log."""
        state_container: AppContainer = request.app.state.container
        item = state_container.food_log.add_item(body.model_dump())
        state_container.app.food_log_page.render()
        return {"item": item_to_record(item)}

    @app.delete("/foodlog/items/{item_id}")
    async def remove_food_log_item(item_id: str, request: Request) -> dict[str, str]:
        """Remove an item from today's log."""
        request.app.state.container.app.food_log_page.remove_item(item_id)
        return {"status": "ok"}

    @app.delete("/foodlog/today")
    async def clear_food_log(request: Request) -> dict[str, str]:
        """Clear today's log."""
        request.app.state.container.app.food_log_page.clear_all()
        return {"status": "ok"}

    @app.post("/foodlog/quick-log")
    async def quick_log(body: QuickLogRequest, request: Request) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        state_container.app.food_log_page.quick_log(body.target)
        await state_container.router.wait_idle()
        return _screen_response(state_container)

    @app.post("/meals/search")
    async def search_meals(body: QueryRequest, request: Request) -> dict[str, object]:
        """Search meals on the home page."""
        state_container: AppContainer = request.app.state.container
        await state_container.app.home_page.search(body.query)
        return _screen_response(state_container)

    @app.post("/meals/filter")
    async def filter_meals(
        body: MealFilterRequest, request: Request
    ) -> dict[str, object]:
        """Filter meals by category or area."""
        state_container: AppContainer = request.app.state.container
        home_page = state_container.app.home_page
        if body.category:
            await home_page.filter_by_category(body.category)
        elif body.area:
            await home_page.filter_by_area(body.area)
        else:
            home_page.show_all()
        return _screen_response(state_container)

    @app.post("/meals/log", status_code=status.HTTP_201_CREATED)
    async def log_meal(request: Request) -> dict[str, object]:
        """Log the meal currently shown on the details page."""
        item = request.app.state.container.app.meal_details_page.log_meal()
        if item is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="No meal is displayed"
            )
        return {"item": item_to_record(item)}

    @app.post("/products/search")
    async def search_products(
        body: QueryRequest, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        await state_container.app.product_scanner_page.search_products(body.query)
        return _screen_response(state_container)

    @app.post("/products/barcode")
    async def lookup_barcode(
        body: BarcodeRequest, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        await state_container.app.product_scanner_page.lookup_barcode(body.code)
        return _screen_response(state_container)

    @app.post("/products/filter")
    async def filter_products(
        body: NutriScoreFilterRequest, request: Request
    ) -> dict[str, object]:
        state_container: AppContainer = request.app.state.container
        state_container.app.product_scanner_page.filter_by_nutriscore(body.grade)
        return _screen_response(state_container)

    @app.post("/products/{code}/log", status_code=status.HTTP_201_CREATED)
    async def log_product(code: str, request: Request) -> dict[str, object]:
        """Log a product from the current results."""
        page = request.app.state.container.app.product_scanner_page
        item = page.add_product_to_log(code)
        if item is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product is not in the current results",
            )
        return {"item": item_to_record(item)}

    return app


def _screen_response(container: AppContainer) -> dict[str, object]:
    return {
        "route": container.router.get_current_route(),
        "screen": container.screen.snapshot(),
    }
