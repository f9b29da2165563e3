"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from nutriplan.api.app import create_app
from nutriplan.containers import AppContainer


@pytest.fixture
def client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_lifespan_resolves_initial_route(container: AppContainer) -> None:
    with TestClient(create_app(container)) as client:
        response = client.get("/screen")

    body = response.json()
    assert body["route"] == "#home"
    assert body["screen"]["section"] == "all-recipes-section"
    assert body["screen"]["status"] == "ready"
    assert len(body["screen"]["content"]["recipes"]) == 3


def test_navigate_to_meal_and_log_it(client: TestClient) -> None:
    response = client.post("/navigate", json={"fragment": "#meal/52959"})

    body = response.json()
    assert body["route"] == "#meal/52959"
    assert body["screen"]["section"] == "meal-details"
    assert body["screen"]["content"]["nutrition"]["estimated"] is True

    logged = client.post("/meals/log")

    assert logged.status_code == 201
    item = logged.json()["item"]
    assert item["name"] == "Baked salmon with fennel"
    assert item["type"] == "meal"
    assert (
        item["nutrition"]["calories"]
        == body["screen"]["content"]["nutrition"]["values"]["calories"]
    )


def test_log_meal_without_meal_is_404(client: TestClient) -> None:
    response = client.post("/meals/log")

    assert response.status_code == 404


def test_unknown_fragment_redirects_home(client: TestClient) -> None:
    response = client.post("/navigate", json={"fragment": "#bogus"})

    assert response.json()["route"] == "#home"


def test_food_log_endpoints(client: TestClient) -> None:
    client.post("/foodlog/items", json={"name": "Apple", "nutrition": {"calories": 95}})
    created = client.post(
        "/foodlog/items",
        json={"name": "Rice", "nutrition": {"calories": 200, "carbohydrates": 45}},
    )
    assert created.status_code == 201
    rice_id = created.json()["item"]["id"]

    today = client.get("/foodlog/today").json()

    assert today["date"] == "2024-03-15"
    assert today["totals"]["calories"] == 295
    assert today["totals"]["carbohydrates"] == 45
    assert today["progress"]["calories"] == pytest.approx(14.75)
    assert today["goals"] == {
        "calories": 2000.0,
        "protein": 50.0,
        "carbohydrates": 250.0,
        "fat": 65.0,
    }

    assert client.delete(f"/foodlog/items/{rice_id}").status_code == 200
    names = [item["name"] for item in client.get("/foodlog/today").json()["items"]]
    assert names == ["Apple"]

    assert client.delete("/foodlog/today").status_code == 200
    assert client.get("/foodlog/today").json()["items"] == []


def test_food_log_item_validation(client: TestClient) -> None:
    response = client.post("/foodlog/items", json={"name": "", "type": "snack"})

    assert response.status_code == 422


def test_weekly_endpoint(client: TestClient) -> None:
    client.post("/foodlog/items", json={"name": "Soup", "nutrition": {"fat": 4}})

    days = client.get("/foodlog/weekly").json()["days"]

    assert len(days) == 7
    assert days[0]["date"] == "2024-03-09"
    assert days[-1] == {
        "date": "2024-03-15",
        "day": "Fri",
        "calories": 0.0,
        "protein": 0.0,
        "carbohydrates": 0.0,
        "fat": 4.0,
    }


def test_meal_search_and_filter(client: TestClient) -> None:
    client.post("/navigate", json={"fragment": "#home"})

    searched = client.post("/meals/search", json={"query": "tacos"}).json()
    assert [card["id"] for card in searched["screen"]["content"]["recipes"]] == [
        "52819"
    ]

    filtered = client.post("/meals/filter", json={"area": "Japanese"}).json()
    assert filtered["screen"]["content"]["filter"] == {
        "type": "area",
        "value": "Japanese",
    }

    reset = client.post("/meals/filter", json={}).json()
    assert reset["screen"]["content"]["count_label"] == "Showing 3 recipes"


def test_product_endpoints(client: TestClient) -> None:
    client.post("/navigate", json={"fragment": "#products"})

    searched = client.post("/products/search", json={"query": "spread"}).json()
    assert searched["screen"]["content"]["count_label"] == "Found 2 product(s)"

    filtered = client.post("/products/filter", json={"grade": "b"}).json()
    assert [card["name"] for card in filtered["screen"]["content"]["products"]] == [
        "Oat Drink"
    ]

    logged = client.post("/products/111/log")
    assert logged.status_code == 201
    assert logged.json()["item"]["type"] == "product"
    assert client.post("/products/999/log").status_code == 404

    missing = client.post("/products/barcode", json={"code": "000"}).json()
    assert missing["screen"]["status"] == "not_found"

    found = client.post("/products/barcode", json={"code": "3017620422003"}).json()
    assert found["screen"]["content"]["products"][0]["name"] == "Apple Sauce"


def test_invalid_nutriscore_grade_is_rejected(client: TestClient) -> None:
    response = client.post("/products/filter", json={"grade": "z"})

    assert response.status_code == 422


def test_back_and_navigation_links(client: TestClient) -> None:
    client.post("/navigate", json={"fragment": "#products"})
    client.post("/nav/select", json={"label": "Food Log"})

    assert client.post("/back").json()["route"] == "#products"

    links = client.get("/nav").json()["links"]
    assert [link["route"] for link in links] == ["#home", "#products", "#foodlog"]

    quick = client.post("/foodlog/quick-log", json={"target": "product"}).json()
    assert quick["route"] == "#products"


def test_log_meal_after_navigating_away_is_404(client: TestClient) -> None:
    client.post("/navigate", json={"fragment": "#meal/52772"})
    client.post("/navigate", json={"fragment": "#foodlog"})

    assert client.post("/meals/log").status_code == 404
    assert client.get("/foodlog/today").json()["items"] == []


def test_non_finite_nutrition_is_stored_as_zero(client: TestClient) -> None:
    client.post(
        "/foodlog/items",
        json={"name": "Odd", "nutrition": {"calories": "1e999", "fat": "nan"}},
    )

    today = client.get("/foodlog/today").json()

    assert today["totals"]["calories"] == 0.0
    assert today["totals"]["fat"] == 0.0
    assert today["progress"]["calories"] == 0.0
