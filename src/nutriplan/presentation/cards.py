"""View models for catalog and journal entries."""

from nutriplan.domain.catalog import Meal, Product
from nutriplan.domain.food_log import LogItem

PLACEHOLDER_IMAGE = "https://via.placeholder.com/400x300?text=No+Image"
ITEM_PLACEHOLDER_IMAGE = "https://via.placeholder.com/80?text=No+Image"

NUTRISCORE_COLORS = {
    "A": "bg-green-500",
    "B": "bg-lime-500",
    "C": "bg-yellow-500",
    "D": "bg-orange-500",
    "E": "bg-red-500",
}


def meal_card(meal: Meal) -> dict[str, object]:
    """Card for a recipe grid entry."""
    return {
        "id": meal.id,
        "name": meal.name,
        "image": meal.thumbnail or PLACEHOLDER_IMAGE,
        "category": meal.category or "Unknown",
        "area": meal.area or "Unknown",
        "link": f"#meal/{meal.id}",
    }


def product_card(product: Product) -> dict[str, object]:
    """Card for a product grid entry with per-100 g macros."""
    grade = (product.nutriscore_grade or "").upper()
    nutrition = product.nutrition
    return {
        "barcode": product.code,
        "name": product.name,
        "brand": product.brand or "Unknown Brand",
        "image": product.image_url or PLACEHOLDER_IMAGE,
        "nutriscore": grade or None,
        "nutriscore_color": NUTRISCORE_COLORS.get(grade, "bg-gray-400"),
        "nova_group": product.nova_group,
        "quantity": product.quantity or "100g",
        "calories": int(nutrition.calories),
        "protein": int(nutrition.protein),
        "carbohydrates": int(nutrition.carbohydrates),
        "fat": int(nutrition.fat),
        "sugar": int(nutrition.sugar),
    }


def log_item_row(item: LogItem) -> dict[str, object]:
    """Row for today's logged items list."""
    return {
        "id": item.id,
        "name": item.name,
        "type": item.kind.value,
        "image": item.image_url or ITEM_PLACEHOLDER_IMAGE,
        "calories": round(item.nutrition.calories),
        "protein": round(item.nutrition.protein),
        "time": item.logged_at.strftime("%I:%M %p"),
    }
