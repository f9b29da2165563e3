"""Domain models for recipe and product catalogs."""

from dataclasses import dataclass

from nutriplan.domain.food_log import NutritionFacts


@dataclass(frozen=True)
class Ingredient:
    """Ingredient line of a recipe."""

    name: str
    measure: str


@dataclass(frozen=True)
class Meal:
    """Recipe record from the meal catalog.

    Filter endpoints return only id, name and thumbnail; the remaining
    fields are empty for such records.
    """

    id: str
    name: str
    thumbnail: str
    category: str | None = None
    area: str | None = None
    tags: tuple[str, ...] = ()
    instructions: str = ""
    youtube_url: str | None = None
    ingredients: tuple[Ingredient, ...] = ()


@dataclass(frozen=True)
class Product:
    """Packaged product from the product database."""

    code: str
    name: str
    brand: str | None
    image_url: str
    nutriscore_grade: str | None
    nova_group: int | None
    quantity: str | None
    nutrition: NutritionFacts
