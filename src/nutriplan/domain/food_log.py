"""Domain models for the daily food journal."""

import math
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

NUTRIENT_FIELDS = ("calories", "protein", "carbohydrates", "fat", "fiber", "sugar")
GOAL_FIELDS = ("calories", "protein", "carbohydrates", "fat")


class LogItemKind(Enum):
    """Where a journal entry came from."""

    MEAL = "meal"
    PRODUCT = "product"

    @classmethod
    def parse(cls, value: object) -> "LogItemKind":
        """Return the matching kind, falling back to a meal."""
        if isinstance(value, LogItemKind):
            return value
        if isinstance(value, str):
            for kind in cls:
                if kind.value == value.strip().lower():
                    return kind
        return cls.MEAL


@dataclass(frozen=True)
class NutritionFacts:
    """Nutrient amounts for a food; absent values are zero."""

    calories: float = 0.0
    protein: float = 0.0
    carbohydrates: float = 0.0
    fat: float = 0.0
    fiber: float = 0.0
    sugar: float = 0.0

    @classmethod
    def from_mapping(cls, data: Mapping[str, object] | None) -> "NutritionFacts":
        """Build facts from a loose mapping, treating bad values as zero."""
        if not isinstance(data, Mapping):
            return cls()
        return cls(**{name: _to_float(data.get(name)) for name in NUTRIENT_FIELDS})

    def plus(self, other: "NutritionFacts") -> "NutritionFacts":
        """Return the field-wise sum of two profiles."""
        return NutritionFacts(
            calories=self.calories + other.calories,
            protein=self.protein + other.protein,
            carbohydrates=self.carbohydrates + other.carbohydrates,
            fat=self.fat + other.fat,
            fiber=self.fiber + other.fiber,
            sugar=self.sugar + other.sugar,
        )

    def amount(self, nutrient: str) -> float:
        """Return a nutrient by name, zero for unknown names."""
        if nutrient not in NUTRIENT_FIELDS:
            return 0.0
        return float(getattr(self, nutrient))

    def as_dict(self) -> dict[str, float]:
        return {name: float(getattr(self, name)) for name in NUTRIENT_FIELDS}


NutritionTotals = NutritionFacts


@dataclass(frozen=True)
class LogItem:
    """A single entry in a day's food journal."""

    id: str
    name: str
    kind: LogItemKind
    image_url: str
    nutrition: NutritionFacts
    logged_at: datetime


@dataclass(frozen=True)
class DailySummary:
    """Aggregated macros for one calendar day."""

    date_key: str
    weekday_label: str
    calories: float
    protein: float
    carbohydrates: float
    fat: float


@dataclass(frozen=True)
class DailyGoals:
    """Static daily targets used for progress percentages."""

    calories: float = 2000.0
    protein: float = 50.0
    carbohydrates: float = 250.0
    fat: float = 65.0

    def get(self, nutrient: str) -> float | None:
        """Return the goal for a nutrient, or None when none is configured."""
        if nutrient not in GOAL_FIELDS:
            return None
        return float(getattr(self, nutrient))

    def as_dict(self) -> dict[str, float]:
        return {name: float(getattr(self, name)) for name in GOAL_FIELDS}


def _to_float(value: object) -> float:
    """Return a finite float; anything else counts as zero."""
    if isinstance(value, bool):
        return 0.0
    if not isinstance(value, int | float | str):
        return 0.0
    try:
        number = float(value)
    except (OverflowError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0
