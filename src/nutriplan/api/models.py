"""Pydantic request models for the HTTP API."""

from typing import Literal

from pydantic import BaseModel, Field


class NavigateRequest(BaseModel):
    """Target fragment such as ``#meal/52772``."""

    fragment: str = ""


class LogItemRequest(BaseModel):
    """Candidate journal entry."""

    name: str = Field(min_length=1)
    type: Literal["meal", "product"] = "meal"
    image: str = ""
    nutrition: dict[str, object] = Field(default_factory=dict)


class QueryRequest(BaseModel):
    """Free-text search terms."""

    query: str


class BarcodeRequest(BaseModel):
    """Product barcode."""

    code: str = Field(min_length=1)


class MealFilterRequest(BaseModel):
    """Category or area filter; neither shows every loaded meal."""

    category: str | None = None
    area: str | None = None


class NutriScoreFilterRequest(BaseModel):
    """Nutri-Score grade to keep; null clears the filter."""

    grade: Literal["a", "b", "c", "d", "e"] | None = None


class NavLinkRequest(BaseModel):
    """Clicked sidebar link text."""

    label: str


class QuickLogRequest(BaseModel):
    """Which catalog to open for quick logging."""

    target: Literal["meal", "product"] = "meal"
