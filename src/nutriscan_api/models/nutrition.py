"""Pydantic models for food analysis and meal history.

The vision model emits every nutrient as a decimal-formatted string, so
FoodItem keeps them as strings; numeric values are only derived when totals
are computed (see services.food_analysis.aggregator).
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

NUTRIENT_FIELDS: tuple[str, ...] = (
    "calories",
    "protein",
    "fat",
    "vitamin_e",
    "carbohydrates",
    "fiber",
    "iron",
)


def _as_text(value: Any, default: str) -> str:
    """Strings pass through, numbers are stringified, anything else is the default."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


# =============================================================================
# Analysis models
# =============================================================================


class FoodItem(BaseModel):
    """One food item as reported by the vision model."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field("", alias="item", description="Food name (may be empty)")
    calories: str = Field("0", description="Energy in kcal")
    protein: str = Field("0", description="Protein in grams")
    fat: str = Field("0", description="Fat in grams")
    vitamin_e: str = Field("0", description="Vitamin E in milligrams")
    carbohydrates: str = Field("0", description="Carbohydrates in grams")
    fiber: str = Field("0", description="Fiber in grams")
    iron: str = Field("0", description="Iron in milligrams")

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> str:
        return _as_text(value, default="")

    @field_validator(*NUTRIENT_FIELDS, mode="before")
    @classmethod
    def _coerce_nutrient(cls, value: Any) -> str:
        # Models sometimes emit bare numbers, null, booleans or nested values
        return _as_text(value, default="0")

    def to_wire(self) -> dict[str, str]:
        """Serialize with the same keys the vision model uses."""
        return self.model_dump(by_alias=True)


class AnalysisResult(BaseModel):
    """Validated output of a food image analysis."""

    items: list[FoodItem] = Field(default_factory=list)


class NutritionTotals(BaseModel):
    """Per-meal nutrient totals, summed across all food items."""

    calories: float = 0.0
    protein: float = 0.0
    fat: float = 0.0
    vitamin_e: float = 0.0
    carbohydrates: float = 0.0
    fiber: float = 0.0
    iron: float = 0.0


class AnalyzeResponse(BaseModel):
    """Response for POST /food/analyze."""

    success: bool = True
    data: dict[str, list[dict[str, str]]]
    totals: NutritionTotals

    @classmethod
    def from_result(
        cls, result: AnalysisResult, totals: NutritionTotals
    ) -> "AnalyzeResponse":
        return cls(
            data={"food_items": [item.to_wire() for item in result.items]},
            totals=totals,
        )


# =============================================================================
# Meal history models
# =============================================================================


class MealCreate(BaseModel):
    """Request model for saving an analyzed meal."""

    meal_name: str = Field("", description="User supplied name for the meal")
    meal_date: date | None = Field(None, description="Defaults to today (UTC)")
    food_items: list[FoodItem] | None = Field(
        None, description="Items exactly as returned by /food/analyze"
    )


class MealRecord(BaseModel):
    """A persisted, immutable meal summary."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str
    username: str = "User"
    meal_name: str
    meal_date: date
    totals: NutritionTotals
    food_items: list[FoodItem] = Field(default_factory=list)
    created_at: datetime


class MealSaveResponse(BaseModel):
    """Response for POST /nutrition/save."""

    success: bool = True
    message: str = "Nutrition data saved successfully"
    data: MealRecord


class Pagination(BaseModel):
    """Offset/limit pagination info."""

    limit: int
    offset: int
    total: int


class MealHistoryResponse(BaseModel):
    """Response for GET /nutrition/history."""

    success: bool = True
    data: list[MealRecord] = Field(default_factory=list)
    pagination: Pagination
