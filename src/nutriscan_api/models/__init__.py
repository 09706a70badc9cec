"""Pydantic models for API schemas."""

from .nutrition import (
    NUTRIENT_FIELDS,
    AnalysisResult,
    AnalyzeResponse,
    FoodItem,
    MealCreate,
    MealHistoryResponse,
    MealRecord,
    MealSaveResponse,
    NutritionTotals,
    Pagination,
)
from .user import LoginRequest, RegisterRequest, UserContext, UserProfile

__all__ = [
    # Analysis
    "NUTRIENT_FIELDS",
    "AnalysisResult",
    "AnalyzeResponse",
    "FoodItem",
    "NutritionTotals",
    # Meal history
    "MealCreate",
    "MealHistoryResponse",
    "MealRecord",
    "MealSaveResponse",
    "Pagination",
    # Users
    "LoginRequest",
    "RegisterRequest",
    "UserContext",
    "UserProfile",
]
