"""Database repositories."""

from .base import BaseRepository
from .meal_records import MealRecordRepository

__all__ = ["BaseRepository", "MealRecordRepository"]
