"""Meal history service: save analyzed meals and list them per user."""

import logging
from datetime import UTC, date, datetime

from pymongo.errors import PyMongoError

from nutriscan_api.core.exceptions import PersistenceError, ValidationError
from nutriscan_api.db.unit_of_work import UnitOfWork
from nutriscan_api.models.nutrition import MealCreate, MealRecord
from nutriscan_api.models.user import UserContext
from nutriscan_api.services.food_analysis.aggregator import aggregate

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 50
MAX_HISTORY_LIMIT = 200


class MealService:
    """
    Service for persisting and reading meal records.

    Totals are always recomputed from the submitted items, so a stored
    record's totals equal the sum of its items.
    """

    def __init__(self, uow: UnitOfWork):
        """Initialize meal service."""
        self.uow = uow

    async def save_meal(self, user: UserContext, meal: MealCreate) -> MealRecord:
        """
        Store a confirmed analysis for the calling user.

        Args:
            user: The authenticated caller
            meal: Meal name, optional date and the analyzed items

        Returns:
            The stored MealRecord

        Raises:
            ValidationError: If the meal name or the items are missing
            PersistenceError: If the store rejects the write
        """
        meal_name = meal.meal_name.strip()
        if not meal_name or meal.food_items is None:
            raise ValidationError("Meal name and food items are required")

        meal_date = meal.meal_date or datetime.now(UTC).date()
        totals = aggregate(meal.food_items)

        try:
            record = await self.uow.meals.create(
                user_id=user.id,
                username=user.username,
                meal_name=meal_name,
                meal_date=meal_date,
                totals=totals,
                food_items=meal.food_items,
            )
        except PyMongoError as e:
            logger.error(f"Save nutrition error: {e}")
            raise PersistenceError(f"Failed to save nutrition data: {e}") from e

        logger.info(
            f"Saved meal {record.id} for user {user.id} "
            f"({len(meal.food_items)} items, {totals.calories:.0f} kcal)"
        )
        return record

    async def get_history(
        self,
        user: UserContext,
        meal_date: date | None = None,
        offset: int = 0,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> list[MealRecord]:
        """
        Get the caller's meals, newest date first.

        Raises:
            ValidationError: If offset or limit is out of range
            PersistenceError: If the store query fails
        """
        if offset < 0:
            raise ValidationError("offset must be >= 0")
        if not 1 <= limit <= MAX_HISTORY_LIMIT:
            raise ValidationError(f"limit must be between 1 and {MAX_HISTORY_LIMIT}")

        try:
            return await self.uow.meals.list_for_user(
                user.id,
                meal_date=meal_date,
                offset=offset,
                limit=limit,
            )
        except PyMongoError as e:
            logger.error(f"Get nutrition history error: {e}")
            raise PersistenceError(f"Failed to fetch nutrition history: {e}") from e
