"""Repository for meal history (nutrition_entries collection)."""

from datetime import UTC, date, datetime
from typing import Any

from motor.motor_asyncio import AsyncIOMotorCollection

from nutriscan_api.models.nutrition import FoodItem, MealRecord, NutritionTotals

from .base import BaseRepository


class MealRecordRepository(BaseRepository[MealRecord]):
    """
    Repository for saved meals.

    Records are create-only: there is no update or delete path. Dates are
    stored as ISO strings (YYYY-MM-DD) so they sort chronologically.
    """

    model_class = MealRecord

    def __init__(self, collection: AsyncIOMotorCollection):
        super().__init__(collection)

    async def create(
        self,
        user_id: str,
        username: str,
        meal_name: str,
        meal_date: date,
        totals: NutritionTotals,
        food_items: list[FoodItem],
    ) -> MealRecord:
        """
        Store a meal and return the stored record.

        Args:
            user_id: Owner of the meal
            username: Owner's display name at the time of saving
            meal_name: Non-empty meal name
            meal_date: Calendar date of the meal
            totals: Nutrient totals computed from food_items
            food_items: Items as returned by the analysis

        Returns:
            The stored MealRecord including its generated id
        """
        document: dict[str, Any] = {
            "user_id": user_id,
            "username": username,
            "meal_name": meal_name,
            "meal_date": meal_date.isoformat(),
            "totals": totals.model_dump(),
            "food_items": [item.to_wire() for item in food_items],
            "created_at": datetime.now(UTC),
        }

        inserted_id = await self.insert_one(document)
        document.pop("_id", None)
        return MealRecord.model_validate({**document, "id": inserted_id})

    async def list_for_user(
        self,
        user_id: str,
        meal_date: date | None = None,
        offset: int = 0,
        limit: int = 50,
    ) -> list[MealRecord]:
        """
        Get a user's meals, newest meal date first.

        Args:
            user_id: Owner of the meals
            meal_date: Only return meals on this date
            offset: Number of records to skip
            limit: Maximum records to return

        Returns:
            List of MealRecord objects
        """
        filter_query: dict[str, Any] = {"user_id": user_id}
        if meal_date is not None:
            filter_query["meal_date"] = meal_date.isoformat()

        return await self.find_many(
            filter=filter_query,
            sort=[("meal_date", -1), ("created_at", -1)],
            limit=limit,
            skip=offset,
        )
