"""Unit of Work pattern for managing repository access."""

from motor.motor_asyncio import AsyncIOMotorDatabase

from .repositories.meal_records import MealRecordRepository


class UnitOfWork:
    """
    Groups repository access and provides a single injection point for services.

    Usage:
        uow = UnitOfWork(db)
        record = await uow.meals.create(...)
    """

    def __init__(
        self,
        db: AsyncIOMotorDatabase,
        meals_collection: str = "nutrition_entries",
    ):
        """
        Initialize Unit of Work with database instance.

        Args:
            db: Motor database instance
            meals_collection: Name of the meal history collection
        """
        self._db = db
        self._meals_collection = meals_collection
        self._meals: MealRecordRepository | None = None

    @property
    def meals(self) -> MealRecordRepository:
        """Get the meal record repository (lazy loaded)."""
        if self._meals is None:
            self._meals = MealRecordRepository(self._db[self._meals_collection])
        return self._meals
