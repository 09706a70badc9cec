"""Pytest configuration and fixtures."""

from collections.abc import Generator
from datetime import UTC, date, datetime

import pytest
from fastapi.testclient import TestClient

from nutriscan_api.main import app
from nutriscan_api.models.nutrition import FoodItem, MealRecord, NutritionTotals
from nutriscan_api.models.user import UserContext

APPLE_REPLY = (
    "Here you go:\n```json\n"
    '{"food_items":[{"item":"Apple","calories":"95","protein":"0.5","fat":"0.3",'
    '"vitamin_e":"0.2","carbohydrates":"25","fiber":"4","iron":"0.1"}]}'
    "\n```"
)


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """
    Create a test client without running the lifespan (no MongoDB needed).

    Tests register their own dependency overrides; they are cleared afterwards.
    """
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def user() -> UserContext:
    """An authenticated caller."""
    return UserContext(
        id="user-123",
        email="ada@example.com",
        username="Ada",
        access_token="token-abc",
    )


@pytest.fixture
def apple_reply() -> str:
    """Vision model reply wrapping one item in prose and a code fence."""
    return APPLE_REPLY


@pytest.fixture
def sample_items() -> list[FoodItem]:
    """A two item meal."""
    return [
        FoodItem(
            name="Grilled chicken",
            calories="320",
            protein="42",
            fat="12.5",
            vitamin_e="0.6",
            carbohydrates="0",
            fiber="0",
            iron="1.3",
        ),
        FoodItem(
            name="Brown rice",
            calories="216",
            protein="5",
            fat="1.8",
            vitamin_e="0.1",
            carbohydrates="45",
            fiber="3.5",
            iron="0.8",
        ),
    ]


@pytest.fixture
def sample_record(sample_items: list[FoodItem]) -> MealRecord:
    """A stored meal record."""
    return MealRecord(
        id="65a5f0c2e4b0a1b2c3d4e5f6",
        user_id="user-123",
        username="Ada",
        meal_name="Chicken and rice",
        meal_date=date(2024, 1, 15),
        totals=NutritionTotals(
            calories=536,
            protein=47,
            fat=14.3,
            vitamin_e=0.7,
            carbohydrates=45,
            fiber=3.5,
            iron=2.1,
        ),
        food_items=sample_items,
        created_at=datetime(2024, 1, 15, 12, 30, tzinfo=UTC),
    )
