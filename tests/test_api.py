"""API tests for the REST layer.

External services and MongoDB are replaced through dependency overrides.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from nutriscan_api.api.dependencies import (
    get_current_user,
    get_identity_provider,
    get_meal_service,
)
from nutriscan_api.core.exceptions import AuthenticationError, UploadError
from nutriscan_api.main import app
from nutriscan_api.models.user import UserProfile
from nutriscan_api.services.food_analysis import (
    FoodAnalysisPipeline,
    get_food_analysis_pipeline,
)
from nutriscan_api.services.meals import MealService

JPEG_BYTES = b"\xff\xd8\xff\xe0fake-jpeg"


@pytest.fixture
def image_host():
    host = MagicMock()
    host.upload = AsyncMock(return_value="https://i.ibb.co/abc123/meal.jpg")
    return host


@pytest.fixture
def vision_model(apple_reply):
    model = MagicMock()
    model.provider_name = "mock/vision"
    model.complete = AsyncMock(return_value=apple_reply)
    return model


@pytest.fixture
def pipeline(client, user, image_host, vision_model):
    pipeline = FoodAnalysisPipeline(image_host=image_host, vision_model=vision_model)
    app.dependency_overrides[get_food_analysis_pipeline] = lambda: pipeline
    app.dependency_overrides[get_current_user] = lambda: user
    return pipeline


@pytest.fixture
def meal_uow(client, user, sample_record):
    uow = MagicMock()
    uow.meals.create = AsyncMock(return_value=sample_record)
    uow.meals.list_for_user = AsyncMock(return_value=[sample_record])
    app.dependency_overrides[get_meal_service] = lambda: MealService(uow)
    app.dependency_overrides[get_current_user] = lambda: user
    return uow


class TestHealthEndpoint:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "analysis_configured" in data

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["docs"] == "/docs"


class TestAnalyzeEndpoint:
    def test_analyze_success(self, client, pipeline):
        response = client.post(
            "/food/analyze",
            files={"image": ("meal.jpg", JPEG_BYTES, "image/jpeg")},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        items = body["data"]["food_items"]
        assert len(items) == 1
        assert items[0]["item"] == "Apple"
        assert items[0]["vitamin_e"] == "0.2"
        assert body["totals"]["calories"] == pytest.approx(95)
        assert body["totals"]["iron"] == pytest.approx(0.1)

    def test_missing_image(self, client, pipeline, image_host):
        response = client.post("/food/analyze")

        assert response.status_code == 422
        assert response.json()["kind"] == "validation"
        image_host.upload.assert_not_awaited()

    def test_non_image_upload(self, client, pipeline, image_host):
        response = client.post(
            "/food/analyze",
            files={"image": ("notes.txt", b"hello", "text/plain")},
        )

        assert response.status_code == 422
        assert response.json()["kind"] == "validation"
        image_host.upload.assert_not_awaited()

    def test_image_too_large(self, client, pipeline, image_host):
        from nutriscan_api.core.config import get_settings

        too_big = b"\x00" * (get_settings().max_image_bytes + 1)

        response = client.post(
            "/food/analyze",
            files={"image": ("big.jpg", too_big, "image/jpeg")},
        )

        assert response.status_code == 422
        image_host.upload.assert_not_awaited()

    def test_upload_failure(self, client, pipeline, image_host, vision_model):
        image_host.upload.side_effect = UploadError("Failed to upload image: Unknown error")

        response = client.post(
            "/food/analyze",
            files={"image": ("meal.jpg", JPEG_BYTES, "image/jpeg")},
        )

        assert response.status_code == 502
        body = response.json()
        assert body["success"] is False
        assert body["kind"] == "upload"
        assert body["error"] == "Failed to upload image: Unknown error"
        vision_model.complete.assert_not_awaited()

    def test_extraction_failure(self, client, pipeline, vision_model):
        vision_model.complete.return_value = "Sorry, I cannot help with that."

        response = client.post(
            "/food/analyze",
            files={"image": ("meal.jpg", JPEG_BYTES, "image/jpeg")},
        )

        assert response.status_code == 502
        body = response.json()
        assert body["kind"] == "extraction"
        assert body["details"]["excerpt"] == "Sorry, I cannot help with that."

    def test_analyze_requires_token(self, client, image_host):
        app.dependency_overrides[get_identity_provider] = lambda: MagicMock()
        app.dependency_overrides[get_food_analysis_pipeline] = lambda: FoodAnalysisPipeline(
            image_host=image_host, vision_model=MagicMock()
        )

        response = client.post(
            "/food/analyze",
            files={"image": ("meal.jpg", JPEG_BYTES, "image/jpeg")},
        )

        assert response.status_code == 401
        assert response.json()["kind"] == "authentication"
        image_host.upload.assert_not_awaited()


class TestNutritionEndpoints:
    def test_save_requires_token(self, client):
        identity = MagicMock()
        app.dependency_overrides[get_identity_provider] = lambda: identity
        app.dependency_overrides[get_meal_service] = lambda: MagicMock()

        response = client.post(
            "/nutrition/save",
            json={"meal_name": "Lunch", "food_items": []},
        )

        assert response.status_code == 401
        assert response.json()["kind"] == "authentication"

    def test_invalid_token(self, client):
        identity = MagicMock()
        identity.get_user = AsyncMock(side_effect=AuthenticationError("Invalid token"))
        app.dependency_overrides[get_identity_provider] = lambda: identity
        app.dependency_overrides[get_meal_service] = lambda: MagicMock()

        response = client.get(
            "/nutrition/history",
            headers={"Authorization": "Bearer expired"},
        )

        assert response.status_code == 401
        identity.get_user.assert_awaited_once_with("expired")

    def test_save_success(self, client, meal_uow, sample_record):
        response = client.post(
            "/nutrition/save",
            json={
                "meal_name": "Apple snack",
                "meal_date": "2024-01-15",
                "food_items": [{"item": "Apple", "calories": "95", "protein": "0.5"}],
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["id"] == sample_record.id
        assert body["data"]["meal_date"] == "2024-01-15"
        assert body["data"]["food_items"][0]["item"] == "Grilled chicken"

        kwargs = meal_uow.meals.create.call_args.kwargs
        assert kwargs["meal_name"] == "Apple snack"
        assert kwargs["totals"].calories == pytest.approx(95)
        assert kwargs["totals"].protein == pytest.approx(0.5)
        assert kwargs["totals"].fat == 0

    def test_save_without_meal_name(self, client, meal_uow):
        response = client.post(
            "/nutrition/save",
            json={"meal_name": "", "food_items": []},
        )

        assert response.status_code == 422
        assert response.json()["error"] == "Meal name and food items are required"
        meal_uow.meals.create.assert_not_awaited()

    def test_history_defaults(self, client, meal_uow, sample_record):
        response = client.get("/nutrition/history")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["pagination"] == {"limit": 50, "offset": 0, "total": 1}
        assert body["data"][0]["meal_name"] == sample_record.meal_name
        assert body["data"][0]["totals"]["calories"] == pytest.approx(536)
        meal_uow.meals.list_for_user.assert_awaited_once_with(
            "user-123", meal_date=None, offset=0, limit=50
        )

    def test_history_with_date_and_paging(self, client, meal_uow):
        response = client.get(
            "/nutrition/history",
            params={"date": "2024-01-15", "limit": 10, "offset": 20},
        )

        assert response.status_code == 200
        assert response.json()["pagination"] == {"limit": 10, "offset": 20, "total": 1}
        call = meal_uow.meals.list_for_user.call_args
        assert str(call.kwargs["meal_date"]) == "2024-01-15"
        assert call.kwargs["offset"] == 20
        assert call.kwargs["limit"] == 10


class TestAuthEndpoints:
    def test_register(self, client):
        identity = MagicMock()
        identity.register = AsyncMock(
            return_value=UserProfile(id="user-1", email="ada@example.com", username="Ada")
        )
        app.dependency_overrides[get_identity_provider] = lambda: identity

        response = client.post(
            "/auth/register",
            json={"email": "ada@example.com", "password": "secret", "username": "Ada"},
        )

        assert response.status_code == 201
        assert response.json()["user"]["username"] == "Ada"
        identity.register.assert_awaited_once_with("ada@example.com", "secret", "Ada")

    def test_login(self, client):
        identity = MagicMock()
        identity.login = AsyncMock(
            return_value=(
                UserProfile(id="user-1", email="ada@example.com", username="Ada"),
                {"access_token": "token-abc"},
            )
        )
        app.dependency_overrides[get_identity_provider] = lambda: identity

        response = client.post(
            "/auth/login",
            json={"email": "ada@example.com", "password": "secret"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Login successful"
        assert body["session"]["access_token"] == "token-abc"
