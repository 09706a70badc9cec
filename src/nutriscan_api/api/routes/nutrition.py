"""Meal history API routes."""

from datetime import date

from fastapi import APIRouter, Query, status

from nutriscan_api.api.dependencies import CurrentUserDep, MealServiceDep
from nutriscan_api.models.nutrition import (
    MealCreate,
    MealHistoryResponse,
    MealSaveResponse,
    Pagination,
)
from nutriscan_api.services.meals import DEFAULT_HISTORY_LIMIT

router = APIRouter()


@router.post(
    "/save",
    response_model=MealSaveResponse,
    status_code=status.HTTP_201_CREATED,
)
async def save_nutrition(
    request: MealCreate,
    user: CurrentUserDep,
    service: MealServiceDep,
):
    """
    Save an analyzed meal to the caller's history.

    - **meal_name**: required
    - **meal_date**: optional, defaults to today
    - **food_items**: items from /food/analyze; totals are computed server-side
    """
    record = await service.save_meal(user, request)
    return MealSaveResponse(data=record)


@router.get("/history", response_model=MealHistoryResponse)
async def get_history(
    user: CurrentUserDep,
    service: MealServiceDep,
    meal_date: date | None = Query(None, alias="date"),
    limit: int = DEFAULT_HISTORY_LIMIT,
    offset: int = 0,
):
    """
    Get the caller's saved meals, newest date first.

    - **date**: only meals on this date (YYYY-MM-DD)
    - **limit**: page size (default: 50)
    - **offset**: records to skip
    """
    records = await service.get_history(user, meal_date=meal_date, offset=offset, limit=limit)
    return MealHistoryResponse(
        data=records,
        pagination=Pagination(limit=limit, offset=offset, total=len(records)),
    )
