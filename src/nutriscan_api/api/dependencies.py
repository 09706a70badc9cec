"""FastAPI dependency injection factories."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from motor.motor_asyncio import AsyncIOMotorDatabase

from nutriscan_api.core.config import Settings, get_settings
from nutriscan_api.core.exceptions import AuthenticationError
from nutriscan_api.db.mongo import MongoDB
from nutriscan_api.db.unit_of_work import UnitOfWork
from nutriscan_api.models.user import UserContext
from nutriscan_api.services.food_analysis import (
    FoodAnalysisPipeline,
    get_food_analysis_pipeline,
)
from nutriscan_api.services.identity import SupabaseIdentityProvider
from nutriscan_api.services.meals import MealService

# Type aliases for cleaner route signatures
SettingsDep = Annotated[Settings, Depends(get_settings)]

_bearer = HTTPBearer(auto_error=False)


def get_database() -> AsyncIOMotorDatabase:
    """Get the MongoDB database instance."""
    settings = get_settings()
    return MongoDB.get_database(settings.db_name)


def get_uow(db: AsyncIOMotorDatabase = Depends(get_database)) -> UnitOfWork:
    """Get Unit of Work instance."""
    settings = get_settings()
    return UnitOfWork(db, meals_collection=settings.meals_collection)


UoWDep = Annotated[UnitOfWork, Depends(get_uow)]


@lru_cache(maxsize=1)
def get_identity_provider() -> SupabaseIdentityProvider:
    """Get the identity provider client configured from settings."""
    settings = get_settings()
    return SupabaseIdentityProvider(
        base_url=settings.supabase_url,
        anon_key=settings.supabase_anon_key,
        service_role_key=settings.supabase_service_role_key,
        timeout=settings.identity_timeout,
    )


IdentityDep = Annotated[SupabaseIdentityProvider, Depends(get_identity_provider)]


async def get_current_user(
    identity: IdentityDep,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> UserContext:
    """
    Resolve the bearer token into the calling user.

    Raises:
        AuthenticationError: If the token is missing or rejected
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token required")
    return await identity.get_user(credentials.credentials)


CurrentUserDep = Annotated[UserContext, Depends(get_current_user)]


def get_meal_service(uow: UnitOfWork = Depends(get_uow)) -> MealService:
    """Get MealService instance."""
    return MealService(uow)


MealServiceDep = Annotated[MealService, Depends(get_meal_service)]
PipelineDep = Annotated[FoodAnalysisPipeline, Depends(get_food_analysis_pipeline)]
