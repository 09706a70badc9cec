"""Business logic services."""

from .identity import IdentityProviderError, SupabaseIdentityProvider
from .meals import MealService

__all__ = [
    "IdentityProviderError",
    "MealService",
    "SupabaseIdentityProvider",
]
