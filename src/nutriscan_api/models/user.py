"""Pydantic models for users and sessions."""

from typing import Any

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    """Request model for POST /auth/register."""

    email: str = ""
    password: str = ""
    username: str = ""


class LoginRequest(BaseModel):
    """Request model for POST /auth/login."""

    email: str = ""
    password: str = ""


class UserProfile(BaseModel):
    """Public view of a user."""

    id: str
    email: str | None = None
    username: str = "User"

    @classmethod
    def from_identity(cls, user: dict[str, Any]) -> "UserProfile":
        """Create from an identity provider user object."""
        metadata = user.get("user_metadata") or {}
        return cls(
            id=str(user.get("id", "")),
            email=user.get("email"),
            username=metadata.get("display_name") or "User",
        )


class UserContext(UserProfile):
    """
    The authenticated caller of a request.

    Passed explicitly into every owner-scoped operation instead of being
    looked up from global state.
    """

    access_token: str = Field("", repr=False)
