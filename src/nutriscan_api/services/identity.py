"""
Identity provider client (Supabase Auth REST API).

Account storage, password hashing and token issuance all live in Supabase;
this client only registers users, exchanges credentials for a session and
resolves bearer tokens into a UserContext.
"""

import logging
from typing import Any

import httpx

from nutriscan_api.core.exceptions import APIError, AuthenticationError, ValidationError
from nutriscan_api.models.user import UserContext, UserProfile

logger = logging.getLogger(__name__)


class IdentityProviderError(APIError):
    """The identity provider is unreachable or misbehaving."""

    kind = "identity"

    def __init__(self, message: str, details: Any = None):
        super().__init__(message=message, status_code=502, details=details)


class SupabaseIdentityProvider:
    """Client for Supabase GoTrue endpoints under /auth/v1."""

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        service_role_key: str = "",
        timeout: float = 15.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.service_role_key = service_role_key
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=f"{self.base_url}/auth/v1",
                timeout=httpx.Timeout(self.timeout),
                headers={"apikey": self.anon_key},
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        client = await self._get_client()
        try:
            return await client.request(method, path, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"Identity provider request failed: {e}")
            raise IdentityProviderError(
                f"Failed to connect to identity provider: {e}"
            ) from e

    @staticmethod
    def _json_body(response: httpx.Response) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError as e:
            raise IdentityProviderError(
                "Identity provider returned a non-JSON response",
                details={"status_code": response.status_code},
            ) from e
        if not isinstance(body, dict):
            raise IdentityProviderError(
                "Identity provider returned an unexpected response",
                details={"status_code": response.status_code},
            )
        return body

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or f"HTTP {response.status_code}"
        if isinstance(body, dict):
            for key in ("msg", "message", "error_description", "error"):
                if body.get(key):
                    return str(body[key])
        return f"HTTP {response.status_code}"

    async def register(self, email: str, password: str, username: str) -> UserProfile:
        """
        Create a new user with a display name.

        Raises:
            ValidationError: If a field is missing or the provider rejects the user
        """
        if not email or not password or not username:
            raise ValidationError("Email, password, and username are required")

        key = self.service_role_key or self.anon_key
        response = await self._request(
            "POST",
            "/admin/users",
            json={
                "email": email,
                "password": password,
                "user_metadata": {"display_name": username},
                "email_confirm": False,
            },
            headers={"apikey": key, "Authorization": f"Bearer {key}"},
        )

        if not response.is_success:
            raise ValidationError(self._error_message(response))

        return UserProfile.from_identity(self._json_body(response))

    async def login(self, email: str, password: str) -> tuple[UserProfile, dict[str, Any]]:
        """
        Exchange email and password for a session.

        Returns:
            Tuple of (user profile, session payload with access_token)

        Raises:
            ValidationError: If a field is missing
            AuthenticationError: If the credentials are rejected
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        response = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )

        if not response.is_success:
            raise AuthenticationError(self._error_message(response))

        session = self._json_body(response)
        user = UserProfile.from_identity(session.get("user") or {})
        return user, session

    async def get_user(self, access_token: str) -> UserContext:
        """
        Resolve a bearer token into the calling user.

        Raises:
            AuthenticationError: If the token is missing or invalid
        """
        if not access_token:
            raise AuthenticationError("Access token required")

        response = await self._request(
            "GET",
            "/user",
            headers={"Authorization": f"Bearer {access_token}"},
        )

        if not response.is_success:
            raise AuthenticationError("Invalid token")

        body = self._json_body(response)
        if not body.get("id"):
            raise AuthenticationError("Invalid token")

        profile = UserProfile.from_identity(body)
        return UserContext(**profile.model_dump(), access_token=access_token)
