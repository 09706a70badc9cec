"""Authentication API routes (delegated to the identity provider)."""

from fastapi import APIRouter, status

from nutriscan_api.api.dependencies import IdentityDep
from nutriscan_api.models.user import LoginRequest, RegisterRequest

router = APIRouter()


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, identity: IdentityDep):
    """
    Create a new account.

    - **email**, **password**, **username**: all required
    """
    user = await identity.register(request.email, request.password, request.username)
    return {"message": "User created successfully", "user": user.model_dump()}


@router.post("/login")
async def login(request: LoginRequest, identity: IdentityDep):
    """
    Log in with email and password.

    Returns the user and the provider session (use `access_token` as the
    bearer token for /nutrition routes).
    """
    user, session = await identity.login(request.email, request.password)
    return {"message": "Login successful", "user": user.model_dump(), "session": session}
