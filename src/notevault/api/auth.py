"""Authentication API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from ..core.schemas.auth import AccountResponse, LoginRequest, RegisterRequest, TokenResponse
from ..core.services import AuthService
from ..middleware.auth import get_current_principal
from .deps import get_auth_service

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/signup", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
async def signup(request: RegisterRequest, auth_service: AuthService = Depends(get_auth_service)):
    """Register a new account."""
    return await auth_service.register(request)


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, auth_service: AuthService = Depends(get_auth_service)):
    """Login and get a JWT access token."""
    return await auth_service.login(request)


@router.get("/me", response_model=AccountResponse)
async def get_current_account(
    principal_id: UUID = Depends(get_current_principal),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Get the authenticated account."""
    return await auth_service.get_account(principal_id)
