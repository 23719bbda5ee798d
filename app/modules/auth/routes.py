from fastapi import APIRouter, Depends, Request
from app.database.supabase_client import get_supabase, SupabaseClient
from app.core.dependencies import get_current_user
from app.config.settings import settings
from app.core.rate_limit import limiter
from app.core.responses import ApiResponse
from app.modules.auth.schemas import LoginRequest, RegisterRequest, AuthData
from app.modules.auth.service import AuthService
from app.modules.users.schemas import UserResponse
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/auth", tags=["auth"])


def get_auth_client_factory():
    return SupabaseClient.create_auth_client


def get_auth_service(
    supabase: Client = Depends(get_supabase),
    auth_client_factory=Depends(get_auth_client_factory),
) -> AuthService:
    return AuthService(supabase, auth_client_factory)


@router.post("/register", response_model=ApiResponse[AuthData], status_code=201)
@limiter.limit(settings.auth_rate_limit)
async def register(
    request: Request,
    register_data: RegisterRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user"""
    data = service.register(register_data)
    return ApiResponse[AuthData](message="User registered successfully", data=data)


@router.post("/login", response_model=ApiResponse[AuthData])
@limiter.limit(settings.auth_rate_limit)
async def login(
    request: Request,
    login_data: LoginRequest,
    service: AuthService = Depends(get_auth_service)
):
    """Login and get access token"""
    data = service.login(login_data)
    return ApiResponse[AuthData](message="Login successful", data=data)


@router.get("/me", response_model=ApiResponse[UserResponse])
async def get_me(
    current_user: Dict = Depends(get_current_user),
    service: AuthService = Depends(get_auth_service),
):
    """Get the profile of the authenticated user"""
    return ApiResponse[UserResponse](data=service.get_me(current_user))
