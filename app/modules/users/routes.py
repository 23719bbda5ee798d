from fastapi import APIRouter, Depends
from app.database.supabase_client import get_supabase
from app.core.dependencies import require_roles
from app.core.responses import ApiResponse, PaginatedResponse, parse_paging
from app.modules.users.schemas import UserUpdate, UserResponse, UserStats, Role
from app.modules.users.service import UserService
from supabase import Client
from typing import Optional

# Every users route is admin-only
router = APIRouter(
    prefix="/users",
    tags=["users"],
    dependencies=[Depends(require_roles("admin"))],
)


def get_user_service(supabase: Client = Depends(get_supabase)) -> UserService:
    return UserService(supabase)


@router.get("", response_model=PaginatedResponse[UserResponse])
async def list_users(
    page: Optional[str] = None,
    limit: Optional[str] = None,
    role: Optional[Role] = None,
    service: UserService = Depends(get_user_service),
):
    """List users with pagination"""
    page, limit = parse_paging(page, limit)
    result = service.list_users(page=page, limit=limit, role=role)
    return PaginatedResponse[UserResponse](data=result.items, pagination=result.pagination)


@router.get("/stats", response_model=ApiResponse[UserStats])
async def user_stats(service: UserService = Depends(get_user_service)):
    """Number of users per role"""
    return ApiResponse[UserStats](data=service.get_stats())


@router.get("/{user_id}", response_model=ApiResponse[UserResponse])
async def get_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
):
    return ApiResponse[UserResponse](data=service.get_user_by_id(user_id))


@router.put("/{user_id}", response_model=ApiResponse[UserResponse])
async def update_user(
    user_id: str,
    user_data: UserUpdate,
    service: UserService = Depends(get_user_service),
):
    user = service.update_user(user_id, user_data)
    return ApiResponse[UserResponse](message="User updated successfully", data=user)


@router.delete("/{user_id}", response_model=ApiResponse)
async def delete_user(
    user_id: str,
    service: UserService = Depends(get_user_service),
):
    service.delete_user(user_id)
    return ApiResponse(message="User deleted successfully")
