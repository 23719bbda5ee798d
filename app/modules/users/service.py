from supabase import Client
from app.config.settings import settings
from app.core.responses import Page, build_pagination, page_range
from app.database.supabase_client import is_valid_id
from app.modules.users.models import USERS_TABLE, ROLES
from app.modules.users.schemas import UserUpdate, UserResponse, UserStats
from typing import Any, Dict, Optional
from fastapi import HTTPException
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def find_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        """Raw users row by ID, or None"""
        if not is_valid_id(user_id):
            return None
        try:
            result = self.supabase.table(USERS_TABLE)\
                .select("*")\
                .eq("id", user_id)\
                .limit(1)\
                .execute()
            return result.data[0] if result.data else None
        except Exception as e:
            logger.error(f"Error finding user by ID {user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Raw users row by email, or None"""
        try:
            result = self.supabase.table(USERS_TABLE)\
                .select("*")\
                .eq("email", email.lower())\
                .limit(1)\
                .execute()
            return result.data[0] if result.data else None
        except Exception as e:
            logger.error(f"Error finding user by email: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_user_by_id(self, user_id: str) -> UserResponse:
        row = self.find_by_id(user_id)
        if not row:
            raise HTTPException(status_code=404, detail="User not found")
        return UserResponse(**row)

    def create_user(self, user_data: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a users row and return it (including password_hash, if any)"""
        try:
            result = self.supabase.table(USERS_TABLE).insert(user_data).execute()
            if not result.data:
                raise HTTPException(status_code=500, detail="Failed to create user")
            return result.data[0]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating user: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def list_users(self, page: int = 1, limit: int = 10, role: Optional[str] = None) -> Page[UserResponse]:
        """Newest users first, one page at a time"""
        start, end = page_range(page, limit)
        try:
            query = self.supabase.table(USERS_TABLE)\
                .select("*", count="exact")\
                .order("created_at", desc=True)
            if role:
                query = query.eq("role", role)
            result = query.range(start, end).execute()
        except Exception as e:
            logger.error(f"Error listing users: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        users = [UserResponse(**row) for row in (result.data or [])]
        return Page[UserResponse](
            items=users,
            pagination=build_pagination(page, limit, result.count or 0),
        )

    def update_user(self, user_id: str, user_data: UserUpdate) -> UserResponse:
        """Update name, email and/or role"""
        self.get_user_by_id(user_id)

        update_data = user_data.model_dump(exclude_none=True)
        if "email" in update_data:
            update_data["email"] = update_data["email"].lower()
            other = self.find_by_email(update_data["email"])
            if other and str(other["id"]) != str(user_id):
                raise HTTPException(status_code=400, detail="Email already registered")
        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

        try:
            result = self.supabase.table(USERS_TABLE)\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()
            if not result.data:
                raise HTTPException(status_code=404, detail="User not found")
            return UserResponse(**result.data[0])
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating user {user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def delete_user(self, user_id: str) -> bool:
        """Delete a users row and, in supabase mode, its Supabase Auth account; 404 when it does not exist"""
        self.get_user_by_id(user_id)
        try:
            result = self.supabase.table(USERS_TABLE)\
                .delete()\
                .eq("id", user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error deleting user {user_id}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

        if not settings.uses_local_auth:
            try:
                self.supabase.auth.admin.delete_user(user_id)
            except Exception as e:
                # The profile is already gone; a stale credential cannot log in without it
                logger.error(f"Error deleting auth account {user_id}: {e}")
        return len(result.data or []) > 0

    def count_by_role(self, role: str) -> int:
        try:
            result = self.supabase.table(USERS_TABLE)\
                .select("id", count="exact")\
                .eq("role", role)\
                .execute()
            return result.count or 0
        except Exception as e:
            logger.error(f"Error counting users with role {role}: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    def get_stats(self) -> UserStats:
        counts = {role: self.count_by_role(role) for role in ROLES}
        return UserStats(**counts, total=sum(counts.values()))
