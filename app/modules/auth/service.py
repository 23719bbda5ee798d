from supabase import Client
from app.config.settings import settings
from app.core.security import create_access_token, hash_password, verify_password
from app.modules.auth.schemas import LoginRequest, RegisterRequest, AuthData
from app.modules.users.schemas import UserResponse
from app.modules.users.service import UserService
from fastapi import HTTPException
from typing import Any, Callable, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, supabase: Client, auth_client_factory: Optional[Callable[[], Client]] = None):
        self.supabase = supabase
        self.users = UserService(supabase)
        self.auth_client_factory = auth_client_factory

    def _auth_data(self, row: Dict[str, Any]) -> AuthData:
        user = UserResponse(**row)
        return AuthData(user=user, token=create_access_token(user.model_dump()))

    def register(self, register_data: RegisterRequest) -> AuthData:
        """Create credentials and a users row, then issue a token"""
        email = register_data.email.lower()
        if self.users.find_by_email(email):
            raise HTTPException(status_code=400, detail="Email already registered")

        profile = {
            "name": register_data.name,
            "email": email,
            "role": register_data.role or "student",
        }
        if settings.uses_local_auth:
            profile["password_hash"] = hash_password(register_data.password)
            row = self.users.create_user(profile)
        else:
            profile["id"] = self._create_auth_user(email, register_data.password, profile)
            try:
                row = self.users.create_user(profile)
            except HTTPException:
                self._delete_auth_user(profile["id"])
                raise

        logger.info(f"Registered user {row['id']} with role {row['role']}")
        return self._auth_data(row)

    def _create_auth_user(self, email: str, password: str, profile: Dict[str, Any]) -> str:
        """Create the Supabase Auth credential, email auto-confirmed"""
        try:
            auth_response = self.supabase.auth.admin.create_user({
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": {
                    "name": profile["name"],
                    "role": profile["role"],
                },
            })
        except Exception as e:
            error_message = str(e)
            if "already registered" in error_message.lower() or "already exists" in error_message.lower():
                raise HTTPException(status_code=400, detail="Email already registered")
            logger.error(f"Supabase Auth error during registration: {error_message}")
            raise HTTPException(status_code=500, detail=f"Registration failed: {error_message}")

        if not auth_response or not auth_response.user:
            raise HTTPException(status_code=500, detail="Failed to create Supabase Auth user")
        return str(auth_response.user.id)

    def _delete_auth_user(self, auth_user_id: str) -> None:
        try:
            self.supabase.auth.admin.delete_user(auth_user_id)
        except Exception as e:
            logger.error(f"Could not roll back Supabase Auth user {auth_user_id}: {e}")

    def login(self, login_data: LoginRequest) -> AuthData:
        """Check credentials and issue a token"""
        email = login_data.email.lower()
        if settings.uses_local_auth:
            row = self.users.find_by_email(email)
            if not row or not row.get("password_hash") or not verify_password(login_data.password, row["password_hash"]):
                raise HTTPException(status_code=401, detail="Invalid email or password")
            return self._auth_data(row)

        user_id = self._sign_in(email, login_data.password)
        row = self.users.find_by_id(user_id)
        if not row:
            raise HTTPException(status_code=404, detail="User profile not found")
        return self._auth_data(row)

    def _sign_in(self, email: str, password: str) -> str:
        client = self.auth_client_factory() if self.auth_client_factory else self.supabase
        try:
            auth_response = client.auth.sign_in_with_password({
                "email": email,
                "password": password,
            })
        except Exception as e:
            logger.info(f"Supabase sign-in rejected for {email}: {e}")
            raise HTTPException(status_code=401, detail="Invalid email or password")

        if not auth_response or not auth_response.user:
            raise HTTPException(status_code=401, detail="Invalid email or password")
        return str(auth_response.user.id)

    def get_me(self, user_data: Dict[str, Any]) -> UserResponse:
        return self.users.get_user_by_id(user_data["id"])
