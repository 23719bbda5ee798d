from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Bypasses RLS; used for all table access

    # Credentials: "supabase" delegates passwords to Supabase Auth, "local" stores a bcrypt hash in users
    auth_mode: str = "supabase"

    # JWT
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    jwt_expires_days: int = 7

    # App
    app_name: str = "collablearn-backend"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    port: int = 3001
    frontend_url: str = "http://localhost:3000"
    cors_origins: str = ""  # extra origins, comma separated
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    auth_rate_limit: str = "20/minute"
    rate_limit_enabled: bool = True

    # Seed script (python -m app.scripts.seed_data)
    seed_admin_email: Optional[str] = None
    seed_admin_password: Optional[str] = None
    seed_admin_name: str = "Administrator"

    # Pagination
    default_page_size: int = 10
    max_page_size: int = 100

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        return self.environment == "development"

    @property
    def uses_local_auth(self) -> bool:
        return self.auth_mode.lower() == "local"

    def get_cors_origins_list(self) -> List[str]:
        origins = [self.frontend_url] + self.cors_origins.split(",")
        return [o.strip() for o in origins if o and o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",
        extra="ignore"
    )


settings = Settings()


def validate_runtime_config() -> None:
    if settings.auth_mode.lower() not in {"supabase", "local"}:
        raise RuntimeError(f"Unknown AUTH_MODE '{settings.auth_mode}'. Use 'supabase' or 'local'.")
    if not settings.is_production:
        return
    if settings.jwt_secret == "change-me":
        raise RuntimeError("JWT_SECRET must be set in production.")
    if not settings.supabase_url or not settings.supabase_service_role_key:
        raise RuntimeError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set in production.")
