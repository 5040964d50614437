from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional, List


class Settings(BaseSettings):
    # Supabase
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_service_role_key: Optional[str] = None  # Required for staff provisioning and data access
    database_id: str = "public"  # Postgres schema holding the collections

    # Collections
    staff_collection_id: str = "staff"
    roles_collection_id: str = "roles"
    permissions_collection_id: str = "permissions"
    role_permissions_collection_id: str = "role_permissions"
    team_memberships_collection_id: str = "team_memberships"
    venues_collection_id: str = "venues"

    # Authorization
    staff_team_id: str = "staff"
    staff_team_name: str = "Staff"
    authorization_batch_limit: int = 100  # hard cap for role_permissions / permissions fetches
    role_cache_ttl_seconds: int = 300

    # Bootstrap owner (seed script); the auth identity must already exist
    owner_user_id: Optional[str] = None
    owner_email: str = "owner@keno.local"
    owner_full_name: str = "Administrador Principal"

    # Session cookies
    session_cookie_name: str = "keno_session"
    refresh_cookie_name: str = "keno_refresh"
    cookie_secure: bool = True
    password_reset_redirect_url: str = "http://localhost:3000/reset-password"

    # App
    app_name: str = "keno-backoffice"
    debug: bool = False
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: str = "http://localhost:3000,http://127.0.0.1:3000"
    rate_limit: str = "100/minute"  # slowapi format, e.g. "100/minute"
    auth_rate_limit: str = "10/minute"
    rate_limit_enabled: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def auth_cookie_names(self) -> List[str]:
        return [self.session_cookie_name, self.refresh_cookie_name]

    def get_cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        env_prefix="",  # No prefix needed
        extra="ignore"
    )


settings = Settings()
