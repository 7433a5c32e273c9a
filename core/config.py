from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # -------------------------------------------------
    # General
    # -------------------------------------------------
    PROJECT_NAME: str = "Operations Portal API"
    ENV: str = "development"
    LOG_LEVEL: str = Field("INFO", env="LOG_LEVEL")

    # -------------------------------------------------
    # Frontend Domains
    # -------------------------------------------------
    PORTAL_DOMAINS: List[str] = [
        "http://localhost:3000",
    ]

    # -------------------------------------------------
    # CORS (auto-built below)
    # -------------------------------------------------
    BACKEND_CORS_ORIGINS: List[str] = []

    # -------------------------------------------------
    # Supabase (Primary DB & Auth)
    # -------------------------------------------------
    SUPABASE_URL: Optional[str] = Field(None, env="SUPABASE_URL")
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = Field(None, env="SUPABASE_SERVICE_ROLE_KEY")

    # -------------------------------------------------
    # Permissions
    # -------------------------------------------------
    # Identity that always resolves to the master role.
    # Leave unset to disable the override.
    BOOTSTRAP_MASTER_EMAIL: Optional[str] = Field(None, env="BOOTSTRAP_MASTER_EMAIL")

    # Shared password for the portal admin panel (plain compare)
    PORTAL_ADMIN_PASSWORD: Optional[str] = Field(None, env="PORTAL_ADMIN_PASSWORD")

    PERMISSION_CACHE_TTL_SECONDS: int = Field(
        60,
        env="PERMISSION_CACHE_TTL_SECONDS",
        description="How long a fetched permission record is reused (default: 60)",
    )

    # -------------------------------------------------
    # Model Config
    # -------------------------------------------------
    class Config:
        case_sensitive = True


# Instantiate settings
settings = Settings()

# -------------------------------------------------
# Build CORS list dynamically after loading settings
# -------------------------------------------------
settings.BACKEND_CORS_ORIGINS = sorted(
    {d.rstrip("/") for d in settings.PORTAL_DOMAINS}
)
