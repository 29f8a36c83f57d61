"""Configuration settings for the application."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    app_name: str = "Budgy Finance API"
    debug: bool = False
    log_level: str = "INFO"

    # Device-local key/value cache (guest transactions, profile, theme)
    local_store_path: str = "budgy_local.db"

    # Remote store: "sqlite" for local development, "supabase" for the hosted backend
    remote_backend: str = "sqlite"
    remote_sqlite_path: str = "budgy_remote.db"
    supabase_url: str = ""
    supabase_key: str = ""
    remote_timeout_seconds: float = 30.0

    # LLM Provider API Keys (optional, insights fail open without them)
    google_api_key: str = ""
    openai_api_key: str = ""
    anthropic_api_key: str = ""
    insights_model: str = "gemini-1.5-flash"

    # Profile defaults
    default_profile_name: str = "User"
    default_currency: str = "₹"
    default_monthly_budget: float = 20000.0

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
