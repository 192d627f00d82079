from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application configuration settings"""

    # Application
    app_name: str = "ExamPrep API"
    debug: bool = False
    api_version: str = "v1"
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Database (the hosted Postgres URL in production)
    database_url: str = "sqlite:///./examprep.db"
    auto_create_tables: bool = True

    # Supabase auth
    supabase_url: Optional[str] = None
    supabase_key: Optional[str] = None

    # Single admin principal. Empty means nobody is admin.
    admin_email: str = ""

    # OpenAI
    openai_api_key: Optional[str] = None
    analysis_model: str = "gpt-4o-2024-08-06"

    # CORS
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


# Global settings instance
settings = Settings()
