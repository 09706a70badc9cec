"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # MongoDB
    mongo_uri: str = "mongodb://localhost:27017"
    db_name: str = "nutriscan_db"
    meals_collection: str = "nutrition_entries"

    # Vision model (Mistral chat completions)
    mistral_api_key: str = ""
    mistral_base_url: str = "https://api.mistral.ai"
    mistral_model: str = "pixtral-12b-2409"
    vision_timeout: float = 60.0

    # Image host (ImgBB)
    imgbb_api_key: str = ""
    imgbb_base_url: str = "https://api.imgbb.com"
    image_expiration_seconds: int = 60
    image_host_timeout: float = 30.0

    # Identity provider (Supabase Auth)
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""
    identity_timeout: float = 15.0

    # Uploads
    max_image_bytes: int = 5 * 1024 * 1024  # 5 MB

    # App
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    log_level: str = "INFO"
    debug: bool = False
    app_name: str = "NutriScan API"
    api_version: str = "1.0.0"

    @property
    def is_analysis_configured(self) -> bool:
        """Check if both the image host and the vision model have credentials."""
        return bool(self.mistral_api_key and self.imgbb_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
