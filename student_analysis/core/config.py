"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # MongoDB
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "student_analysis"

    # Groq (OpenAI-compatible)
    groq_api_key: str = ""
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_model: str = "openai/gpt-oss-20b"

    # Document extraction microservice
    extraction_service_url: str = "http://localhost:5001"
    health_timeout_seconds: float = 5.0
    analysis_timeout_seconds: float = 60.0

    # GitHub
    github_api_url: str = "https://api.github.com"
    github_timeout_seconds: float = 10.0

    # Uploads
    upload_dir: str = "uploads"
    max_upload_size_mb: int = 16

    # Cloudinary (student photos)
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""

    # App
    environment: str = "development"
    log_level: str = "INFO"
    debug: bool = True

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
