"""
Configuration management using Pydantic settings.
Handles database URL, upload directories and environment variables for deployment.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import List
from functools import lru_cache
from pathlib import Path
import os


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application configuration
    app_name: str = "Global City Listings API"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False

    # Database configuration
    database_url: str = "postgresql+asyncpg://postgres:postgres@db:5432/global_properties"

    # File upload configuration
    upload_dir: str = "./public/uploads"
    uploads_url_prefix: str = "/uploads"
    property_upload_subdir: str = "properties"
    agent_upload_subdir: str = "agents"
    property_max_file_size: int = 20 * 1024 * 1024  # 20MB
    agent_max_file_size: int = 20 * 1024 * 1024
    max_images_per_upload: int = 10
    allowed_file_types: List[str] = ["image/jpeg", "image/png", "image/webp", "image/gif"]

    # Listing configuration
    featured_limit: int = 8

    # API configuration
    api_prefix: str = "/api"
    cors_origins: List[str] = ["*"]

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8080

    @field_validator("database_url", mode="before")
    @classmethod
    def validate_database_url(cls, v):
        """Ensure an async driver is used."""
        if v and not v.startswith(("postgresql+asyncpg://", "sqlite+aiosqlite://")):
            if v.startswith("postgresql://"):
                return v.replace("postgresql://", "postgresql+asyncpg://", 1)
            if v.startswith("sqlite://"):
                return v.replace("sqlite://", "sqlite+aiosqlite://", 1)
        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        allowed_envs = ["development", "testing", "staging", "production"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of: {allowed_envs}")
        return v

    @field_validator("upload_dir", mode="before")
    @classmethod
    def create_upload_directories(cls, v):
        """Ensure upload root exists."""
        if v and not os.path.exists(v):
            os.makedirs(v, exist_ok=True)
        return v

    @field_validator("uploads_url_prefix")
    @classmethod
    def validate_uploads_url_prefix(cls, v):
        """Normalise the public URL prefix to '/name' form."""
        return "/" + v.strip("/")

    @property
    def property_upload_path(self) -> Path:
        return Path(self.upload_dir) / self.property_upload_subdir

    @property
    def agent_upload_path(self) -> Path:
        return Path(self.upload_dir) / self.agent_upload_subdir

    @property
    def property_url_prefix(self) -> str:
        """URL path under which property images are stored, e.g. /uploads/properties/."""
        return f"{self.uploads_url_prefix}/{self.property_upload_subdir}/"

    @property
    def agent_url_prefix(self) -> str:
        return f"{self.uploads_url_prefix}/{self.agent_upload_subdir}/"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one instance of settings throughout the app lifecycle.
    """
    return Settings()


# Global settings instance
settings = get_settings()
