# 📄 File: app/shared/config/settings.py
#
# 🧭 Purpose (Layman Explanation):
# The main configuration center that reads all settings from environment variables
# and provides them to the nursery identification service in an organized way.
#
# 🧪 Purpose (Technical Summary):
# Pydantic-based settings management with environment variable loading,
# validation, and type safety for all application configuration parameters,
# including the explicit provider configuration handed to the identification orchestrator.
#
# 🔗 Dependencies:
# - pydantic-settings for configuration management
# - python-dotenv for .env file loading
# - typing for type hints
#
# 🔄 Connected Modules / Calls From:
# - app.main (application startup)
# - Database connection modules
# - Plant identification provider clients
# - All modules requiring configuration

import re
from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety. Settings are loaded
    from environment variables with fallback to .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # APPLICATION SETTINGS
    # =========================================================================

    APP_NAME: str = Field(default="Nursery Identification API", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    APP_DESCRIPTION: str = Field(
        default="Plant identification service for the nursery marketplace",
        description="Application description"
    )
    ENVIRONMENT: str = Field(default="development", description="Runtime environment")
    DEBUG: bool = Field(default=False, description="Debug mode flag")
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(default="json", description="Log format (json or text)")
    LOG_FILE: Optional[str] = Field(None, description="Optional log file path")

    # =========================================================================
    # SERVER CONFIGURATION
    # =========================================================================

    HOST: str = Field(default="0.0.0.0", description="Server host")
    PORT: int = Field(default=8000, description="Server port")
    RELOAD: bool = Field(default=False, description="Auto-reload on changes")
    WORKERS: int = Field(default=1, description="Number of worker processes")

    # =========================================================================
    # DATABASE CONFIGURATION
    # =========================================================================

    DATABASE_URL: Optional[str] = Field(None, description="PostgreSQL connection URL")
    DB_HOST: str = Field(default="localhost", description="Database host")
    DB_PORT: int = Field(default=5432, description="Database port")
    DB_NAME: str = Field(default="nursery_db", description="Database name")
    DB_USER: str = Field(default="postgres", description="Database user")
    DB_PASSWORD: str = Field(default="", description="Database password")

    # Connection Pool Settings
    DB_POOL_SIZE: int = Field(default=10, description="Database pool size")
    DB_MAX_OVERFLOW: int = Field(default=20, description="Database pool overflow")
    DB_POOL_TIMEOUT: int = Field(default=30, description="Database pool timeout")
    DB_POOL_RECYCLE: int = Field(default=3600, description="Database pool recycle time")
    DB_CONNECT_ATTEMPTS: int = Field(default=3, description="Startup connection attempts")

    # =========================================================================
    # SECURITY SETTINGS
    # =========================================================================

    JWT_SECRET_KEY: str = Field(default="change-me-in-production", description="JWT secret key")
    JWT_ALGORITHM: str = Field(default="HS256", description="JWT algorithm")
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=60, description="Access token lifetime")

    # CORS Settings
    CORS_ORIGINS: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="CORS allowed origins"
    )
    CORS_ALLOW_CREDENTIALS: bool = Field(default=True, description="CORS allow credentials")

    # =========================================================================
    # PLANT IDENTIFICATION APIs
    # =========================================================================

    # Plant.id API (primary)
    PLANT_ID_API_KEY: Optional[str] = Field(None, description="Plant.id API key")
    PLANT_ID_API_URL: str = Field(
        default="https://api.plant.id/v3/identification",
        description="Plant.id API URL"
    )
    PLANT_ID_TIMEOUT: int = Field(default=45, description="Plant.id request timeout (seconds)")

    # PlantNet API (fallback)
    PLANTNET_API_KEY: Optional[str] = Field(None, description="PlantNet API key")
    PLANTNET_API_URL: str = Field(
        default="https://my-api.plantnet.org/v2/identify",
        description="PlantNet API URL"
    )
    PLANTNET_PROJECT: str = Field(default="all", description="PlantNet flora project")
    PLANTNET_TIMEOUT: int = Field(default=30, description="PlantNet request timeout (seconds)")
    PLANTNET_DEFAULT_ORGANS: str = Field(
        default="leaf,flower",
        description="Organs sent to PlantNet when the caller gives none"
    )

    IDENTIFICATION_DEFAULT_LANGUAGE: str = Field(
        default="en",
        description="Language used for provider common names when none is requested"
    )

    # =========================================================================
    # FILE UPLOADS
    # =========================================================================

    MAX_IMAGE_SIZE: int = Field(default=10485760, description="Max image size (10MB)")
    ALLOWED_IMAGE_TYPES: str = Field(
        default="image/jpeg,image/png,image/webp",
        description="Accepted upload content types"
    )
    IMAGE_MAX_DIMENSION: int = Field(default=800, description="Longest edge after resize")
    IMAGE_QUALITY: int = Field(default=80, description="JPEG re-encode quality")
    UPLOAD_DIR: str = Field(default="uploads/plants", description="Local image storage directory")

    # =========================================================================
    # RATE LIMITING
    # =========================================================================

    IDENTIFY_RATE_LIMIT: str = Field(
        default="30/minute",
        description="Identify endpoint rate limit in '<limit>/<period>' format"
    )

    # =========================================================================
    # VALIDATORS
    # =========================================================================

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed_environments = ["development", "staging", "production", "test"]
        if v.lower() not in allowed_environments:
            raise ValueError(f"Environment must be one of {allowed_environments}")
        return v.lower()

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level value."""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in allowed_levels:
            raise ValueError(f"Log level must be one of {allowed_levels}")
        return v.upper()

    @field_validator("JWT_ALGORITHM")
    @classmethod
    def validate_jwt_algorithm(cls, v: str) -> str:
        """Validate JWT algorithm."""
        allowed_algorithms = ["HS256", "HS384", "HS512"]
        if v not in allowed_algorithms:
            raise ValueError(f"JWT algorithm must be one of {allowed_algorithms}")
        return v

    @field_validator("PLANT_ID_TIMEOUT", "PLANTNET_TIMEOUT")
    @classmethod
    def validate_provider_timeout(cls, v: int) -> int:
        """Provider timeouts must be bounded."""
        if v <= 0 or v > 120:
            raise ValueError("Provider timeout must be between 1 and 120 seconds")
        return v

    @field_validator("IMAGE_QUALITY")
    @classmethod
    def validate_image_quality(cls, v: int) -> int:
        if not 1 <= v <= 95:
            raise ValueError("IMAGE_QUALITY must be between 1 and 95")
        return v

    @field_validator("IDENTIFY_RATE_LIMIT")
    @classmethod
    def validate_rate_limit(cls, v: str) -> str:
        """Accept slowapi limit strings such as '30/minute' or '5 per second'."""
        if not re.fullmatch(r"\s*\d+\s*(/|per)\s*\d*\s*(second|minute|hour|day)s?\s*", v):
            raise ValueError("IDENTIFY_RATE_LIMIT must look like '30/minute'")
        return v.strip()

    # =========================================================================
    # COMPUTED PROPERTIES
    # =========================================================================

    @property
    def database_url(self) -> str:
        """Get the async database URL, preferring explicit DATABASE_URL."""
        if self.DATABASE_URL:
            url = self.DATABASE_URL
            for prefix in ("postgres://", "postgresql://"):
                if url.startswith(prefix):
                    return "postgresql+asyncpg://" + url[len(prefix):]
            return url

        return (
            f"postgresql+asyncpg://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list."""
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    @property
    def allowed_image_types(self) -> List[str]:
        return [t.strip() for t in self.ALLOWED_IMAGE_TYPES.split(",") if t.strip()]

    @property
    def plantnet_default_organs(self) -> List[str]:
        return [o.strip() for o in self.PLANTNET_DEFAULT_ORGANS.split(",") if o.strip()]

    # =========================================================================
    # API PROVIDER CONFIGURATIONS
    # =========================================================================

    def get_plant_api_config(self) -> dict:
        """Get plant identification API configuration, in fallback order."""
        return {
            "plant_id": {
                "api_key": self.PLANT_ID_API_KEY,
                "api_url": self.PLANT_ID_API_URL,
                "timeout": self.PLANT_ID_TIMEOUT,
                "priority": 1,
            },
            "plantnet": {
                "api_key": self.PLANTNET_API_KEY,
                "api_url": self.PLANTNET_API_URL,
                "project": self.PLANTNET_PROJECT,
                "timeout": self.PLANTNET_TIMEOUT,
                "default_organs": self.plantnet_default_organs,
                "priority": 2,
            },
        }

    @property
    def debug(self) -> bool:
        """Alias for DEBUG to allow access as settings.debug"""
        return self.DEBUG


# ============================================================================
# SETTINGS FACTORY
# ============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Uses lru_cache to ensure settings are loaded only once
    and reused throughout the application lifecycle.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
