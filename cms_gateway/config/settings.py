"""Application configuration with environment-based settings."""
import os
from typing import List, Optional
from dotenv import load_dotenv


def _optional_int(name: str) -> Optional[int]:
    value = os.getenv(name)
    return int(value) if value else None


class Config:
    """Base configuration class following Single Responsibility Principle."""

    # Load environment variables
    load_dotenv()

    # Provider selection ("strapi" or "sanity")
    CMS_PROVIDER: str = os.getenv("CMS_PROVIDER", "strapi")

    # Strapi Configuration
    STRAPI_URL: Optional[str] = os.getenv("STRAPI_URL")
    STRAPI_API_TOKEN: Optional[str] = os.getenv("STRAPI_API_TOKEN")

    # Sanity Configuration
    SANITY_PROJECT_ID: Optional[str] = os.getenv("SANITY_PROJECT_ID")
    SANITY_DATASET: Optional[str] = os.getenv("SANITY_DATASET")
    SANITY_API_TOKEN: Optional[str] = os.getenv("SANITY_API_TOKEN")
    SANITY_API_VERSION: str = os.getenv("SANITY_API_VERSION", "2024-01-01")
    SANITY_USE_CDN: bool = os.getenv("SANITY_USE_CDN", "false").lower() == "true"

    # Cache and network
    CMS_CACHE_TTL: int = _optional_int("CMS_CACHE_TTL") or 3600  # 1 hour default
    CMS_REQUEST_TIMEOUT: int = int(os.getenv("CMS_REQUEST_TIMEOUT", "30"))

    # Admin endpoints
    REVALIDATE_SECRET: Optional[str] = os.getenv("REVALIDATE_SECRET")

    # Monitoring
    ENABLE_METRICS: bool = os.getenv("ENABLE_METRICS", "true").lower() == "true"

    # Application
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    REQUIRED_BY_PROVIDER = {
        "strapi": ("STRAPI_URL", "STRAPI_API_TOKEN"),
        "sanity": ("SANITY_PROJECT_ID", "SANITY_DATASET"),
    }

    @classmethod
    def required_for(cls, provider: str) -> List[str]:
        """
        List required settings that are missing for a provider.

        Args:
            provider: Provider name ("strapi", "sanity")

        Returns:
            Names of the missing environment variables (empty if complete)
        """
        required = cls.REQUIRED_BY_PROVIDER.get(provider.lower(), ())
        return [name for name in required if not getattr(cls, name, None)]

    @classmethod
    def validate(cls) -> None:
        """Validate required configuration values for the selected provider."""
        missing = cls.required_for(cls.CMS_PROVIDER)
        if missing:
            raise ValueError(f"Missing required environment variables: {', '.join(missing)}")


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    # Short cache in development for faster content iteration
    CMS_CACHE_TTL = _optional_int("CMS_CACHE_TTL") or 60


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    SANITY_USE_CDN = os.getenv("SANITY_USE_CDN", "true").lower() == "true"


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    ENABLE_METRICS = False
    REVALIDATE_SECRET = "test-secret"


def get_config() -> type[Config]:
    """Factory method to get configuration based on environment."""
    env = os.getenv("FLASK_ENV", "development").lower()

    config_map = {
        "development": DevelopmentConfig,
        "production": ProductionConfig,
        "testing": TestingConfig,
    }

    return config_map.get(env, DevelopmentConfig)
