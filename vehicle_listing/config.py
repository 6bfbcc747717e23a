"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode secrets or connection strings in code.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Vehicle Listing"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./vehicle_listing.db"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Public site, used to build absolute URLs in structured data
    SITE_URL: str = os.getenv("SITE_URL", "http://localhost:8000").rstrip("/")
    ASSET_URL: str = os.getenv("ASSET_URL", SITE_URL).rstrip("/")
    CURRENCY_INTERNATIONAL: str = os.getenv("CURRENCY_INTERNATIONAL", "USD")
    VARIANT_META_DESCRIPTION: str = os.getenv(
        "VARIANT_META_DESCRIPTION",
        "Find out everything about the {variant_name}: specs, prices and photos.",
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    The Settings object is created once and reused for all
    subsequent calls.
    """
    return Settings()
