"""
bizdesk — Business Dashboard BFF
Configuration classes for Flask App Factory.

Usage:
    config_name = os.getenv("APP_ENV", "development")
    app.config.from_object(config[config_name])
"""

import os
import secrets

# Generate a random key for development; production MUST use a stable env var
_DEV_SECRET = secrets.token_hex(32)

_DEFAULT_BACKEND = "http://127.0.0.1:3000/api"


class Config:
    """Base configuration shared across all environments."""

    SECRET_KEY = os.getenv("SECRET_KEY", _DEV_SECRET)
    DEBUG = False
    TESTING = False

    # Backend REST collaborator
    BACKEND_API_URL = os.getenv("BACKEND_API_URL", _DEFAULT_BACKEND)
    BACKEND_TIMEOUT = int(os.getenv("BACKEND_TIMEOUT", "30"))

    # CORS
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    # List views
    DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "10"))
    MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "100"))

    # Search fan-out
    SEARCH_DEBOUNCE_MS = int(os.getenv("SEARCH_DEBOUNCE_MS", "300"))
    SEARCH_MAX_WORKERS = int(os.getenv("SEARCH_MAX_WORKERS", "4"))

    # Mutation protocol: delay before the UI navigates away after a create
    REDIRECT_DELAY_SECONDS = float(os.getenv("REDIRECT_DELAY_SECONDS", "1.5"))

    # Uploads
    UPLOAD_MAX_MB = int(os.getenv("UPLOAD_MAX_MB", "5"))
    UPLOAD_ALLOWED_TYPES = ("application/pdf",)
    UPLOAD_IMAGE_TYPES = ("image/jpeg", "image/png", "image/gif", "image/webp")


class DevelopmentConfig(Config):
    """Development environment configuration."""

    DEBUG = True


class TestingConfig(Config):
    """Testing environment configuration."""

    TESTING = True
    BACKEND_API_URL = "http://backend.test/api"
    BACKEND_TIMEOUT = 5


class ProductionConfig(Config):
    """Production environment configuration."""

    DEBUG = False
    BACKEND_API_URL = os.getenv("BACKEND_API_URL")
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "")  # Must be set explicitly in production

    def __init__(self):
        if not self.BACKEND_API_URL:
            raise RuntimeError("BACKEND_API_URL environment variable is required in production")
        if not os.getenv("SECRET_KEY"):
            raise RuntimeError("SECRET_KEY environment variable must be set in production")


# Configuration mapping: environment name -> config class
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}
