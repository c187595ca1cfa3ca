"""
Application configuration using pydantic-settings.
All config is loaded from environment variables with sensible defaults.

The live documents default to DATA_DIR/<family>.json; a *_FILE variable
overrides one family. Seed files are read-only inputs shipped with the
repository and are not moved by DATA_DIR.
"""

import os
from typing import Optional
from pydantic import model_validator
from pydantic_settings import BaseSettings
from functools import lru_cache

# Settings attribute -> document name under DATA_DIR
ENTITY_FILES = {
    "ACTIVITIES_FILE": "activities.json",
    "USERS_FILE": "users.json",
    "BOOKINGS_FILE": "bookings.json",
    "PAYMENTS_FILE": "payments.json",
}


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "ActivityBookings API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Optional[str] = None  # "json" or "console"; unset follows ENVIRONMENT

    # JSON storage (one document per entity family)
    DATA_DIR: str = "db"
    ACTIVITIES_FILE: Optional[str] = None
    ACTIVITIES_SEED_FILE: Optional[str] = "db/seed/activities.json"
    USERS_FILE: Optional[str] = None
    USERS_SEED_FILE: Optional[str] = None
    BOOKINGS_FILE: Optional[str] = None
    BOOKINGS_SEED_FILE: Optional[str] = None
    PAYMENTS_FILE: Optional[str] = None
    PAYMENTS_SEED_FILE: Optional[str] = None

    # Payments
    PAYMENT_GATEWAY: str = "mock"

    # JWT Auth
    SECRET_KEY: str = "super-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
    }

    @model_validator(mode="after")
    def derive_entity_files(self) -> "Settings":
        for attr, filename in ENTITY_FILES.items():
            if not getattr(self, attr):
                setattr(self, attr, os.path.join(self.DATA_DIR, filename))
        return self


@lru_cache()
def get_settings() -> Settings:
    return Settings()
