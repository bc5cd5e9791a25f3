"""Application configuration utilities."""

from __future__ import annotations

import os
from functools import lru_cache

from pydantic import BaseModel


class Settings(BaseModel):
    DATABASE_URL: str = ""
    DATABASE_NAME: str = "internhub"
    STORE_BACKEND: str = "memory"
    LOG_LEVEL: str = "INFO"
    TZ: str = "Asia/Kolkata"
    ADMIN_EMAIL: str = "admin@internhub.local"
    ADMIN_NAME: str = "Administrator"
    ADMIN_PASSWORD: str = "admin123"
    DEFAULT_INTERN_PASSWORD: str = "intern123"
    MIN_PASSWORD_LENGTH: int = 6
    DEFAULT_THEME: str = "light"


@lru_cache
def get_settings() -> Settings:
    return Settings(
        DATABASE_URL=os.getenv("DATABASE_URL", ""),
        DATABASE_NAME=os.getenv("DATABASE_NAME", "internhub"),
        STORE_BACKEND=os.getenv("STORE_BACKEND", "memory"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        TZ=os.getenv("TZ", "Asia/Kolkata"),
        ADMIN_EMAIL=os.getenv("ADMIN_EMAIL", "admin@internhub.local"),
        ADMIN_NAME=os.getenv("ADMIN_NAME", "Administrator"),
        ADMIN_PASSWORD=os.getenv("ADMIN_PASSWORD", "admin123"),
        DEFAULT_INTERN_PASSWORD=os.getenv("DEFAULT_INTERN_PASSWORD", "intern123"),
        MIN_PASSWORD_LENGTH=int(os.getenv("MIN_PASSWORD_LENGTH", "6")),
        DEFAULT_THEME=os.getenv("DEFAULT_THEME", "light"),
    )


settings = get_settings()
