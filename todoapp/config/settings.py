# todoapp/config/settings.py
# Application settings loaded from the environment

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Runtime configuration for the API"""

    ENVIRONMENT = os.getenv("ENVIRONMENT", "development").lower()

    # Database
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./todo.db")
    DATABASE_SSLMODE = os.getenv("DATABASE_SSLMODE", "require")

    # Tokens
    JWT_SECRET = os.getenv("JWT_SECRET", "change-me")
    JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET", "change-me-too")
    JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 15))
    REFRESH_TOKEN_EXPIRE_DAYS = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", 7))

    # HTTP
    CORS_ORIGINS: List[str] = [
        origin.strip()
        for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
        if origin.strip()
    ]

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Bootstrap admin (create_tables.py)
    DEFAULT_ADMIN_NAME = os.getenv("DEFAULT_ADMIN_NAME", "System Administrator")
    DEFAULT_ADMIN_EMAIL = os.getenv("DEFAULT_ADMIN_EMAIL", "admin@example.com")
    DEFAULT_ADMIN_PASSWORD = os.getenv("DEFAULT_ADMIN_PASSWORD", "admin123")

    @classmethod
    def is_development(cls) -> bool:
        return cls.ENVIRONMENT == "development"

    @classmethod
    def get_connect_args(cls, database_url: str = None) -> dict:
        """Driver-specific connection arguments for the configured database"""
        url = (database_url or cls.DATABASE_URL).lower()
        if url.startswith("sqlite"):
            return {"check_same_thread": False}
        if url.startswith("postgres"):
            return {"sslmode": cls.DATABASE_SSLMODE}
        return {}


settings = Settings()
