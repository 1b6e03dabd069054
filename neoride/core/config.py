from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import List, Literal, Optional


class Settings(BaseSettings):
    """
    Application configuration settings.
    Loads from environment variables or .env file.
    """

    # Application
    APP_NAME: str = "NeoRide Backend API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: Literal["development", "staging", "production", "test"] = "development"
    LOG_LEVEL: str = "INFO"

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3001
    CORS_ORIGINS: List[str] = ["*"]

    # Database
    # Unset URI degrades to ConfigurationMissing errors per request
    MONGODB_URI: Optional[str] = None
    DATABASE_NAME: str = "NeoRide"

    # Connection lifecycle
    MAX_CONNECT_ATTEMPTS: int = 3
    CONNECT_RETRY_DELAY: float = 2.0  # seconds
    SERVER_SELECTION_TIMEOUT_MS: int = 5000
    CONNECT_TIMEOUT_MS: int = 10000
    SOCKET_TIMEOUT_MS: int = 45000

    # Serverless host markers
    VERCEL: Optional[str] = None
    VERCEL_REGION: Optional[str] = None

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v_upper

    @property
    def is_vercel(self) -> bool:
        return self.VERCEL == "1"

    def driver_options(self) -> dict:
        """Keyword options handed to the MongoDB client."""
        return {
            "serverSelectionTimeoutMS": self.SERVER_SELECTION_TIMEOUT_MS,
            "connectTimeoutMS": self.CONNECT_TIMEOUT_MS,
            "socketTimeoutMS": self.SOCKET_TIMEOUT_MS,
            "tz_aware": True,
        }


# Global settings instance
settings = Settings()
