# app/core/config.py

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# project root directory
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class Settings(BaseSettings):
    """
    Application settings, loaded from environment variables and the .env file.
    """

    # --- Pydantic Settings ---
    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, '.env'),
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=True
    )

    # --- Application ---
    APP_NAME: str = "Cidery Production API"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Purchasing, inventory, vendor-variety linking and audit API for cidery production"
    APP_ENV: str = Field("development", description="Application environment (e.g., development, production, testing)")
    DEBUG_MODE: bool = Field(False, description="Enable debug mode for detailed logging and SQL echo")
    LOG_LEVEL: str = Field("INFO", description="Log level for the 'app' logger hierarchy")

    # --- Database ---
    DATABASE_URL: SecretStr = Field(..., description="PostgreSQL database connection URL")

    # --- JWT (JSON Web Token) ---
    SECRET_KEY: SecretStr = Field(..., description="Secret key for JWT token signing. Keep this highly secure!")
    ALGORITHM: str = Field("HS256", description="Algorithm used for JWT signing (e.g., HS256)")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(30, description="Access token expiration time in minutes")

    # --- ARQ worker (Redis) ---
    REDIS_HOST: str = Field("localhost", description="Redis host used by the ARQ worker")
    REDIS_PORT: int = Field(6379, description="Redis port used by the ARQ worker")

    # --- Vendor-variety linking ---
    VARIETY_SEARCH_MAX_LIMIT: int = Field(50, description="Upper bound for variety autocomplete results")


settings = Settings()
