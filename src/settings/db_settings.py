from typing import Optional

from dotenv import load_dotenv
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    """Настройки приложения из окружения / .env."""

    DATABASE_URL: str = Field(
        default="sqlite:///./products.db",
        validation_alias=AliasChoices("POSTGRES_DATABASE_URL", "DATABASE_URL"),
    )
    DB_ECHO: bool = False

    FRONTEND_URL: Optional[str] = None
    LOG_LEVEL: str = "INFO"

    HOST: str = "0.0.0.0"
    PORT: int = 4000

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
