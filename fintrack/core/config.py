from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # App settings
    PROJECT_NAME: str = "FinTrack"
    API_PREFIX: str = "/api"
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")

    CORS_ORIGINS: List[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:5173",
            "http://localhost:8000",
        ]
    )

    # OpenAI (optional, AI features fall back to static content without a key)
    OPENAI_API_KEY: Optional[str] = Field(default=None)
    OPENAI_MODEL: str = Field(default="gpt-4o")
    AI_TIMEOUT_SECONDS: float = Field(default=20.0)
    AI_MAX_TOKENS: int = Field(default=800)
    AI_CHAT_MAX_TOKENS: int = Field(default=300)

    # Defaults for the user-facing settings record
    DEFAULT_CURRENCY: str = "USD"
    DEFAULT_THEME: str = "light"
    DEFAULT_NOTIFICATIONS: bool = True


settings = Settings()
