from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # Gemini - leaving the key unset runs the assistant in mock-only mode
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_API_URL: str = (
        "https://generativelanguage.googleapis.com/v1beta/models/"
        "gemini-2.0-flash-001:generateContent"
    )
    GEMINI_MAX_RETRIES: int = 3
    GEMINI_RETRY_DELAY_SECONDS: float = 1.0
    GEMINI_TIMEOUT_SECONDS: float = 30.0

    # Supabase
    SUPABASE_URL: Optional[str] = None
    SUPABASE_SERVICE_ROLE_KEY: Optional[str] = None

    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Chat Settings
    CHAT_HISTORY_LIMIT: int = 10

    class Config:
        env_file = ".env"


settings = Settings()
