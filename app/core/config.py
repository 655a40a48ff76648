from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./forms.db"

    # Push notification relay, POST {tokens, title, body, formId}
    NOTIFY_ENABLED: bool = True
    NOTIFY_URL: Optional[str] = None
    NOTIFY_TIMEOUT_SECONDS: float = 10.0
    NOTIFICATION_TITLE: str = "New Survey Available!"

    CORS_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ]

    REPORTS_DIR: str = "reports"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
