"""Application configuration via environment variables."""

from pathlib import Path
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    # Storage
    data_dir: Path = Path("data")
    storage_backend: Literal["json", "sql"] = "json"
    database_url: str = "sqlite+aiosqlite:///data/callbacks.db"

    # CSV export
    display_timezone: str = "Europe/Moscow"

    # Owner notification (disabled when empty)
    notify_telegram_bot_token: str = ""
    notify_telegram_chat_id: str = ""

    # App
    log_level: str = "INFO"
    environment: str = "development"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @field_validator("display_timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"unknown timezone: {value}") from e
        return value

    @property
    def callbacks_file(self) -> Path:
        return self.data_dir / "callbacks.json"

    @property
    def uploads_dir(self) -> Path:
        return self.data_dir / "uploads"


settings = Settings()
