from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    database_url: str = Field(..., alias="DATABASE_URL")
    storage_key: str = Field("@ExpenseSplitter:data", alias="STORAGE_KEY")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_json: bool = Field(True, alias="LOG_JSON")
    report_dir: str = Field("reports", alias="REPORT_DIR")
    recent_expenses: int = Field(5, alias="RECENT_EXPENSES")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()  # type: ignore[arg-type]
