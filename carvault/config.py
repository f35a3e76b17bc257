# carvault/config.py
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Literal


_PROJECT_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Application settings loaded from ``CARVAULT_*`` environment variables."""

    app_title: str = "CarVault"
    app_version: str = "1.0.0"

    # Document store
    collection_name: str = "cars"
    store_backend: Literal["memory", "json"] = "memory"
    store_path: Path = _PROJECT_DIR / "data" / "vehicles.json"
    store_ready_timeout: float = 10.0

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="CARVAULT_",
        env_file=(_PROJECT_DIR / ".env", ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()
