"""Application configuration."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_REPO_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    """Settings loaded from COFFEE_GUIDE_* environment variables."""

    data_dir: Path = _REPO_ROOT / "data"
    presets_file: str = "presets.json"
    weather_base_url: str = "https://api.open-meteo.com/v1/forecast"
    weather_timeout: float = 10.0
    default_latitude: float | None = None
    default_longitude: float | None = None
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="COFFEE_GUIDE_",
        env_file=".env",
        extra="ignore",
    )

    @property
    def presets_path(self) -> Path:
        return self.data_dir / self.presets_file


@lru_cache
def get_settings() -> Settings:
    return Settings()
