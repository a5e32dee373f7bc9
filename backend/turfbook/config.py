# backend/turfbook/config.py

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]  # project root


class Settings(BaseSettings):
    database_url: str = "sqlite:///./data/turfbook.db"
    redis_url: str = "redis://localhost:6379/0"

    # Local timezone of the venues; "now" for past-slot suppression
    # when the caller does not send its own local time.
    timezone: str = "Asia/Kolkata"
    log_level: str = "INFO"

    slot_default_minutes: int = 30
    booking_horizon_days: int = 60
    pending_hold_minutes: int = 5
    slots_cache_ttl_seconds: int = 86400
    slots_clamp_trailing: bool = False

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        extra="ignore",
    )

    @property
    def resolved_database_url(self) -> str:
        url = self.database_url
        if url.startswith("sqlite:///./"):
            # Relative SQLite paths resolve against the project root
            relative_path = url.replace("sqlite:///./", "")
            absolute_path = BASE_DIR / relative_path
            return f"sqlite:///{absolute_path}"
        return url


settings = Settings()
