from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from feedbot.logging_setup import resolve_level


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="FEEDBOT_", case_sensitive=False, extra="ignore"
    )

    # Transport selection (mock|http)
    TRANSPORT: str = Field(default="mock")
    BASE_URL: str = Field(default="https://oauth.reddit.com")
    USER_AGENT: str = Field(default="feedbot/0.1.0")
    ACCESS_TOKEN: str = Field(default="")
    HTTP_TIMEOUT_S: float = Field(default=10.0)

    # Engine cadence (seconds) and scrape size
    BLOCK_TIME_S: float = Field(default=60.0 / 30)
    SCRAPE_LIMIT: int = Field(default=100)

    # Users to watch on startup as "alice,bob"
    WATCH_USERS: str = Field(default="")

    LOG_JSON: bool = Field(default=False)
    LOG_LEVEL: str = Field(default="INFO")

    @field_validator("BLOCK_TIME_S")
    @classmethod
    def _validate_block_time(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("BLOCK_TIME_S must be positive")
        return v

    @field_validator("SCRAPE_LIMIT")
    @classmethod
    def _validate_limit(cls, v: int) -> int:
        if not 1 <= v <= 100:
            raise ValueError("SCRAPE_LIMIT must be within 1..100")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def _validate_log_level(cls, v: str) -> str:
        resolve_level(v)
        return v.strip().upper()

    @property
    def watch_users(self) -> list[str]:
        return [u.strip() for u in self.WATCH_USERS.split(",") if u.strip()]


def load_settings() -> Settings:
    return Settings()
