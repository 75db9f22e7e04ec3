from functools import lru_cache
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from app.db.enums import DrawPolicy


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "GachaEats"
    database_url: str = Field(..., alias="DATABASE_URL")
    debug: bool = Field(False, alias="DEBUG")
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    draw_policy: DrawPolicy = Field(DrawPolicy.WEIGHTED_ITEM, alias="DRAW_POLICY")
    # every calendar-day computation for streaks uses this zone
    stats_timezone: str = Field("UTC", alias="STATS_TIMEZONE")
    draw_retry_attempts: int = Field(1, alias="DRAW_RETRY_ATTEMPTS", ge=0)
    daily_draw_limit: int | None = Field(None, alias="DAILY_DRAW_LIMIT", ge=1)


@lru_cache
def get_settings() -> Settings:
    return Settings()
