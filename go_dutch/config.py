from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        case_sensitive=False,
    )

    bot_token: str = Field(..., alias="BOT_TOKEN")
    database_url: str = Field(..., alias="DATABASE_URL")

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    sql_echo: bool = Field(False, alias="SQL_ECHO")

    reply_ttl_seconds: float = Field(120.0, alias="REPLY_TTL_SECONDS")
    consistency_tolerance: float = Field(1.0, alias="CONSISTENCY_TOLERANCE")

    # JSON list, e.g. ADMIN_TG_IDS=[12345, 67890]
    admin_tg_ids: list[int] = Field(default_factory=list, alias="ADMIN_TG_IDS")


settings = Settings()
