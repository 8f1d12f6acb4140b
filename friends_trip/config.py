"""Configuration management using Pydantic Settings"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Database
    database_url: str = "sqlite:///./friends_trip.db"
    db_pool_recycle_seconds: int = 3600
    create_tables_on_startup: bool = True

    # Service
    service_name: str = "friends-trip"
    log_level: str = "INFO"

    # Bill deletion: "cascade" removes expenses with the bill, "restrict" refuses while any exist
    bill_delete_policy: Literal["cascade", "restrict"] = "cascade"


settings = Settings()
