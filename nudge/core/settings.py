from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="NUDGE_", env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "nudge"

    database_path: Path = Field(default_factory=lambda: Path.home() / ".nudge.db")
    sqlite_timeout_seconds: float = Field(default=5.0)

    log_level: str = Field(default="INFO")
    trace_migration_queries: bool = Field(default=False)

    serve_host: str = Field(default="127.0.0.1")
    serve_port: int = Field(default=6969)

    @property
    def database_url(self) -> str:
        return f"sqlite:///{self.database_path.expanduser()}"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
