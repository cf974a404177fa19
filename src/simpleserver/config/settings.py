import sys

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    PORT: int = 8000
    BIND: str | None = None
    SERVE_DIR: str | None = None
    PYTHON: str = sys.executable

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
