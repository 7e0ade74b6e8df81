"""Pool settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # GitHub API
    github_api_url: str = "https://api.github.com"  # used when base_url is ""
    github_api_version: str = "2022-11-28"
    user_agent: str = "github-app-pool"

    # HTTP
    http_timeout: float = 60.0
    http_connect_timeout: float = 10.0

    # App JWT (GitHub rejects tokens valid for more than 10 minutes)
    jwt_expiry_seconds: int = 600
    jwt_clock_skew_seconds: int = 60

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
