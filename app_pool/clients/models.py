"""App, pool and rate limit models."""

from dataclasses import dataclass, field


@dataclass
class AppConfig:
    app_id: str | int
    private_key: str  # PEM text or base64-encoded PEM
    installation_id: str | int | None = None  # None = app-level (JWT) auth
    client_id: str = ""  # OAuth app credentials, optional
    client_secret: str = ""


@dataclass
class PoolConfig:
    apps: list[AppConfig] = field(default_factory=list)
    base_url: str = "https://api.github.com"


@dataclass
class RateLimit:
    limit: int
    used: int
    remaining: int
    reset: int  # epoch seconds
    app_index: int = 0  # position in PoolConfig.apps
