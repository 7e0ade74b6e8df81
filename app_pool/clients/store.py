"""Load pool configs from a JSON file or numbered environment variables."""

import json
import os
from collections.abc import Mapping

from app_pool.clients.models import AppConfig, PoolConfig
from app_pool.config.settings import get_settings


def load_pool_config(path: str) -> PoolConfig:
    """Read a pool config file.

    Format:
        {"base_url": "https://github.example.com/api/v3",
         "apps": [{"app_id": "1", "installation_id": "2", "private_key": "..."}]}
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    return PoolConfig(
        apps=[AppConfig(**entry) for entry in data.get("apps", [])],
        base_url=data.get("base_url", get_settings().github_api_url),
    )


def pool_config_from_env(
    env: Mapping[str, str] | None = None,
    prefix: str = "APP",
    base_url: str | None = None,
) -> PoolConfig:
    """Collect APP_1_ID, APP_1_INSTALLATION_ID, APP_1_PRIVATE_KEY, ... into a PoolConfig.

    Scanning stops at the first index without an _ID variable. Entries with
    an empty private key are kept so select_best() reports them.
    """
    if env is None:
        env = os.environ

    apps: list[AppConfig] = []
    n = 1
    while f"{prefix}_{n}_ID" in env:
        key = f"{prefix}_{n}"
        apps.append(AppConfig(
            app_id=env[f"{key}_ID"],
            private_key=env.get(f"{key}_PRIVATE_KEY", ""),
            installation_id=env.get(f"{key}_INSTALLATION_ID") or None,
            client_id=env.get(f"{key}_CLIENT_ID", ""),
            client_secret=env.get(f"{key}_CLIENT_SECRET", ""),
        ))
        n += 1

    return PoolConfig(apps=apps, base_url=base_url or get_settings().github_api_url)
