"""Pick the GitHub App with the most remaining rate limit.

Usage:
    from app_pool.clients.models import AppConfig, PoolConfig
    from app_pool.pool import get_app

    client = await get_app(PoolConfig(
        apps=[
            AppConfig(app_id=os.environ["APP_1_ID"],
                      installation_id=os.environ["APP_1_INSTALLATION_ID"],
                      private_key=os.environ["APP_1_KEY"]),
            AppConfig(app_id=os.environ["APP_2_ID"],
                      installation_id=os.environ["APP_2_INSTALLATION_ID"],
                      private_key=os.environ["APP_2_KEY"]),
        ],
        base_url="https://github.example.com/api/v3",
    ))
    await client.get("/repos/org/repo")

Pipeline: Validate -> Build clients -> Probe rate limits (concurrently) -> Pick max remaining
"""

import asyncio
import dataclasses
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from app_pool.clients.github import GitHubAppClient
from app_pool.clients.keys import decode_private_key
from app_pool.clients.models import AppConfig, PoolConfig, RateLimit
from app_pool.errors import EmptyPool, IncompleteConfig, InvalidRequest, PoolExhausted
from app_pool.logging.debug import is_debug_enabled, log

ClientFactory = Callable[[AppConfig, str], Any]


async def select_best(
    config: PoolConfig | Mapping | None,
    client_factory: ClientFactory = GitHubAppClient,
) -> GitHubAppClient:
    """Return the client whose app has the highest remaining rate limit.

    Ties go to the earliest app in config.apps. Raises InvalidRequest,
    EmptyPool or IncompleteConfig before any network call, PoolExhausted
    if the best app has nothing left. Probe failures propagate unchanged.
    """
    apps, base_url = _validate(config)

    if is_debug_enabled():
        log(f"Using {len(apps)} valid app configs", app_count=len(apps))

    clients = [
        client_factory(dataclasses.replace(app, private_key=decode_private_key(app.private_key)), base_url)
        for app in apps
    ]

    winner = None
    try:
        # Wait for every probe, even if one fails, before acting on results
        results = await asyncio.gather(
            *(client.get_rate_limit(i) for i, client in enumerate(clients)),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result

        rate_limits: list[RateLimit] = list(results)
        if is_debug_enabled():
            log(
                "Rate limits: " + ", ".join(
                    f"app[{r.app_index}]: {r.remaining}/{r.limit}" for r in rate_limits
                ),
            )

        best_index = _best_index(rate_limits)
        best = rate_limits[best_index]
        if best.remaining == 0:
            raise PoolExhausted()

        if is_debug_enabled():
            log(
                f"Selected app[{best_index}] with {best.remaining}/{best.limit} remaining",
                reset=best.reset,
            )
        winner = clients[best_index]
        return winner
    finally:
        await _close_all([c for c in clients if c is not winner])


get_app = select_best


def is_complete_config(app: object) -> bool:
    """True if `app` has a truthy app id and private key (minimum for app auth).

    Installation auth additionally uses installation_id, OAuth uses
    client_id + client_secret; neither is required here.
    """
    if isinstance(app, Mapping):
        return bool(app.get("app_id") and app.get("private_key"))
    if isinstance(app, AppConfig):
        return bool(app.app_id and app.private_key)
    return False


def _validate(config: PoolConfig | Mapping | None) -> tuple[list[AppConfig], str]:
    apps = _get_field(config, "apps")
    base_url = _get_field(config, "base_url")

    if not isinstance(apps, Sequence) or isinstance(apps, (str, bytes)):
        raise InvalidRequest("apps must be an array")
    if not isinstance(base_url, str):
        raise InvalidRequest("baseUrl must be a string")

    if len(apps) == 0:
        raise EmptyPool()

    invalid = sum(1 for app in apps if not is_complete_config(app))
    if invalid > 0:
        raise IncompleteConfig(invalid)

    return [_to_app_config(app) for app in apps], base_url


def _to_app_config(app: Mapping | AppConfig) -> AppConfig:
    """Build an AppConfig from a mapping, ignoring keys it doesn't define."""
    if isinstance(app, AppConfig):
        return app
    return AppConfig(**{f.name: app[f.name] for f in dataclasses.fields(AppConfig) if f.name in app})


def _get_field(config: object, name: str) -> object:
    if config is None:
        return None
    if isinstance(config, Mapping):
        return config.get(name)
    return getattr(config, name, None)


def _best_index(rate_limits: list[RateLimit]) -> int:
    """Index of the highest `remaining`; a later entry wins only if strictly greater."""
    best = 0
    for i, rate_limit in enumerate(rate_limits):
        if rate_limit.remaining > rate_limits[best].remaining:
            best = i
    return best


async def _close_all(clients: list) -> None:
    """Close clients; a failing close() is logged, not raised."""
    results = await asyncio.gather(*(c.close() for c in clients), return_exceptions=True)
    for result in results:
        if isinstance(result, Exception) and is_debug_enabled():
            log(f"Failed to close client: {result!r}")
