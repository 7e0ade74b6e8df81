"""Authenticated GitHub API client for one GitHub App."""

import httpx

from app_pool.clients.auth import GitHubAppAuth
from app_pool.clients.models import AppConfig, RateLimit
from app_pool.config.settings import get_settings
from app_pool.errors import GitHubAPIError


class GitHubAppClient:
    """Issues requests to a GitHub API endpoint as one GitHub App.

    The underlying httpx client is created on first use, so constructing
    a GitHubAppClient never does I/O. Auth and network errors surface
    from request() and get_rate_limit().
    """

    def __init__(self, app: AppConfig, base_url: str, transport: httpx.AsyncBaseTransport | None = None):
        settings = get_settings()
        self.app = app
        self.base_url = (base_url or settings.github_api_url).rstrip("/")
        self.auth = GitHubAppAuth(app.app_id, app.private_key, app.installation_id)
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            settings = get_settings()
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(settings.http_timeout, connect=settings.http_connect_timeout),
                transport=self._transport,
            )
        return self._client

    def _build_headers(self, authorization: str) -> dict:
        settings = get_settings()
        return {
            "Accept": "application/vnd.github+json",
            "Authorization": authorization,
            "User-Agent": settings.user_agent,
            "X-GitHub-Api-Version": settings.github_api_version,
        }

    async def request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Send an authenticated request. Raises GitHubAPIError on non-2xx."""
        client = await self._get_client()
        authorization = await self.auth.authorization(client)
        headers = {**self._build_headers(authorization), **kwargs.pop("headers", {})}

        response = await client.request(method, path, headers=headers, **kwargs)
        if not response.is_success:
            raise GitHubAPIError.from_response(response)
        return response

    async def get(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs) -> httpx.Response:
        return await self.request("POST", path, **kwargs)

    async def get_rate_limit(self, index: int = 0) -> RateLimit:
        """Probe the core REST rate limit. Does not count against the quota."""
        response = await self.get("/rate_limit")
        rate = response.json()["rate"]
        return RateLimit(
            limit=rate["limit"],
            used=rate["used"],
            remaining=rate["remaining"],
            reset=rate["reset"],
            app_index=index,
        )

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None
