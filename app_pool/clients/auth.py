"""GitHub App authentication.

Two strategies, picked by whether an installation id is configured:
- App auth: requests carry a short-lived RS256 JWT signed with the app's
  private key (`Authorization: Bearer <jwt>`).
- Installation auth: the JWT is exchanged for an installation access token
  (`Authorization: token <token>`), cached until shortly before it expires.
"""

import asyncio
import time
from datetime import datetime

import httpx
import jwt

from app_pool.config.settings import get_settings
from app_pool.errors import GitHubAPIError

TOKEN_REFRESH_MARGIN = 60.0  # seconds before expires_at to refresh


class GitHubAppAuth:
    """Produces Authorization header values for one GitHub App identity."""

    def __init__(self, app_id: str | int, private_key: str, installation_id: str | int | None = None):
        self.app_id = str(app_id)
        self.installation_id = installation_id
        self._private_key = private_key
        self._token: str | None = None
        self._token_expires_at: float = 0.0
        self._lock = asyncio.Lock()

    def create_jwt(self, now: float | None = None) -> str:
        """Sign an app JWT. Backdates iat to tolerate clock drift."""
        settings = get_settings()
        now = int(time.time() if now is None else now)
        payload = {
            "iat": now - settings.jwt_clock_skew_seconds,
            "exp": now + settings.jwt_expiry_seconds - settings.jwt_clock_skew_seconds,
            "iss": self.app_id,
        }
        return jwt.encode(payload, self._private_key, algorithm="RS256")

    async def authorization(self, client: httpx.AsyncClient) -> str:
        """Header value for the next request made with `client`."""
        if self.installation_id is None:
            return f"Bearer {self.create_jwt()}"
        token = await self.installation_token(client)
        return f"token {token}"

    async def installation_token(self, client: httpx.AsyncClient) -> str:
        async with self._lock:
            if self._token and time.time() < self._token_expires_at - TOKEN_REFRESH_MARGIN:
                return self._token

            response = await client.post(
                f"/app/installations/{self.installation_id}/access_tokens",
                headers={
                    "Accept": "application/vnd.github+json",
                    "Authorization": f"Bearer {self.create_jwt()}",
                },
            )
            if response.status_code not in (200, 201):
                raise GitHubAPIError.from_response(response)

            data = response.json()
            self._token = data["token"]
            self._token_expires_at = _parse_timestamp(data.get("expires_at"))
            return self._token


def _parse_timestamp(value: str | None) -> float:
    """Parse GitHub's `2016-07-11T22:14:10Z` format to epoch seconds."""
    if not value:
        return 0.0
    return datetime.fromisoformat(value.replace("Z", "+00:00")).timestamp()
