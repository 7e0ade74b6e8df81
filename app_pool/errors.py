"""Exceptions raised by pool selection and the GitHub client."""


class PoolError(Exception):
    """Base class for pool selection failures."""


class InvalidRequest(PoolError):
    """The pool config has the wrong shape (apps not a list, base_url not a str)."""

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Invalid config: {detail}")


class EmptyPool(PoolError):
    def __init__(self):
        super().__init__("Invalid config: apps array is empty")


class IncompleteConfig(PoolError):
    """One or more app configs lack an app id or private key."""

    def __init__(self, count: int):
        self.count = count
        super().__init__(
            f"Invalid config: {count} app(s) missing required appId or privateKey"
        )


class PoolExhausted(PoolError):
    def __init__(self):
        super().__init__("All GitHub Apps have exhausted their rate limits")


class GitHubAPIError(Exception):
    """Non-2xx response from the GitHub API."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"GitHub API error {status_code}: {message}")

    @classmethod
    def from_response(cls, response) -> "GitHubAPIError":
        """Build from an httpx.Response, preferring GitHub's `message` field."""
        try:
            message = response.json().get("message", response.text)
        except ValueError:
            message = response.text
        return cls(response.status_code, message)
