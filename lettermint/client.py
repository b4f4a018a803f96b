"""
Lettermint API Client

HTTP client for the Lettermint email-sending API.
"""

from typing import Optional

import httpx

from .config import get_settings, VERSION
from .email import EmailBuilder
from .exceptions import InvalidAPITokenError


class Lettermint:
    """
    Client for the Lettermint API.

    Safe to share between threads; EmailBuilder instances are not.

    Example:
        with Lettermint("your-api-token") as client:
            response = (
                client.email()
                .from_("John Doe <john@example.com>")
                .to("alice@example.com")
                .subject("Hello")
                .html("<p>World</p>")
                .send()
            )
    """

    def __init__(
        self,
        api_token: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None
    ):
        """
        Initialize client.

        Args:
            api_token: API token (from env LETTERMINT_API_TOKEN if not provided)
            base_url: Base URL (defaults to https://api.lettermint.co/v1)
            timeout: Request timeout in seconds (defaults to 30)
            http_client: Pre-configured httpx.Client for custom transports,
                proxies or tests; a given timeout is applied to it as well
        """
        settings = get_settings()
        if api_token is None and settings.api_token is not None:
            api_token = settings.api_token.get_secret_value()

        if not api_token:
            raise InvalidAPITokenError()

        self.api_token = api_token
        self.base_url = base_url or settings.base_url
        self._owns_client = http_client is None

        if http_client is None:
            http_client = httpx.Client(timeout=timeout or settings.timeout)
        elif timeout is not None:
            http_client.timeout = httpx.Timeout(timeout)
        self.http_client = http_client

    @property
    def user_agent(self) -> str:
        return f"lettermint-python/{VERSION}"

    def email(self) -> EmailBuilder:
        """Start composing an email; call send() on the builder to deliver it."""
        return EmailBuilder(self)

    def close(self):
        """Close HTTP client (only if this client created it)."""
        if self._owns_client:
            self.http_client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def __repr__(self) -> str:
        return f"Lettermint(base_url={self.base_url!r})"

