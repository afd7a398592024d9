"""Client and retry configuration.

Everything the request and stream engines need is passed in explicitly as
one of these frozen values; there is no process-wide network toggle.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from urllib.parse import urlsplit

from .enums import Network
from .exceptions import ConfigurationError

DEFAULT_CLIENT_NAME = "py-digitalbits-frontier"
DEFAULT_CLIENT_VERSION = "0.1.0"


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings shared by every builder created from a Server.

    Attributes:
        server_url: Frontier base URL (may include a path prefix)
        timeout: Total timeout in seconds for one-shot calls
        allow_http: Permit plain ``http://`` servers (local development)
        headers: Extra headers sent with every request (e.g. credentials)
        client_name: Value of the ``X-Client-Name`` header
        client_version: Value of the ``X-Client-Version`` header
    """

    server_url: str
    timeout: float = 30.0
    allow_http: bool = False
    headers: dict[str, str] = field(default_factory=dict)
    client_name: str = DEFAULT_CLIENT_NAME
    client_version: str = DEFAULT_CLIENT_VERSION

    def __post_init__(self) -> None:
        parts = urlsplit(self.server_url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise ConfigurationError(f"Invalid server URL: {self.server_url!r}")
        if parts.scheme == "http" and not self.allow_http:
            raise ConfigurationError(
                "Cannot connect to insecure server; pass allow_http=True to override",
                details=self.server_url,
            )
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")

    @classmethod
    def for_network(cls, network: Network | str, **kwargs) -> ClientConfig:
        """Create a config pointing at a public Frontier deployment."""
        return cls(server_url=Network(network).server_url, **kwargs)

    def request_headers(self) -> dict[str, str]:
        """Headers attached to every outgoing request."""
        headers = {
            "X-Client-Name": self.client_name,
            "X-Client-Version": self.client_version,
        }
        headers.update(self.headers)
        return headers


@dataclass(frozen=True)
class RetryPolicy:
    """Reconnect policy for streaming subscriptions.

    Delays grow exponentially from ``initial_delay`` by ``multiplier`` per
    failed attempt and are capped at ``max_delay``. ``jitter`` adds up to that
    fraction of the delay at random. ``max_retries`` bounds consecutive failed
    attempts; ``None`` disables the bound.
    """

    initial_delay: float = 1.0
    multiplier: float = 2.0
    max_delay: float = 30.0
    max_retries: int | None = 10
    jitter: float = 0.1

    def __post_init__(self) -> None:
        if self.initial_delay < 0 or self.max_delay < 0:
            raise ConfigurationError("retry delays must be non-negative")
        if self.multiplier < 1:
            raise ConfigurationError("multiplier must be >= 1")
        if self.max_retries is not None and self.max_retries < 0:
            raise ConfigurationError("max_retries must be >= 0")
        if not 0 <= self.jitter <= 1:
            raise ConfigurationError("jitter must be within [0, 1]")

    def delay(self, attempt: int, floor: float | None = None) -> float:
        """Delay in seconds before reconnect attempt number ``attempt`` (1-based).

        Never exceeds ``max_delay``, unless a server-imposed ``floor`` is higher.
        """
        ceiling = self.max_delay if floor is None else max(self.max_delay, floor)
        base = self.initial_delay * (self.multiplier ** max(attempt - 1, 0))
        base = min(base, self.max_delay)
        if floor is not None:
            base = max(base, floor)
        if self.jitter:
            base += base * random.uniform(0, self.jitter)
        return min(base, ceiling)

    def exhausted(self, attempt: int) -> bool:
        """True once ``attempt`` consecutive failures exceed the bound."""
        return self.max_retries is not None and attempt > self.max_retries
