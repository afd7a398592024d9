"""Custom exception hierarchy."""

from __future__ import annotations

from typing import Any


class FrontierError(Exception):
    """Base exception for all library errors."""

    pass


class ConfigurationError(FrontierError):
    """Invalid or conflicting request configuration.

    Raised synchronously while a request is being built, before anything is
    sent to the network (conflicting filters, out-of-range limit, unknown
    order, unsupported endpoint flag, insecure server URL).
    """

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.details = details


class TransportError(FrontierError):
    """Connection refused, DNS failure, timeout or dropped connection."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class ServerError(FrontierError):
    """Non-2xx response from the server.

    The problem body is kept verbatim: a dict when the server replied with
    JSON (``application/problem+json``), otherwise the raw text.
    """

    def __init__(
        self,
        message: str,
        status: int,
        problem: Any = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.problem = problem
        self.url = url

    @property
    def retryable(self) -> bool:
        """Whether a streaming client may retry after this error."""
        return self.status == 429 or self.status >= 500


class BadRequestError(ServerError):
    """Server rejected the request as malformed (400)."""

    pass


class NotFoundError(ServerError):
    """Requested resource does not exist (404)."""

    pass


class RateLimitError(ServerError):
    """Server rate limit exceeded (429)."""

    def __init__(
        self,
        message: str,
        problem: Any = None,
        url: str | None = None,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, status=429, problem=problem, url=url)
        self.retry_after = retry_after


class MalformedResponseError(FrontierError):
    """Body is not valid JSON or lacks expected fields."""

    def __init__(self, message: str, body: Any = None) -> None:
        super().__init__(message)
        self.body = body


def server_error_for(
    status: int,
    problem: Any = None,
    url: str | None = None,
    retry_after: float | None = None,
) -> ServerError:
    """Build the most specific ServerError subclass for a status code."""
    title = None
    if isinstance(problem, dict):
        title = problem.get("title") or problem.get("detail")
    message = f"HTTP {status}" + (f": {title}" if title else "")

    if status == 429:
        return RateLimitError(message, problem=problem, url=url, retry_after=retry_after)
    if status == 400:
        return BadRequestError(message, status=status, problem=problem, url=url)
    if status == 404:
        return NotFoundError(message, status=status, problem=problem, url=url)
    return ServerError(message, status=status, problem=problem, url=url)
