"""Connection status events for streaming subscriptions."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from ..core.enums import StreamState


@dataclass(frozen=True)
class ConnectionEvent:
    """Emitted on every state transition of a StreamSubscription."""

    state: StreamState
    url: str
    cursor: str | None = None
    attempt: int = 0
    error: BaseException | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_terminal(self) -> bool:
        return self.state is StreamState.CLOSED
