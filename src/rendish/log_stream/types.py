"""Log stream types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum, auto
from typing import Any

DEFAULT_REGION = "oregon"
DEFAULT_HISTORY_MINUTES = 4
DEFAULT_DIRECTION = "backward"


@dataclass(frozen=True)
class LogLabel:
    label: str
    value: str


@dataclass(frozen=True)
class LogFrame:
    """One log line delivered by the subscription."""

    id: str
    timestamp: str
    text: str
    labels: frozenset[LogLabel] = frozenset()

    def label(self, name: str) -> str | None:
        for item in self.labels:
            if item.label == name:
                return item.value
        return None

    def format(self) -> str:
        return f"{self.timestamp} {self.text}"


@dataclass(frozen=True)
class LogQuery:
    """Parameters of the ``logAdded`` subscription."""

    resource_id: str
    owner_id: str
    start: datetime
    region: str = DEFAULT_REGION
    page_size: int | None = None
    direction: str | None = DEFAULT_DIRECTION

    @classmethod
    def since(
        cls,
        resource_id: str,
        owner_id: str,
        minutes: int = DEFAULT_HISTORY_MINUTES,
        now: datetime | None = None,
        **kwargs: Any,
    ) -> LogQuery:
        """Window starting ``minutes`` before ``now``."""
        now = now or datetime.now(timezone.utc)
        return cls(
            resource_id=resource_id,
            owner_id=owner_id,
            start=now - timedelta(minutes=minutes),
            **kwargs,
        )

    def to_variables(self) -> dict[str, Any]:
        start = self.start.astimezone(timezone.utc)
        query: dict[str, Any] = {
            "filters": [
                {
                    "field": "SERVICE",
                    "values": [self.resource_id],
                    "operator": "INCLUDES",
                }
            ],
            "ownerId": self.owner_id,
            "region": self.region,
            "start": start.isoformat(timespec="milliseconds").replace("+00:00", "Z"),
        }
        if self.page_size is not None:
            query["pageSize"] = self.page_size
        if self.direction is not None:
            query["direction"] = self.direction
        return {"query": query}


class SubscriptionState(Enum):
    """Lifecycle of one subscription connection."""

    CONNECTING = auto()
    HANDSHAKING = auto()
    SUBSCRIBED = auto()
    STREAMING = auto()
    CLOSED = auto()
    FAILED = auto()


class StreamEvent(Enum):
    """Inputs to the subscription state machine."""

    OPENED = auto()
    KEEPALIVE = auto()
    LOG = auto()
    OTHER = auto()
    CLOSED = auto()
    ERROR = auto()


class StreamAction(Enum):
    """What the client does in response to an event."""

    SEND_INIT = auto()
    SEND_START = auto()
    EMIT = auto()
    DISCARD = auto()
    STOP = auto()
