"""Subscription protocol: wire messages, frame decoding and state machine."""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ValidationError

from .exceptions import LogStreamError, LogStreamErrorCodes
from .types import (
    LogFrame,
    LogLabel,
    LogQuery,
    StreamAction,
    StreamEvent,
    SubscriptionState,
)

SUBSCRIPTION_ID = "1"
KEEPALIVE_TYPE = "ka"

LOG_ADDED = """subscription logAdded($query: LogSubscriptionInput!) {
  logAdded(query: $query) {
    ...logWithLabelsFields
    __typename
  }
}

fragment logWithLabelsFields on LogWithLabels {
  id
  labels {
    label
    value
    __typename
  }
  timestamp
  text
  __typename
}
"""


def connection_init(token: str) -> str:
    return json.dumps(
        {
            "type": "connection_init",
            "payload": {"Authorization": f"Bearer {token}"},
        }
    )


def start(query: LogQuery) -> str:
    return json.dumps(
        {
            "id": SUBSCRIPTION_ID,
            "type": "start",
            "payload": {
                "variables": query.to_variables(),
                "extensions": {},
                "operationName": "logAdded",
                "query": LOG_ADDED,
            },
        }
    )


class _Label(BaseModel):
    label: str
    value: str


class _LogAdded(BaseModel):
    id: str
    timestamp: str
    text: str
    labels: list[_Label] | None = None


def decode_frame(raw: str | bytes) -> tuple[StreamEvent, LogFrame | None]:
    """Classify one server frame.

    Anything that is neither a keepalive nor a well-formed ``logAdded``
    payload is ``OTHER``; it is never an error.
    """
    try:
        message: Any = json.loads(raw)
    except ValueError:
        return StreamEvent.OTHER, None
    if not isinstance(message, dict):
        return StreamEvent.OTHER, None
    if message.get("type") == KEEPALIVE_TYPE:
        return StreamEvent.KEEPALIVE, None

    payload = message.get("payload")
    data = payload.get("data") if isinstance(payload, dict) else None
    log = data.get("logAdded") if isinstance(data, dict) else None
    if not log:
        return StreamEvent.OTHER, None
    try:
        record = _LogAdded.model_validate(log)
    except ValidationError:
        return StreamEvent.OTHER, None
    return StreamEvent.LOG, LogFrame(
        id=record.id,
        timestamp=record.timestamp,
        text=record.text,
        labels=frozenset(LogLabel(label=item.label, value=item.value) for item in record.labels or ()),
    )


S = SubscriptionState
E = StreamEvent
A = StreamAction

TRANSITIONS: dict[tuple[SubscriptionState, StreamEvent], tuple[SubscriptionState, StreamAction]] = {
    (S.CONNECTING, E.OPENED): (S.HANDSHAKING, A.SEND_INIT),
    # the first keepalive, and only that one, triggers the subscription
    (S.HANDSHAKING, E.KEEPALIVE): (S.SUBSCRIBED, A.SEND_START),
    (S.HANDSHAKING, E.LOG): (S.HANDSHAKING, A.DISCARD),
    (S.HANDSHAKING, E.OTHER): (S.HANDSHAKING, A.DISCARD),
    (S.SUBSCRIBED, E.KEEPALIVE): (S.SUBSCRIBED, A.DISCARD),
    (S.SUBSCRIBED, E.LOG): (S.STREAMING, A.EMIT),
    (S.SUBSCRIBED, E.OTHER): (S.SUBSCRIBED, A.DISCARD),
    (S.STREAMING, E.KEEPALIVE): (S.STREAMING, A.DISCARD),
    (S.STREAMING, E.LOG): (S.STREAMING, A.EMIT),
    (S.STREAMING, E.OTHER): (S.STREAMING, A.DISCARD),
}
for _state in (S.CONNECTING, S.HANDSHAKING, S.SUBSCRIBED, S.STREAMING):
    TRANSITIONS[(_state, E.CLOSED)] = (S.CLOSED, A.STOP)
    TRANSITIONS[(_state, E.ERROR)] = (S.FAILED, A.STOP)


class SubscriptionMachine:
    """Explicit state machine for one connection's subscription."""

    def __init__(self) -> None:
        self._state = SubscriptionState.CONNECTING

    @property
    def state(self) -> SubscriptionState:
        return self._state

    @property
    def finished(self) -> bool:
        return self._state in (SubscriptionState.CLOSED, SubscriptionState.FAILED)

    def advance(self, event: StreamEvent) -> StreamAction:
        try:
            self._state, action = TRANSITIONS[(self._state, event)]
        except KeyError:
            raise LogStreamError(
                code=LogStreamErrorCodes.NOT_CONNECTED,
                message=f"No transition from {self._state.name} on {event.name}",
            ) from None
        return action
