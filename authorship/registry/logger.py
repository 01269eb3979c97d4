"""Append-only event log - the record of every committed registry change"""

from __future__ import annotations

import json
import logging
from collections import deque
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from ..config import get_validated_config

logger = logging.getLogger(__name__)

EventCallback = Callable[[dict[str, Any]], None]

# Event types emitted by the registry and access control layer
CONTENT_REGISTERED = "ContentRegistered"
REWARD_CLAIMED = "RewardClaimed"
CONTENT_UPDATED = "ContentUpdated"
CONTENT_APPROVED = "ContentApproved"
ROLE_GRANTED = "RoleGranted"
ROLE_REVOKED = "RoleRevoked"
OWNERSHIP_TRANSFERRED = "OwnershipTransferred"
CONFIG_UPDATED = "ConfigUpdated"

STANDARD_EVENT_TYPES = [
    CONTENT_REGISTERED,
    REWARD_CLAIMED,
    CONTENT_UPDATED,
    CONTENT_APPROVED,
    ROLE_GRANTED,
    ROLE_REVOKED,
    OWNERSHIP_TRANSFERRED,
    CONFIG_UPDATED,
]


class EventLogger:
    """Append-only event log with optional JSONL output.

    Events are kept in a bounded in-memory buffer and, when an output
    file is configured, appended to it one JSON object per line. Every
    event gets a monotonic 'sequence' number. Subscribers registered with
    subscribe() are called synchronously after the event is recorded.
    """

    output_path: Path | None
    _buffer: deque[dict[str, Any]]
    _sequence: int  # Monotonic event counter
    _subscribers: dict[str, list[EventCallback]]

    def __init__(
        self,
        output_file: str | None = None,
        buffer_size: int | None = None,
    ) -> None:
        """Initialize the event logger.

        Args:
            output_file: JSONL file to append events to (default: logging.output_file)
            buffer_size: Events kept in memory (default: logging.buffer_size)
        """
        log_cfg = get_validated_config().logging
        resolved_file = output_file if output_file is not None else log_cfg.output_file
        self._buffer = deque(maxlen=buffer_size or log_cfg.buffer_size)
        self._sequence = 0
        self._subscribers = {}

        if resolved_file:
            self.output_path = Path(resolved_file)
            self.output_path.parent.mkdir(parents=True, exist_ok=True)
            # Clear existing log on init (new registry instance)
            self.output_path.write_text("")
        else:
            self.output_path = None

    def log(self, event_type: str, data: dict[str, Any]) -> dict[str, Any]:
        """Record an event and notify subscribers.

        Returns the stored event, including its logged_at time and sequence.
        A failing subscriber is logged and skipped; it never reaches the
        code that emitted the event.
        """
        self._sequence += 1
        event: dict[str, Any] = {
            **data,
            "logged_at": datetime.now(timezone.utc).isoformat(),
            "sequence": self._sequence,
            "event_type": event_type,
        }
        self._buffer.append(event)
        if self.output_path is not None:
            with open(self.output_path, "a") as f:
                f.write(json.dumps(event) + "\n")

        for callback in self._subscribers.get(event_type, []) + self._subscribers.get("*", []):
            try:
                callback(event)
            except Exception:
                logger.exception("Subscriber %r failed on %s #%d", callback, event_type, self._sequence)
        return event

    def subscribe(self, event_type: str, callback: EventCallback) -> None:
        """Call `callback(event)` for every future event of this type.

        Use "*" to receive every event.
        """
        if event_type != "*" and event_type not in STANDARD_EVENT_TYPES:
            raise ValueError(f"Unknown event type: {event_type}")
        self._subscribers.setdefault(event_type, []).append(callback)

    def unsubscribe(self, event_type: str, callback: EventCallback) -> bool:
        """Remove a subscription. Returns False if it was not registered."""
        callbacks = self._subscribers.get(event_type, [])
        if callback in callbacks:
            callbacks.remove(callback)
            return True
        return False

    def read_recent(self, n: int | None = None) -> list[dict[str, Any]]:
        """Read the last N events.

        N defaults to logging.default_recent from config.
        """
        if n is None:
            n = get_validated_config().logging.default_recent
        events = list(self._buffer)
        return events[-n:] if len(events) > n else events

    def events_of_type(self, event_type: str) -> list[dict[str, Any]]:
        """All buffered events of one type, oldest first."""
        return [e for e in self._buffer if e["event_type"] == event_type]

    def transaction(self, tx_id: str) -> list[dict[str, Any]]:
        """All buffered events emitted by one committed operation."""
        return [e for e in self._buffer if e.get("tx_id") == tx_id]

    @property
    def sequence(self) -> int:
        """Sequence number of the most recent event (0 if none)."""
        return self._sequence
