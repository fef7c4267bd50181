"""
Notification sink contract.

Publishing is fire-and-forget: a sink must not block the caller and
scan correctness never depends on delivery.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class NotificationSink(Protocol):
    """Receiver of incremental update events."""

    def publish(self, event_name: str, payload: Any) -> None: ...


class NullNotificationSink:
    """Sink that drops every event."""

    def publish(self, event_name: str, payload: Any) -> None:
        return None


class RecordingNotificationSink:
    """Sink that keeps published events in memory (tests, CLI runs)."""

    def __init__(self) -> None:
        self.events: list[tuple[str, Any]] = []

    def publish(self, event_name: str, payload: Any) -> None:
        self.events.append((event_name, payload))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]
