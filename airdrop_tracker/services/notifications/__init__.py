"""
Notifications.

Injectable sinks for scanner events.
"""

from .sink import (
    NotificationSink,
    NullNotificationSink,
    RecordingNotificationSink,
)
from .websocket_hub import WebSocketHub

__all__ = [
    "NotificationSink",
    "NullNotificationSink",
    "RecordingNotificationSink",
    "WebSocketHub",
]
