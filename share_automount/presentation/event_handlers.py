import logging
from datetime import datetime
from typing import Any, Dict, List

from ..core.events.bookmark_events import (
    BookmarkStateChangedEvent,
    BookmarksReloadedEvent,
    NotificationRaisedEvent,
    ReconcileCompletedEvent,
    StatusSummaryChangedEvent,
)
from ..models import BookmarkState, StatusSummary
from .websocket_manager import WebSocketManager


def serialize_bookmark_state(state: BookmarkState) -> Dict[str, Any]:
    return state.model_dump(mode="json")


def serialize_status_summary(summary: StatusSummary) -> Dict[str, Any]:
    data = summary.model_dump(mode="json")
    data["status_text"] = summary.status_text
    return data


def build_snapshot(states: List[BookmarkState], summary: StatusSummary) -> Dict[str, Any]:
    """Initial message for a freshly connected client."""
    return {
        "type": "initial_state",
        "data": {
            "bookmarks": [serialize_bookmark_state(state) for state in states],
            "summary": serialize_status_summary(summary),
            "timestamp": datetime.now().isoformat(),
        },
    }


class PresentationEventHandlers:
    """Turns controller events into WebSocket messages. Holds no mount state of its own."""

    def __init__(self, websocket_manager: WebSocketManager):
        self.websocket_manager = websocket_manager

    def _get_timestamp(self) -> str:
        return datetime.now().isoformat()

    async def handle_bookmark_state_changed(self, event: BookmarkStateChangedEvent) -> None:
        logging.debug(f"Received event: {event.state.uri} -> {event.state.state.value}")
        message_data = {
            "type": "bookmark_update",
            "data": {
                "bookmark": serialize_bookmark_state(event.state),
                "timestamp": event.timestamp.isoformat(),
            },
        }
        self.websocket_manager.broadcast_message(message_data)

    async def handle_status_summary_changed(self, event: StatusSummaryChangedEvent) -> None:
        message_data = {
            "type": "status_summary",
            "data": {
                **serialize_status_summary(event.summary),
                "timestamp": event.timestamp.isoformat(),
            },
        }
        self.websocket_manager.broadcast_message(message_data)

    async def handle_bookmarks_reloaded(self, event: BookmarksReloadedEvent) -> None:
        message_data = {
            "type": "bookmarks_reloaded",
            "data": {
                "count": event.count,
                "diagnostic": event.diagnostic,
                "timestamp": event.timestamp.isoformat(),
            },
        }
        self.websocket_manager.broadcast_message(message_data)

    async def handle_reconcile_completed(self, event: ReconcileCompletedEvent) -> None:
        message_data = {
            "type": "reconcile_completed",
            "data": event.summary.model_dump(mode="json"),
        }
        self.websocket_manager.broadcast_message(message_data)

    async def handle_notification(self, event: NotificationRaisedEvent) -> None:
        message_data = {
            "type": "notification",
            "data": {
                "title": event.title,
                "message": event.message,
                "severity": event.severity.value,
                "timestamp": self._get_timestamp(),
            },
        }
        self.websocket_manager.broadcast_message(message_data)
