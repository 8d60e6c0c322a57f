from .bookmark_events import (
    BookmarkStateChangedEvent,
    BookmarksReloadedEvent,
    NotificationRaisedEvent,
    ReconcileCompletedEvent,
    StatusSummaryChangedEvent,
)
from .domain_event import DomainEvent
from .event_bus import DomainEventBus

__all__ = [
    "DomainEvent",
    "DomainEventBus",
    "BookmarkStateChangedEvent",
    "BookmarksReloadedEvent",
    "NotificationRaisedEvent",
    "ReconcileCompletedEvent",
    "StatusSummaryChangedEvent",
]
