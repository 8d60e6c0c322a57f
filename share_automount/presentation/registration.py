# share_automount/presentation/registration.py

import logging

from ..core.events.bookmark_events import (
    BookmarkStateChangedEvent,
    BookmarksReloadedEvent,
    NotificationRaisedEvent,
    ReconcileCompletedEvent,
    StatusSummaryChangedEvent,
)
from ..core.events.event_bus import DomainEventBus
from .event_handlers import PresentationEventHandlers


async def register_presentation_domain(event_bus: DomainEventBus, handlers: PresentationEventHandlers):
    """Subscribe the presentation handlers to every controller event."""
    logging.info("Subscribing presentation event handlers...")

    await event_bus.subscribe(BookmarkStateChangedEvent, handlers.handle_bookmark_state_changed)
    await event_bus.subscribe(StatusSummaryChangedEvent, handlers.handle_status_summary_changed)
    await event_bus.subscribe(BookmarksReloadedEvent, handlers.handle_bookmarks_reloaded)
    await event_bus.subscribe(ReconcileCompletedEvent, handlers.handle_reconcile_completed)
    await event_bus.subscribe(NotificationRaisedEvent, handlers.handle_notification)

    logging.info("Presentation domain registration complete.")
