"""
Domain events published by the mount lifecycle controller.
"""

from dataclasses import dataclass
from typing import Optional

from ...models import BookmarkState, NotificationSeverity, ReconcileSummary, StatusSummary
from .domain_event import DomainEvent


@dataclass(frozen=True)
class BookmarkStateChangedEvent(DomainEvent):
    """A bookmark's observable state changed; presenters should re-render it."""

    state: BookmarkState


@dataclass(frozen=True)
class StatusSummaryChangedEvent(DomainEvent):
    """The mounted/total summary line should be refreshed."""

    summary: StatusSummary


@dataclass(frozen=True)
class BookmarksReloadedEvent(DomainEvent):
    """Bookmarks were reloaded from the bookmarks file and settings store."""

    count: int
    diagnostic: Optional[str] = None


@dataclass(frozen=True)
class ReconcileCompletedEvent(DomainEvent):
    """A reconcile pass finished dispatching its actions."""

    summary: ReconcileSummary


@dataclass(frozen=True)
class NotificationRaisedEvent(DomainEvent):
    """A user-facing notification passed the show-* gating."""

    title: str
    message: str
    severity: NotificationSeverity
