"""
Tests for the DomainEventBus.
"""

import asyncio
from unittest.mock import Mock, patch

import pytest

from share_automount.core.events import (
    BookmarksReloadedEvent,
    DomainEvent,
    DomainEventBus,
    NotificationRaisedEvent,
)
from share_automount.models import NotificationSeverity


@pytest.mark.asyncio
async def test_subscribe_and_publish():
    """A handler is called when its subscribed event is published."""
    bus = DomainEventBus()
    handler_mock = Mock()

    async def async_handler(event: DomainEvent):
        handler_mock(event)

    await bus.subscribe(BookmarksReloadedEvent, async_handler)

    event_to_publish = BookmarksReloadedEvent(count=3)
    await bus.publish(event_to_publish)

    handler_mock.assert_called_once_with(event_to_publish)


@pytest.mark.asyncio
async def test_publish_to_correct_handlers_only():
    """Only handlers for the exact event type are called."""
    bus = DomainEventBus()
    reloaded_mock = Mock()
    notification_mock = Mock()

    async def on_reloaded(event):
        reloaded_mock(event)

    async def on_notification(event):
        notification_mock(event)

    await bus.subscribe(BookmarksReloadedEvent, on_reloaded)
    await bus.subscribe(NotificationRaisedEvent, on_notification)

    event = NotificationRaisedEvent(title="Unmounted", message="Media", severity=NotificationSeverity.SUCCESS)
    await bus.publish(event)

    notification_mock.assert_called_once_with(event)
    reloaded_mock.assert_not_called()


@pytest.mark.asyncio
async def test_publish_with_no_subscribers():
    bus = DomainEventBus()

    try:
        await bus.publish(BookmarksReloadedEvent(count=0))
    except Exception as e:
        pytest.fail(f"Publishing with no subscribers raised an exception: {e}")


@pytest.mark.asyncio
async def test_unsubscribe():
    bus = DomainEventBus()
    handler_mock = Mock()

    async def handler(event):
        handler_mock(event)

    await bus.subscribe(BookmarksReloadedEvent, handler)
    assert bus.handler_count(BookmarksReloadedEvent) == 1

    assert await bus.unsubscribe(BookmarksReloadedEvent, handler) is True
    assert await bus.unsubscribe(BookmarksReloadedEvent, handler) is False
    await bus.publish(BookmarksReloadedEvent(count=1))

    handler_mock.assert_not_called()


@pytest.mark.asyncio
async def test_failing_handler_does_not_stop_others():
    """If one handler fails, the other handlers still run."""
    bus = DomainEventBus()
    handler_success_mock = Mock()
    handler_fail_mock = Mock()

    async def success_handler(event):
        handler_success_mock(event)
        await asyncio.sleep(0.01)

    async def failing_handler(event):
        handler_fail_mock(event)
        raise ValueError("Handler failed intentionally")

    await bus.subscribe(BookmarksReloadedEvent, failing_handler)
    await bus.subscribe(BookmarksReloadedEvent, success_handler)

    event_to_publish = BookmarksReloadedEvent(count=2)

    with patch("logging.error") as mock_log_error:
        await bus.publish(event_to_publish)

        handler_fail_mock.assert_called_once_with(event_to_publish)
        handler_success_mock.assert_called_once_with(event_to_publish)

        mock_log_error.assert_called_once()
        log_args, _ = mock_log_error.call_args
        assert "Unhandled exception in handler 'failing_handler'" in log_args[0]
        assert "Handler failed intentionally" in log_args[0]


def test_events_are_immutable():
    event = BookmarksReloadedEvent(count=1, diagnostic="bad json")

    with pytest.raises(AttributeError):
        event.count = 2
    assert event.event_id
    assert event.timestamp.tzinfo is not None
