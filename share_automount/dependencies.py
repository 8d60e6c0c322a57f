from functools import lru_cache
from typing import Any, Dict

from .config import Settings
from .core.events.event_bus import DomainEventBus
from .presentation.event_handlers import PresentationEventHandlers
from .presentation.websocket_manager import WebSocketManager
from .services.bookmark_store import BookmarkStore
from .services.mount_controller import MountLifecycleController
from .services.network_mount import MountObserver, NetworkMountService
from .services.notification_service import NotificationService
from .services.retry_scheduler import RetryScheduler
from .services.symlink_manager import SymlinkManager

# Global singleton instances
_singletons: Dict[str, Any] = {}


@lru_cache
def get_settings() -> Settings:
    """Get the Settings singleton instance."""
    return Settings()


def get_event_bus() -> DomainEventBus:
    if "event_bus" not in _singletons:
        _singletons["event_bus"] = DomainEventBus()
    return _singletons["event_bus"]


def get_bookmark_store() -> BookmarkStore:
    if "bookmark_store" not in _singletons:
        settings = get_settings()
        _singletons["bookmark_store"] = BookmarkStore(
            bookmarks_path=settings.bookmarks_path,
            settings_path=settings.bookmark_settings_path,
        )
    return _singletons["bookmark_store"]


def get_network_mount_service() -> NetworkMountService:
    if "network_mount_service" not in _singletons:
        _singletons["network_mount_service"] = NetworkMountService(get_settings())
    return _singletons["network_mount_service"]


def get_mount_observer() -> MountObserver:
    if "mount_observer" not in _singletons:
        _singletons["mount_observer"] = MountObserver(get_network_mount_service().mounter)
    return _singletons["mount_observer"]


def get_symlink_manager() -> SymlinkManager:
    if "symlink_manager" not in _singletons:
        _singletons["symlink_manager"] = SymlinkManager(get_settings().mount_base_path)
    return _singletons["symlink_manager"]


def get_retry_scheduler() -> RetryScheduler:
    if "retry_scheduler" not in _singletons:
        _singletons["retry_scheduler"] = RetryScheduler()
    return _singletons["retry_scheduler"]


def get_notification_service() -> NotificationService:
    if "notification_service" not in _singletons:
        _singletons["notification_service"] = NotificationService(
            settings=get_settings(), event_bus=get_event_bus()
        )
    return _singletons["notification_service"]


def get_mount_controller() -> MountLifecycleController:
    if "mount_controller" not in _singletons:
        _singletons["mount_controller"] = MountLifecycleController(
            settings=get_settings(),
            bookmark_store=get_bookmark_store(),
            mount_observer=get_mount_observer(),
            mount_service=get_network_mount_service(),
            symlink_manager=get_symlink_manager(),
            retry_scheduler=get_retry_scheduler(),
            notifier=get_notification_service(),
            event_bus=get_event_bus(),
        )
    return _singletons["mount_controller"]


def get_websocket_manager() -> WebSocketManager:
    """Gets the singleton instance of the WebSocketManager."""
    if "websocket_manager" not in _singletons:
        _singletons["websocket_manager"] = WebSocketManager()
    return _singletons["websocket_manager"]


def get_presentation_event_handlers() -> PresentationEventHandlers:
    if "presentation_event_handlers" not in _singletons:
        _singletons["presentation_event_handlers"] = PresentationEventHandlers(
            websocket_manager=get_websocket_manager()
        )
    return _singletons["presentation_event_handlers"]


def reset_singletons() -> None:
    _singletons.clear()
