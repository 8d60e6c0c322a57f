"""
Network Mount Module

Components:
- NetworkMountService: issues mount/unmount requests with timeouts
- MountObserver: live mount state queries, failing closed
- BaseMounter: abstract platform interface
- GioMounter: Linux GVFS implementation (``gio``)
- MacOSMounter: macOS implementation
- PlatformFactory: platform detection and mounter creation
"""

from .base_mounter import BaseMounter
from .mount_observer import MountObserver
from .mount_service import NetworkMountService
from .platform_factory import PlatformFactory

__all__ = [
    "BaseMounter",
    "MountObserver",
    "NetworkMountService",
    "PlatformFactory",
]
