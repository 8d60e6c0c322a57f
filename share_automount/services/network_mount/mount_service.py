"""Network Mount Service - OS mount subsystem facade."""

import asyncio
import logging
from typing import Optional

from ...config import Settings
from ...core.exceptions import TransientMountFailure, UnmountFailure, UnsupportedPlatformError
from .base_mounter import BaseMounter
from .platform_factory import PlatformFactory


class NetworkMountService:
    """
    Issues mount and unmount requests through the platform mounter.

    Every failure leaves here as a typed exception: TransientMountFailure for
    mounts, UnmountFailure for unmounts. Calls are bounded by
    ``mount_timeout_seconds`` but are otherwise not cancellable by callers.
    """

    def __init__(self, settings: Settings, mounter: Optional[BaseMounter] = None):
        self._settings = settings
        self._platform_factory = PlatformFactory()
        self._mounter = mounter if mounter is not None else self._initialize_mounter()

    def _initialize_mounter(self) -> Optional[BaseMounter]:
        try:
            mounter = self._platform_factory.create_mounter(
                command_timeout=self._settings.mount_timeout_seconds
            )
            logging.info(f"Initialized {mounter.get_platform_name()} mounter")
            return mounter
        except UnsupportedPlatformError as e:
            logging.error(f"Error initializing network mounter: {e}")
            return None

    @property
    def mounter(self) -> Optional[BaseMounter]:
        return self._mounter

    def update_settings(self, settings: Settings) -> None:
        self._settings = settings

    async def mount(self, uri: str) -> None:
        if not self._mounter:
            raise TransientMountFailure(uri, "No network mounter available on this platform")

        try:
            await asyncio.wait_for(
                self._mounter.attempt_mount(uri), timeout=self._settings.mount_timeout_seconds
            )
        except TransientMountFailure:
            raise
        except asyncio.TimeoutError as e:
            raise TransientMountFailure(
                uri, f"timed out after {self._settings.mount_timeout_seconds}s"
            ) from e
        except Exception as e:
            logging.error(f"Unexpected error mounting {uri}: {e}", exc_info=True)
            raise TransientMountFailure(uri, str(e)) from e

    async def unmount(self, uri: str) -> None:
        if not self._mounter:
            raise UnmountFailure(uri, "No network mounter available on this platform")

        try:
            await asyncio.wait_for(
                self._mounter.attempt_unmount(uri), timeout=self._settings.mount_timeout_seconds
            )
        except UnmountFailure:
            raise
        except asyncio.TimeoutError as e:
            raise UnmountFailure(
                uri, f"timed out after {self._settings.mount_timeout_seconds}s"
            ) from e
        except Exception as e:
            logging.error(f"Unexpected error unmounting {uri}: {e}", exc_info=True)
            raise UnmountFailure(uri, str(e)) from e

    def get_platform_info(self) -> dict:
        """Get platform and mounter information."""
        platform_name = "unknown"
        if self._mounter:
            platform_name = self._mounter.get_platform_name()
        else:
            try:
                platform_name = self._platform_factory.detect_platform()
            except UnsupportedPlatformError:
                pass

        return {
            "platform": platform_name,
            "mounter_available": self._mounter is not None,
            "mount_timeout_seconds": self._settings.mount_timeout_seconds,
        }
