"""Platform Factory - platform detection and mounter creation."""

import logging
import platform

from ...core.exceptions import UnsupportedPlatformError
from .base_mounter import BaseMounter


class PlatformFactory:
    """Factory for creating platform-specific mount implementations."""

    def detect_platform(self) -> str:
        """Detect current platform. Returns: linux or macos."""
        system = platform.system().lower()

        if system == "linux":
            return "linux"
        elif system == "darwin":
            return "macos"
        else:
            raise UnsupportedPlatformError(f"Platform {system} not supported for network mounting")

    def create_mounter(self, command_timeout: float = 60.0) -> BaseMounter:
        """Create platform-specific mounter instance."""
        platform_name = self.detect_platform()
        logging.info(f"Detected platform: {platform_name}")

        if platform_name == "linux":
            from .gio_mounter import GioMounter
            return GioMounter(command_timeout=command_timeout)
        else:
            from .macos_mounter import MacOSMounter
            return MacOSMounter(command_timeout=command_timeout)
