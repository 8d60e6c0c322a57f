"""Abstract Base Mounter - platform mount operations interface."""

from abc import ABC, abstractmethod

from ...models import MountRecord


class BaseMounter(ABC):
    """Abstract base class for platform-specific mount operations."""

    @abstractmethod
    async def attempt_mount(self, uri: str) -> None:
        """Mount the share. Raises TransientMountFailure on failure."""

    @abstractmethod
    async def attempt_unmount(self, uri: str) -> None:
        """Unmount the share. Raises UnmountFailure on failure."""

    @abstractmethod
    async def query_mount(self, uri: str) -> MountRecord:
        """Report whether the share is mounted and where. Raises ResolutionFailure."""

    @abstractmethod
    def get_platform_name(self) -> str:
        """Get platform name for logging."""
