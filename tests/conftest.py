"""
Pytest configuration and shared fixtures.
"""

import asyncio
import re
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from share_automount.config import Settings
from share_automount.core.exceptions import TransientMountFailure, UnmountFailure
from share_automount.dependencies import reset_singletons
from share_automount.models import MountRecord
from share_automount.services.network_mount.base_mounter import BaseMounter


class FakeMounter(BaseMounter):
    """In-memory mounter: mount points are real directories under ``mount_root``."""

    def __init__(self, mount_root: Path):
        self.mount_root = Path(mount_root)
        self.mounted: Dict[str, str] = {}
        self.failures: Dict[str, int] = {}
        self.mount_calls: List[str] = []
        self.unmount_calls: List[str] = []
        self.unmount_error: Optional[str] = None
        self.mount_delay = 0.0
        self.query_delay = 0.0

    def fail(self, uri: str, times: int = -1) -> None:
        """Make the next ``times`` mounts of ``uri`` fail; -1 fails forever."""
        self.failures[uri] = times

    def mount_externally(self, uri: str) -> str:
        path = self.mount_root / re.sub(r"[^A-Za-z0-9]+", "_", uri)
        path.mkdir(parents=True, exist_ok=True)
        self.mounted[uri] = str(path)
        return str(path)

    async def attempt_mount(self, uri: str) -> None:
        self.mount_calls.append(uri)
        if self.mount_delay:
            await asyncio.sleep(self.mount_delay)

        remaining = self.failures.get(uri, 0)
        if remaining:
            if remaining > 0:
                self.failures[uri] = remaining - 1
            raise TransientMountFailure(uri, "Connection refused")
        self.mount_externally(uri)

    async def attempt_unmount(self, uri: str) -> None:
        self.unmount_calls.append(uri)
        if self.unmount_error:
            raise UnmountFailure(uri, self.unmount_error)
        self.mounted.pop(uri, None)

    async def query_mount(self, uri: str) -> MountRecord:
        if self.query_delay:
            await asyncio.sleep(self.query_delay)
        path = self.mounted.get(uri)
        return MountRecord(uri=uri, mounted=path is not None, mount_path=path)

    def get_platform_name(self) -> str:
        return "Fake"


@pytest.fixture(autouse=True)
def clean_singletons():
    """Automatically reset singletons before each test."""
    reset_singletons()
    yield
    reset_singletons()


@pytest.fixture
def settings(tmp_path):
    """Settings pointing every path into tmp_path, with all delays at zero."""
    return Settings(
        bookmarks_file=str(tmp_path / "bookmarks"),
        bookmark_settings_file=str(tmp_path / "config" / "settings.json"),
        custom_mount_base=str(tmp_path / "links"),
        check_interval=5,
        retry_attempts=3,
        retry_delay=0,
        startup_delay_seconds=0,
        startup_settle_seconds=0,
        symlink_grace_seconds=0,
        mount_timeout_seconds=5,
        show_notifications=True,
        show_success_notifications=True,
        show_error_notifications=True,
        log_file_path=str(tmp_path / "logs" / "test.log"),
    )


@pytest.fixture
def fake_mounter(tmp_path):
    return FakeMounter(tmp_path / "mounts")
