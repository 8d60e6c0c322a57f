"""macOS Network Mounter."""

import asyncio
import logging
from typing import Tuple
from urllib.parse import unquote, urlparse

import aiofiles.os

from ...core.exceptions import ResolutionFailure, TransientMountFailure, UnmountFailure
from ...models import MountRecord
from .base_mounter import BaseMounter


class MacOSMounter(BaseMounter):
    """macOS-specific mount implementation (Finder ``mount volume`` + ``diskutil``)."""

    def __init__(self, volumes_root: str = "/Volumes", command_timeout: float = 30.0):
        self._volumes_root = volumes_root.rstrip("/")
        self._command_timeout = command_timeout

    async def attempt_mount(self, uri: str) -> None:
        record = await self.query_mount(uri)
        if record.mounted:
            logging.info(f"Share already mounted: {uri} -> {record.mount_path}")
            return

        logging.info(f"Attempting macOS mount: {uri}")
        returncode, stderr = await self._run(["osascript", "-e", f'mount volume "{uri}"'], uri)
        if returncode != 0:
            raise TransientMountFailure(uri, stderr or "Unknown error")
        logging.info(f"Successfully mounted {uri}")

    async def attempt_unmount(self, uri: str) -> None:
        mount_point = self.get_mount_point_from_url(uri)
        try:
            returncode, stderr = await self._run(["diskutil", "unmount", mount_point], uri)
        except TransientMountFailure as e:
            raise UnmountFailure(uri, e.message) from e
        if returncode != 0:
            raise UnmountFailure(uri, stderr or "Unknown error")
        logging.info(f"Successfully unmounted {uri} from {mount_point}")

    async def query_mount(self, uri: str) -> MountRecord:
        mount_point = self.get_mount_point_from_url(uri)
        try:
            is_dir = await asyncio.wait_for(aiofiles.os.path.isdir(mount_point), timeout=5.0)
        except asyncio.TimeoutError as e:
            raise ResolutionFailure(uri, f"path check timed out for {mount_point}") from e
        except OSError as e:
            raise ResolutionFailure(uri, str(e)) from e

        if not is_dir:
            return MountRecord(uri=uri, mounted=False)
        return MountRecord(uri=uri, mounted=True, mount_path=mount_point)

    def get_platform_name(self) -> str:
        return "macOS"

    def get_mount_point_from_url(self, uri: str) -> str:
        """Finder mounts a share at /Volumes/<share name>."""
        parsed = urlparse(uri)
        segments = [s for s in parsed.path.split("/") if s]
        share_name = unquote(segments[0]) if segments else (parsed.hostname or "NetworkShare")
        return f"{self._volumes_root}/{share_name}"

    async def _run(self, cmd, uri: str) -> Tuple[int, str]:
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd, stdout=asyncio.subprocess.PIPE, stderr=asyncio.subprocess.PIPE
            )
        except OSError as e:
            raise TransientMountFailure(uri, str(e)) from e

        try:
            _, stderr = await asyncio.wait_for(process.communicate(), timeout=self._command_timeout)
        except asyncio.TimeoutError as e:
            logging.error(f"{cmd[0]} timed out for {uri}")
            process.kill()
            await process.wait()
            raise TransientMountFailure(uri, f"timed out after {self._command_timeout}s") from e

        return process.returncode, stderr.decode(errors="replace").strip() if stderr else ""
