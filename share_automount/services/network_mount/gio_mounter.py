"""GVFS Network Mounter - drives the ``gio`` command line tool."""

import asyncio
import logging
from pathlib import PurePosixPath
from typing import List, Optional, Tuple

from ...core.exceptions import ResolutionFailure, TransientMountFailure, UnmountFailure
from ...models import MountRecord
from .base_mounter import BaseMounter

NOT_MOUNTED_MARKERS = ("not mounted", "no such file", "operation not supported")
LOCAL_PATH_PREFIX = "local path:"


def mount_root_from_local_path(local_path: str) -> str:
    """Reduce ``/run/user/1000/gvfs/smb-share:server=x,share=y/sub`` to the GVFS mount root."""
    parts = PurePosixPath(local_path).parts
    if "gvfs" in parts:
        index = parts.index("gvfs")
        if len(parts) > index + 1:
            return str(PurePosixPath(*parts[: index + 2]))
    return local_path


def parse_local_path(info_output: str) -> Optional[str]:
    for line in info_output.splitlines():
        stripped = line.strip()
        if stripped.startswith(LOCAL_PATH_PREFIX):
            value = stripped[len(LOCAL_PATH_PREFIX):].strip()
            return value or None
    return None


class GioMounter(BaseMounter):
    """Linux mount implementation on top of GVFS (``gio mount`` / ``gio info``)."""

    def __init__(self, command_timeout: float = 60.0, info_timeout: float = 10.0):
        self._command_timeout = command_timeout
        self._info_timeout = info_timeout

    async def attempt_mount(self, uri: str) -> None:
        logging.info(f"Attempting GVFS mount: {uri}")
        returncode, _, stderr = await self._run(["gio", "mount", uri], self._command_timeout, uri)

        if returncode == 0:
            logging.info(f"Successfully mounted {uri}")
            return

        error_msg = stderr or "Unknown error"
        if "already mounted" in error_msg.lower():
            logging.info(f"Share already mounted: {uri}")
            return
        raise TransientMountFailure(uri, error_msg)

    async def attempt_unmount(self, uri: str) -> None:
        logging.info(f"Attempting GVFS unmount: {uri}")
        try:
            returncode, _, stderr = await self._run(
                ["gio", "mount", "-u", uri], self._command_timeout, uri
            )
        except TransientMountFailure as e:
            raise UnmountFailure(uri, e.message) from e

        if returncode != 0:
            raise UnmountFailure(uri, stderr or "Unknown error")
        logging.info(f"Successfully unmounted {uri}")

    async def query_mount(self, uri: str) -> MountRecord:
        try:
            returncode, stdout, stderr = await self._run(["gio", "info", uri], self._info_timeout, uri)
        except TransientMountFailure as e:
            raise ResolutionFailure(uri, e.message) from e

        if returncode != 0:
            if any(marker in stderr.lower() for marker in NOT_MOUNTED_MARKERS):
                return MountRecord(uri=uri, mounted=False)
            raise ResolutionFailure(uri, stderr or f"gio info exited with {returncode}")

        local_path = parse_local_path(stdout)
        mount_path = mount_root_from_local_path(local_path) if local_path else None
        return MountRecord(uri=uri, mounted=True, mount_path=mount_path)

    def get_platform_name(self) -> str:
        return "Linux (GVFS)"

    async def _run(self, cmd: List[str], timeout: float, uri: str) -> Tuple[int, str, str]:
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise TransientMountFailure(uri, "gio command not found - is GVFS installed?") from e
        except OSError as e:
            raise TransientMountFailure(uri, str(e)) from e

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except asyncio.TimeoutError as e:
            logging.error(f"{' '.join(cmd[:3])} timed out after {timeout}s for {uri}")
            process.kill()
            await process.wait()
            raise TransientMountFailure(uri, f"timed out after {timeout}s") from e

        return (
            process.returncode,
            stdout.decode(errors="replace") if stdout else "",
            stderr.decode(errors="replace").strip() if stderr else "",
        )
