"""Mount Observer - live, side-effect-free queries of OS mount state."""

import asyncio
import logging
from typing import Optional

from ...core.exceptions import ResolutionFailure
from ...models import MountRecord
from .base_mounter import BaseMounter


class MountObserver:
    """
    Answers "is this URI mounted, and where" straight from the OS.

    Results are never cached: other processes mount and unmount shares behind
    our back. Any resolution problem fails closed to "not mounted".
    """

    def __init__(self, mounter: Optional[BaseMounter], timeout: float = 10.0):
        self._mounter = mounter
        self._timeout = timeout

    async def observe(self, uri: str) -> MountRecord:
        if not self._mounter:
            return MountRecord(uri=uri, mounted=False)

        try:
            return await asyncio.wait_for(self._mounter.query_mount(uri), timeout=self._timeout)
        except ResolutionFailure as e:
            logging.warning(f"{e} - treating as unmounted")
        except asyncio.TimeoutError:
            logging.warning(f"Mount query timed out for {uri} - treating as unmounted")
        except Exception as e:
            logging.error(f"Unexpected error querying mount state for {uri}: {e}")
        return MountRecord(uri=uri, mounted=False)

    async def is_mounted(self, uri: str) -> bool:
        return (await self.observe(uri)).mounted

    async def resolve_mount_path(self, uri: str) -> Optional[str]:
        record = await self.observe(uri)
        return record.mount_path if record.mounted else None
