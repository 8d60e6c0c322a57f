import logging
import re
from pathlib import Path
from typing import Dict, Iterable, Optional

import aiofiles.os

from ..core.exceptions import SymlinkConflict
from ..models import Bookmark

_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*]')
_WHITESPACE = re.compile(r"\s+")
_REPEATED_UNDERSCORE = re.compile(r"_+")


def sanitize_for_filename(name: str) -> str:
    """Replace path-hostile characters and whitespace runs with single underscores."""
    cleaned = _UNSAFE_CHARS.sub("_", name)
    cleaned = _WHITESPACE.sub("_", cleaned)
    cleaned = _REPEATED_UNDERSCORE.sub("_", cleaned)
    return cleaned.strip("_")


def desired_path(bookmark: Bookmark, base_dir: Path) -> Path:
    """``base_dir/leaf`` where leaf is the symlink override or the sanitized display name."""
    leaf = sanitize_for_filename(bookmark.symlink_path) if bookmark.symlink_path else ""
    if not leaf:
        leaf = sanitize_for_filename(bookmark.name)
    if not leaf:
        # Name made only of separators; never let the link collapse onto base_dir
        leaf = sanitize_for_filename(bookmark.uri) or "share"
    return Path(base_dir) / leaf


class SymlinkManager:
    """
    Maintains stable symlinks under a base directory pointing at live mount paths.

    Tracks the links it created per URI so they can be removed on unmount or
    shutdown. The record is a hint only: the filesystem is inspected before
    anything is created or deleted, and only symlinks are ever deleted.
    """

    def __init__(self, base_dir: Path):
        self._base_dir = Path(base_dir)
        self._records: Dict[str, str] = {}

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    @base_dir.setter
    def base_dir(self, value: Path) -> None:
        self._base_dir = Path(value)

    def desired_path(self, bookmark: Bookmark) -> Path:
        return desired_path(bookmark, self._base_dir)

    def tracked_path(self, uri: str) -> Optional[str]:
        return self._records.get(uri)

    def tracked_uris(self) -> list:
        return list(self._records)

    async def ensure(self, bookmark: Bookmark, real_mount_path: Optional[str]) -> bool:
        """Create or repair the bookmark's symlink. No-op success when symlinks are off."""
        if not bookmark.create_symlink:
            return True

        if not real_mount_path:
            logging.error(f"Could not get mount path for {bookmark.name} - symlink not created")
            return False

        link_path = self.desired_path(bookmark)
        try:
            await aiofiles.os.makedirs(link_path.parent, exist_ok=True)
        except OSError as e:
            logging.error(f"Failed to create symlink directory {link_path.parent}: {e}")
            return False

        # Link name changed since we last created one
        previous = self._records.get(bookmark.uri)
        if previous and previous != str(link_path):
            await self._unlink_if_symlink(Path(previous))

        try:
            if await self._points_at(link_path, real_mount_path):
                self._records[bookmark.uri] = str(link_path)
                return True
            await self._clear_existing(link_path)
            await aiofiles.os.symlink(real_mount_path, link_path)
        except SymlinkConflict as e:
            logging.warning(str(e), extra={"operation": "symlink_conflict", "uri": bookmark.uri})
            return False
        except OSError as e:
            logging.error(f"Failed to create symlink for {bookmark.name}: {e}")
            return False

        self._records[bookmark.uri] = str(link_path)
        logging.info(f"Created symlink: {link_path} -> {real_mount_path}")
        return True

    async def remove(self, bookmark: Bookmark) -> bool:
        """Delete the bookmark's symlink if one exists. The record is always cleared."""
        link_path = Path(self._records.get(bookmark.uri) or self.desired_path(bookmark))
        try:
            return await self._unlink_if_symlink(link_path)
        finally:
            self._records.pop(bookmark.uri, None)

    async def remove_all(self, bookmarks: Iterable[Bookmark]) -> int:
        """Remove links for every symlink-enabled bookmark and every tracked record."""
        removed = 0
        handled = set()
        for bookmark in bookmarks:
            if not bookmark.create_symlink and bookmark.uri not in self._records:
                continue
            handled.add(bookmark.uri)
            try:
                if await self.remove(bookmark):
                    removed += 1
            except Exception as e:
                logging.error(f"Error removing symlink for {bookmark.name}: {e}")

        # Links for bookmarks that vanished from the bookmarks file
        for uri in self.tracked_uris():
            if uri in handled:
                continue
            try:
                if await self.remove_tracked(uri):
                    removed += 1
            except Exception as e:
                logging.error(f"Error removing orphaned symlink for {uri}: {e}")

        return removed

    async def remove_tracked(self, uri: str) -> bool:
        """Delete the link recorded for ``uri``, for bookmarks that no longer exist."""
        path = self._records.pop(uri, None)
        if path is None:
            return False
        return await self._unlink_if_symlink(Path(path))

    async def _points_at(self, link_path: Path, target: str) -> bool:
        if not await aiofiles.os.path.islink(link_path):
            return False
        try:
            return await aiofiles.os.readlink(link_path) == target
        except OSError:
            return False

    async def _clear_existing(self, link_path: Path) -> None:
        if await aiofiles.os.path.islink(link_path):
            await aiofiles.os.unlink(link_path)
            return
        if await aiofiles.os.path.exists(link_path):
            raise SymlinkConflict(str(link_path))

    async def _unlink_if_symlink(self, link_path: Path) -> bool:
        try:
            if not await aiofiles.os.path.islink(link_path):
                return False
            await aiofiles.os.unlink(link_path)
        except FileNotFoundError:
            return False
        except OSError as e:
            logging.error(f"Error removing symlink {link_path}: {e}")
            return False
        logging.info(f"Removed symlink: {link_path}")
        return True
