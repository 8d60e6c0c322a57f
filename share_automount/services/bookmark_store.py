import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlparse

import aiofiles
import aiofiles.os
from pydantic import ValidationError

from ..core.exceptions import ConfigParseFailure
from ..models import Bookmark, BookmarkSettings

LOCAL_FILE_SCHEME = "file://"
SCHEME_SEPARATOR = "://"
BOOKMARK_SETTINGS_KEY = "bookmark-settings"

PersistedSettings = Dict[str, BookmarkSettings]


def extract_name_from_uri(uri: str) -> str:
    """Display name for a bookmark without one: host plus path, or just the host."""
    try:
        parsed = urlparse(uri)
    except ValueError:
        return uri
    host = parsed.hostname or "unknown"
    path = parsed.path or ""
    return f"{host}{path}" if len(path) > 1 else host


def parse_bookmark_line(line: str) -> Optional[Bookmark]:
    """Parse ``<uri> [<display name>]``. Returns None for local or malformed lines."""
    stripped = line.strip()
    if not stripped or SCHEME_SEPARATOR not in stripped:
        return None
    if stripped.startswith(LOCAL_FILE_SCHEME):
        return None

    uri, _, name = stripped.partition(" ")
    if SCHEME_SEPARATOR not in uri:
        return None
    return Bookmark(uri=uri, name=name.strip() or extract_name_from_uri(uri))


class BookmarkStore:
    """
    Owns the canonical bookmark list sources.

    Bookmarks come from a GTK style bookmarks file (one ``<uri> [name]`` per
    line). User configuration lives in a JSON key-value file holding a single
    ``bookmark-settings`` key whose value is a JSON object keyed by URI.
    """

    def __init__(self, bookmarks_path: Path, settings_path: Path):
        self._bookmarks_path = Path(bookmarks_path)
        self._settings_path = Path(settings_path)

    @property
    def bookmarks_path(self) -> Path:
        return self._bookmarks_path

    @property
    def settings_path(self) -> Path:
        return self._settings_path

    def update_paths(self, bookmarks_path: Path, settings_path: Path) -> None:
        self._bookmarks_path = Path(bookmarks_path)
        self._settings_path = Path(settings_path)

    async def load(self) -> List[Bookmark]:
        """Read remote bookmarks with default settings. A missing file yields no bookmarks."""
        if not await aiofiles.os.path.exists(self._bookmarks_path):
            logging.info(f"No bookmarks file at {self._bookmarks_path}")
            return []

        try:
            async with aiofiles.open(self._bookmarks_path, "r", encoding="utf-8") as f:
                contents = await f.read()
        except (OSError, UnicodeDecodeError) as e:
            logging.error(f"Error loading bookmarks from {self._bookmarks_path}: {e}")
            return []

        bookmarks: List[Bookmark] = []
        seen = set()
        for line in contents.splitlines():
            bookmark = parse_bookmark_line(line)
            if bookmark is None:
                continue
            if bookmark.uri in seen:
                logging.debug(f"Ignoring duplicate bookmark: {bookmark.uri}")
                continue
            seen.add(bookmark.uri)
            bookmarks.append(bookmark)

        logging.debug(f"Loaded {len(bookmarks)} network bookmarks from {self._bookmarks_path}")
        return bookmarks

    def parse_persisted(self, raw: str) -> PersistedSettings:
        """Decode the ``bookmark-settings`` value. Raises ConfigParseFailure on bad JSON."""
        if not raw or not raw.strip():
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigParseFailure(str(self._settings_path), str(e)) from e
        if not isinstance(data, dict):
            raise ConfigParseFailure(
                str(self._settings_path), f"expected an object keyed by URI, got {type(data).__name__}"
            )

        persisted: PersistedSettings = {}
        for uri, entry in data.items():
            if not isinstance(entry, dict):
                logging.warning(f"Ignoring non-object settings entry for {uri}")
                continue
            try:
                persisted[uri] = BookmarkSettings.model_validate(entry)
            except ValidationError as e:
                logging.warning(f"Ignoring invalid settings entry for {uri}: {e}")
        return persisted

    async def load_persisted(self) -> Tuple[PersistedSettings, Optional[ConfigParseFailure]]:
        """
        Read persisted settings. Never raises: a malformed store yields empty
        settings plus the diagnostic so the caller can report it.
        """
        try:
            raw = await self._read_settings_key()
            return self.parse_persisted(raw), None
        except ConfigParseFailure as e:
            logging.warning(f"{e} - falling back to defaults")
            return {}, e

    def apply_persisted_settings(
        self, bookmarks: List[Bookmark], persisted: PersistedSettings
    ) -> List[Bookmark]:
        """Overlay user configuration by URI. Fail tracking fields are left alone."""
        for bookmark in bookmarks:
            entry = persisted.get(bookmark.uri)
            if entry is None:
                continue
            bookmark.enabled = entry.enabled
            bookmark.create_symlink = entry.create_symlink
            bookmark.symlink_path = entry.symlink_path
        return bookmarks

    def save(self, bookmarks: List[Bookmark]) -> Dict[str, dict]:
        """Project user-configurable fields only, keyed by URI, in persisted (camelCase) form."""
        return {
            bookmark.uri: BookmarkSettings(
                enabled=bookmark.enabled,
                create_symlink=bookmark.create_symlink,
                symlink_path=bookmark.symlink_path,
            ).model_dump(by_alias=True)
            for bookmark in bookmarks
        }

    async def persist(self, bookmarks: List[Bookmark]) -> bool:
        """Write ``save(bookmarks)`` into the settings store, keeping any other keys."""
        try:
            store = await self._read_store()
        except ConfigParseFailure as e:
            logging.warning(f"{e} - rewriting settings store")
            store = {}

        store[BOOKMARK_SETTINGS_KEY] = json.dumps(self.save(bookmarks))
        try:
            await aiofiles.os.makedirs(self._settings_path.parent, exist_ok=True)
            async with aiofiles.open(self._settings_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(store, indent=2))
            logging.debug(f"Saved settings for {len(bookmarks)} bookmarks to {self._settings_path}")
            return True
        except OSError as e:
            logging.error(f"Error saving bookmark settings to {self._settings_path}: {e}")
            return False

    async def _read_settings_key(self) -> str:
        value = (await self._read_store()).get(BOOKMARK_SETTINGS_KEY, "")
        if isinstance(value, dict):
            # Tolerate a hand-edited store with the object inlined
            return json.dumps(value)
        if not isinstance(value, str):
            raise ConfigParseFailure(str(self._settings_path), f"{BOOKMARK_SETTINGS_KEY} must be a string")
        return value

    async def _read_store(self) -> dict:
        if not await aiofiles.os.path.exists(self._settings_path):
            return {}
        try:
            async with aiofiles.open(self._settings_path, "r", encoding="utf-8") as f:
                raw = await f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigParseFailure(str(self._settings_path), str(e)) from e

        if not raw.strip():
            return {}
        try:
            store = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ConfigParseFailure(str(self._settings_path), str(e)) from e
        if not isinstance(store, dict):
            raise ConfigParseFailure(str(self._settings_path), "settings store must be a JSON object")
        return store
