"""
Tests for bookmark file parsing and the persisted settings store.
"""

import json

import pytest

from share_automount.core.exceptions import ConfigParseFailure
from share_automount.models import Bookmark
from share_automount.services.bookmark_store import (
    BOOKMARK_SETTINGS_KEY,
    BookmarkStore,
    extract_name_from_uri,
    parse_bookmark_line,
)


@pytest.fixture
def store(tmp_path):
    return BookmarkStore(tmp_path / "bookmarks", tmp_path / "settings.json")


class TestParsing:
    def test_line_with_display_name(self):
        bookmark = parse_bookmark_line("smb://nas.local/media My Media")
        assert bookmark.uri == "smb://nas.local/media"
        assert bookmark.name == "My Media"
        assert bookmark.enabled is True
        assert bookmark.create_symlink is False

    def test_name_derived_from_uri(self):
        assert parse_bookmark_line("sftp://host/srv/data").name == "host/srv/data"
        assert extract_name_from_uri("smb://server/") == "server"
        assert extract_name_from_uri("smb://server") == "server"

    @pytest.mark.parametrize(
        "line",
        ["", "   ", "file:///home/me/Documents Docs", "not a uri at all"],
    )
    def test_ignored_lines(self, line):
        assert parse_bookmark_line(line) is None

    @pytest.mark.asyncio
    async def test_load_skips_local_and_duplicate_entries(self, store):
        store.bookmarks_path.write_text(
            "file:///home/me/Music\n"
            "smb://nas.local/media Media\n"
            "\n"
            "smb://nas.local/media Media again\n"
            "ftp://files.example.com\n"
        )

        bookmarks = await store.load()

        assert [b.uri for b in bookmarks] == ["smb://nas.local/media", "ftp://files.example.com"]
        assert bookmarks[0].name == "Media"

    @pytest.mark.asyncio
    async def test_missing_bookmarks_file(self, store):
        assert await store.load() == []


class TestPersistedSettings:
    def test_parse_fills_defaults(self, store):
        persisted = store.parse_persisted(
            json.dumps({"smb://a/x": {"createSymlink": True}, "smb://b/y": {"enabled": False, "symlinkPath": None}})
        )

        assert persisted["smb://a/x"].enabled is True
        assert persisted["smb://a/x"].create_symlink is True
        assert persisted["smb://b/y"].enabled is False
        assert persisted["smb://b/y"].symlink_path == ""

    def test_parse_rejects_malformed_json(self, store):
        with pytest.raises(ConfigParseFailure):
            store.parse_persisted("{not json")

    def test_parse_rejects_non_object(self, store):
        with pytest.raises(ConfigParseFailure):
            store.parse_persisted("[1, 2]")

    def test_invalid_entry_is_skipped(self, store):
        persisted = store.parse_persisted(json.dumps({"smb://a/x": "yes", "smb://b/y": {"enabled": True}}))
        assert list(persisted) == ["smb://b/y"]

    def test_save_projects_user_fields_only(self, store):
        bookmark = Bookmark(
            uri="smb://a/x", name="X", enabled=False, create_symlink=True, symlink_path="Films", fail_count=3
        )

        saved = store.save([bookmark])

        assert saved == {"smb://a/x": {"enabled": False, "createSymlink": True, "symlinkPath": "Films"}}

    @pytest.mark.asyncio
    async def test_persist_then_load_keeps_other_keys(self, store):
        store.settings_path.write_text(json.dumps({"check-interval": 10}))
        bookmarks = [Bookmark(uri="smb://a/x", name="X", create_symlink=True)]

        assert await store.persist(bookmarks) is True

        raw = json.loads(store.settings_path.read_text())
        assert raw["check-interval"] == 10
        assert isinstance(raw[BOOKMARK_SETTINGS_KEY], str)

        persisted, diagnostic = await store.load_persisted()
        assert diagnostic is None
        assert persisted["smb://a/x"].create_symlink is True

    @pytest.mark.asyncio
    async def test_malformed_store_falls_back_to_defaults(self, store):
        store.settings_path.write_text(json.dumps({BOOKMARK_SETTINGS_KEY: "{broken"}))

        persisted, diagnostic = await store.load_persisted()

        assert persisted == {}
        assert isinstance(diagnostic, ConfigParseFailure)

    @pytest.mark.asyncio
    async def test_apply_leaves_fail_tracking_alone(self, store):
        store.settings_path.write_text(
            json.dumps({BOOKMARK_SETTINGS_KEY: json.dumps({"smb://a/x": {"enabled": False}})})
        )
        bookmarks = [Bookmark(uri="smb://a/x", name="X", fail_count=2), Bookmark(uri="smb://b/y", name="Y")]

        persisted, _ = await store.load_persisted()
        store.apply_persisted_settings(bookmarks, persisted)

        assert bookmarks[0].enabled is False
        assert bookmarks[0].fail_count == 2
        assert bookmarks[1].enabled is True
