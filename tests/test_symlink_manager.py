"""
Tests for SymlinkManager and filename sanitizing.
"""

import os

import pytest

from share_automount.models import Bookmark
from share_automount.services.symlink_manager import SymlinkManager, desired_path, sanitize_for_filename


@pytest.fixture
def manager(tmp_path):
    return SymlinkManager(tmp_path / "links")


@pytest.fixture
def target(tmp_path):
    path = tmp_path / "gvfs" / "smb-share:server=nas,share=media"
    path.mkdir(parents=True)
    return str(path)


def linked_bookmark(**kwargs):
    values = {"uri": "smb://nas/media", "name": "Media", "create_symlink": True}
    values.update(kwargs)
    return Bookmark(**values)


class TestSanitize:
    def test_display_name(self):
        assert sanitize_for_filename("My Share: /data") == "My_Share_data"

    def test_collapses_and_strips_underscores(self):
        assert sanitize_for_filename('  a<>b  "c"  ') == "a_b_c"

    def test_result_never_contains_separators(self):
        for name in ["a/b\\c", "x:y|z?*", "tab\tand\nnewline"]:
            cleaned = sanitize_for_filename(name)
            assert "/" not in cleaned and "\\" not in cleaned
            assert not any(ch.isspace() for ch in cleaned)

    def test_override_wins_and_is_sanitized(self, tmp_path):
        bookmark = linked_bookmark(symlink_path="My Films")
        assert desired_path(bookmark, tmp_path) == tmp_path / "My_Films"

    def test_empty_leaf_falls_back(self, tmp_path):
        bookmark = linked_bookmark(name="///", uri="smb://nas/media")
        assert desired_path(bookmark, tmp_path) == tmp_path / "smb_nas_media"


class TestEnsure:
    @pytest.mark.asyncio
    async def test_creates_link(self, manager, target):
        bookmark = linked_bookmark()

        assert await manager.ensure(bookmark, target) is True

        link = manager.base_dir / "Media"
        assert link.is_symlink()
        assert os.readlink(link) == target
        assert manager.tracked_path(bookmark.uri) == str(link)

    @pytest.mark.asyncio
    async def test_idempotent(self, manager, target):
        bookmark = linked_bookmark()
        await manager.ensure(bookmark, target)
        first = os.lstat(manager.base_dir / "Media")

        assert await manager.ensure(bookmark, target) is True
        assert os.lstat(manager.base_dir / "Media").st_ino == first.st_ino

    @pytest.mark.asyncio
    async def test_repoints_stale_link(self, manager, target, tmp_path):
        bookmark = linked_bookmark()
        manager.base_dir.mkdir(parents=True)
        os.symlink(str(tmp_path / "old-mount"), manager.base_dir / "Media")

        assert await manager.ensure(bookmark, target) is True
        assert os.readlink(manager.base_dir / "Media") == target

    @pytest.mark.asyncio
    async def test_never_replaces_real_directory(self, manager, target):
        bookmark = linked_bookmark()
        occupied = manager.base_dir / "Media"
        occupied.mkdir(parents=True)
        (occupied / "keep.txt").write_text("data")

        assert await manager.ensure(bookmark, target) is False
        assert (occupied / "keep.txt").read_text() == "data"
        assert not occupied.is_symlink()

    @pytest.mark.asyncio
    async def test_disabled_is_noop(self, manager, target):
        assert await manager.ensure(linked_bookmark(create_symlink=False), target) is True
        assert not manager.base_dir.exists()

    @pytest.mark.asyncio
    async def test_missing_mount_path(self, manager):
        assert await manager.ensure(linked_bookmark(), None) is False

    @pytest.mark.asyncio
    async def test_rename_removes_previous_link(self, manager, target):
        bookmark = linked_bookmark()
        await manager.ensure(bookmark, target)

        bookmark.symlink_path = "Films"
        await manager.ensure(bookmark, target)

        assert not (manager.base_dir / "Media").is_symlink()
        assert (manager.base_dir / "Films").is_symlink()


class TestRemove:
    @pytest.mark.asyncio
    async def test_remove_deletes_link_but_not_target(self, manager, target):
        bookmark = linked_bookmark()
        await manager.ensure(bookmark, target)

        assert await manager.remove(bookmark) is True

        assert not (manager.base_dir / "Media").is_symlink()
        assert os.path.isdir(target)
        assert manager.tracked_path(bookmark.uri) is None

    @pytest.mark.asyncio
    async def test_remove_leaves_real_files(self, manager):
        occupied = manager.base_dir / "Media"
        occupied.mkdir(parents=True)

        assert await manager.remove(linked_bookmark()) is False
        assert occupied.is_dir()

    @pytest.mark.asyncio
    async def test_remove_all_includes_orphans(self, manager, target):
        kept = linked_bookmark()
        orphan = linked_bookmark(uri="smb://nas/old", name="Old")
        await manager.ensure(kept, target)
        await manager.ensure(orphan, target)

        removed = await manager.remove_all([kept])

        assert removed == 2
        assert list(manager.base_dir.iterdir()) == []
        assert manager.tracked_uris() == []

    @pytest.mark.asyncio
    async def test_remove_tracked_by_uri(self, manager, target):
        bookmark = linked_bookmark()
        await manager.ensure(bookmark, target)

        assert await manager.remove_tracked(bookmark.uri) is True
        assert await manager.remove_tracked(bookmark.uri) is False
        assert not (manager.base_dir / "Media").is_symlink()
