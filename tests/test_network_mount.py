"""
Tests for the platform mounters, MountObserver and NetworkMountService.
"""

import asyncio
from unittest.mock import AsyncMock, Mock, patch

import pytest

from share_automount.core.exceptions import (
    ResolutionFailure,
    TransientMountFailure,
    UnmountFailure,
    UnsupportedPlatformError,
)
from share_automount.models import MountRecord
from share_automount.services.network_mount import MountObserver, NetworkMountService, PlatformFactory
from share_automount.services.network_mount.gio_mounter import (
    GioMounter,
    mount_root_from_local_path,
    parse_local_path,
)
from share_automount.services.network_mount.macos_mounter import MacOSMounter

URI = "smb://nas/media"
GVFS_ROOT = "/run/user/1000/gvfs/smb-share:server=nas,share=media"


def fake_process(returncode=0, stdout=b"", stderr=b""):
    process = Mock()
    process.returncode = returncode
    process.communicate = AsyncMock(return_value=(stdout, stderr))
    process.kill = Mock()
    process.wait = AsyncMock()
    return process


class TestGioParsing:
    def test_parse_local_path(self):
        output = f"display name: media on nas\nlocal path: {GVFS_ROOT}/sub\nuri: {URI}\n"
        assert parse_local_path(output) == f"{GVFS_ROOT}/sub"

    def test_parse_local_path_missing(self):
        assert parse_local_path("display name: media\n") is None

    def test_mount_root(self):
        assert mount_root_from_local_path(f"{GVFS_ROOT}/sub/dir") == GVFS_ROOT
        assert mount_root_from_local_path("/media/usb") == "/media/usb"


class TestGioMounter:
    @pytest.mark.asyncio
    async def test_query_mounted(self):
        process = fake_process(stdout=f"local path: {GVFS_ROOT}/sub\n".encode())
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)) as create:
            record = await GioMounter().query_mount(URI)

        assert create.await_args.args == ("gio", "info", URI)
        assert record == MountRecord(uri=URI, mounted=True, mount_path=GVFS_ROOT)

    @pytest.mark.asyncio
    async def test_query_not_mounted(self):
        process = fake_process(returncode=2, stderr=b"gio: smb://nas/media: The specified location is not mounted")
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
            record = await GioMounter().query_mount(URI)

        assert record.mounted is False

    @pytest.mark.asyncio
    async def test_query_unexpected_error(self):
        process = fake_process(returncode=1, stderr=b"gio: Permission denied")
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
            with pytest.raises(ResolutionFailure):
                await GioMounter().query_mount(URI)

    @pytest.mark.asyncio
    async def test_mount_success(self):
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=fake_process())) as create:
            await GioMounter().attempt_mount(URI)

        assert create.await_args.args == ("gio", "mount", URI)

    @pytest.mark.asyncio
    async def test_mount_already_mounted_is_success(self):
        process = fake_process(returncode=2, stderr=b"gio: Location is already mounted")
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
            await GioMounter().attempt_mount(URI)

    @pytest.mark.asyncio
    async def test_mount_failure(self):
        process = fake_process(returncode=2, stderr=b"gio: Failed to mount Windows share: Connection refused")
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
            with pytest.raises(TransientMountFailure) as exc_info:
                await GioMounter().attempt_mount(URI)

        assert "Connection refused" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_gio_missing(self):
        with patch("asyncio.create_subprocess_exec", AsyncMock(side_effect=FileNotFoundError())):
            with pytest.raises(TransientMountFailure):
                await GioMounter().attempt_mount(URI)

    @pytest.mark.asyncio
    async def test_mount_timeout_kills_process(self):
        process = fake_process()
        process.communicate = AsyncMock(side_effect=asyncio.TimeoutError())
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
            with pytest.raises(TransientMountFailure):
                await GioMounter(command_timeout=1).attempt_mount(URI)

        process.kill.assert_called_once()

    @pytest.mark.asyncio
    async def test_unmount_failure(self):
        process = fake_process(returncode=1, stderr=b"gio: Device or resource busy")
        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)) as create:
            with pytest.raises(UnmountFailure):
                await GioMounter().attempt_unmount(URI)

        assert create.await_args.args == ("gio", "mount", "-u", URI)


class TestMacOSMounter:
    def test_mount_point_from_url(self):
        mounter = MacOSMounter()
        assert mounter.get_mount_point_from_url("smb://nas/Media%20Share/sub") == "/Volumes/Media Share"
        assert mounter.get_mount_point_from_url("afp://nas") == "/Volumes/nas"

    @pytest.mark.asyncio
    async def test_query_uses_volume_directory(self, tmp_path):
        mounter = MacOSMounter(volumes_root=str(tmp_path))
        assert (await mounter.query_mount(URI)).mounted is False

        (tmp_path / "media").mkdir()
        record = await mounter.query_mount(URI)

        assert record.mounted is True
        assert record.mount_path == str(tmp_path / "media")


class TestPlatformFactory:
    @pytest.mark.parametrize("system,expected", [("Linux", "linux"), ("Darwin", "macos")])
    def test_detect(self, system, expected):
        with patch("platform.system", return_value=system):
            assert PlatformFactory().detect_platform() == expected

    def test_unsupported(self):
        with patch("platform.system", return_value="Windows"):
            with pytest.raises(UnsupportedPlatformError):
                PlatformFactory().create_mounter()


class TestMountObserver:
    @pytest.mark.asyncio
    async def test_resolution_failure_reads_as_unmounted(self):
        mounter = Mock()
        mounter.query_mount = AsyncMock(side_effect=ResolutionFailure(URI, "boom"))

        record = await MountObserver(mounter).observe(URI)

        assert record.mounted is False

    @pytest.mark.asyncio
    async def test_slow_query_times_out(self):
        async def slow_query(uri):
            await asyncio.sleep(1)

        mounter = Mock()
        mounter.query_mount = slow_query

        assert await MountObserver(mounter, timeout=0.01).is_mounted(URI) is False

    @pytest.mark.asyncio
    async def test_no_mounter(self):
        assert await MountObserver(None).resolve_mount_path(URI) is None

    @pytest.mark.asyncio
    async def test_resolve_mount_path(self, fake_mounter):
        path = fake_mounter.mount_externally(URI)
        assert await MountObserver(fake_mounter).resolve_mount_path(URI) == path


class TestNetworkMountService:
    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_transient_failure(self, settings):
        mounter = Mock()
        mounter.attempt_mount = AsyncMock(side_effect=RuntimeError("socket closed"))

        with pytest.raises(TransientMountFailure) as exc_info:
            await NetworkMountService(settings, mounter=mounter).mount(URI)

        assert exc_info.value.message == "socket closed"

    @pytest.mark.asyncio
    async def test_mount_timeout(self, settings):
        settings.mount_timeout_seconds = 0.01

        async def hang(uri):
            await asyncio.sleep(1)

        mounter = Mock()
        mounter.attempt_mount = hang

        with pytest.raises(TransientMountFailure) as exc_info:
            await NetworkMountService(settings, mounter=mounter).mount(URI)

        assert "timed out" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_unmount_error_is_typed(self, settings):
        mounter = Mock()
        mounter.attempt_unmount = AsyncMock(side_effect=OSError("busy"))

        with pytest.raises(UnmountFailure):
            await NetworkMountService(settings, mounter=mounter).unmount(URI)

    @pytest.mark.asyncio
    async def test_without_mounter(self, settings):
        with patch.object(PlatformFactory, "create_mounter", side_effect=UnsupportedPlatformError("nope")):
            service = NetworkMountService(settings)

        assert service.mounter is None
        assert service.get_platform_info()["mounter_available"] is False
        with pytest.raises(TransientMountFailure):
            await service.mount(URI)
