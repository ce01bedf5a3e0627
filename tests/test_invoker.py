"""
Tests for the subprocess invoker, the driver env and the os backed filesystem.
"""

import logging
import os
import sys

import pytest

from errors import CommandError
from errors import CommandTimeoutError
from filesystem import DirEntry
from filesystem import Filesystem
from invoker import DriverEnv
from invoker import Invoker

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="uses posix utilities")


class TestDriverEnv:
    def test_without_deadline(self, env):
        assert env.remaining() is None

    def test_with_deadline(self, env):
        derived = env.with_deadline(5)

        assert derived is not env
        assert derived.logger is env.logger
        assert 4 < derived.remaining() <= 5

    def test_keeps_earlier_deadline(self, env):
        derived = env.with_deadline(1).with_deadline(60)

        assert derived.remaining() <= 1

    def test_session_tags_records(self, env, caplog):
        with caplog.at_level(logging.INFO, logger=env.logger.name):
            env.session("smb-mount").info("start", extra={"given_target": "/mnt/x"})

        record = caplog.records[-1]
        assert record.session == "smb-mount"
        assert record.given_target == "/mnt/x"


@posix_only
class TestInvoker:
    @pytest.mark.asyncio
    async def test_returns_output(self, env):
        output = await Invoker().invoke(env, "sh", ["-c", "echo mounted"])

        assert output.strip() == b"mounted"

    @pytest.mark.asyncio
    async def test_non_zero_exit(self, env):
        with pytest.raises(CommandError) as exc_info:
            await Invoker().invoke(env, "sh", ["-c", "echo not mounted >&2; exit 32"])

        assert exc_info.value.returncode == 32
        assert b"not mounted" in exc_info.value.output

    @pytest.mark.asyncio
    async def test_missing_program(self, env):
        with pytest.raises(CommandError):
            await Invoker().invoke(env, "definitely-not-a-mount-helper", [])

    @pytest.mark.asyncio
    async def test_deadline(self, env):
        with pytest.raises(CommandTimeoutError):
            await Invoker().invoke(env.with_deadline(0.2), "sleep", ["10"])

    @pytest.mark.asyncio
    async def test_expired_deadline(self):
        env = DriverEnv(logging.getLogger("smb-mounter-test"), deadline=0)

        with pytest.raises(CommandTimeoutError):
            await Invoker().invoke(env, "true", [])


class TestFilesystem:
    def test_read_dir(self, tmp_path):
        (tmp_path / "volume").mkdir()
        (tmp_path / "notes.txt").write_text("x")

        assert Filesystem().read_dir(str(tmp_path)) == [
            DirEntry("notes.txt", False),
            DirEntry("volume", True),
        ]

    @pytest.mark.skipif(os.name == "nt", reason="creating symlinks needs privileges on windows")
    def test_read_dir_reports_dangling_link(self, tmp_path):
        (tmp_path / "vol").symlink_to(tmp_path / "gone")

        assert Filesystem().read_dir(str(tmp_path)) == [DirEntry("vol", False, True)]

    def test_remove_empty_directory(self, tmp_path):
        volume = tmp_path / "volume"
        volume.mkdir()

        Filesystem().remove(str(volume))

        assert not volume.exists()

    def test_remove_refuses_non_empty_directory(self, tmp_path):
        volume = tmp_path / "volume"
        volume.mkdir()
        (volume / "data").write_text("x")

        with pytest.raises(OSError):
            Filesystem().remove(str(volume))

    def test_remove_all(self, tmp_path):
        volume = tmp_path / "volume"
        volume.mkdir()
        (volume / "data").write_text("x")

        Filesystem().remove_all(str(volume))

        assert not volume.exists()

    @posix_only
    def test_link_roundtrip(self, tmp_path):
        share = tmp_path / "share"
        share.mkdir()
        (share / "keep").write_text("x")
        link = tmp_path / "link"
        os.symlink(str(share), str(link))

        assert Filesystem().readlink(str(link)) == str(share)
        Filesystem().remove_all(str(link))

        assert not os.path.lexists(str(link))
        assert (share / "keep").exists()
