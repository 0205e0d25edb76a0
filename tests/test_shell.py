"""
Tests for startup-file I/O and re-sourcing.
"""

import os
import stat
import subprocess
from pathlib import Path

import pytest

from pathman import shell
from pathman.errors import ReadFailure, SourceFailure, WriteFailure
from pathman.profile import ShellKind, ShellProfile
from pathman.shell import backup_rc, read_rc, source_command, source_rc, write_rc


class TestReadRc:
    def test_reads_text(self, fake_home: Path):
        rc = fake_home / ".bashrc"
        rc.write_text('export PATH="/a:$PATH"\n', encoding="utf-8")
        assert read_rc(rc) == 'export PATH="/a:$PATH"\n'

    def test_missing_file_is_empty(self, fake_home: Path):
        assert read_rc(fake_home / ".bashrc") == ""

    def test_directory_is_read_failure(self, fake_home: Path):
        rc = fake_home / ".bashrc"
        rc.mkdir()
        with pytest.raises(ReadFailure, match=".bashrc"):
            read_rc(rc)

    def test_invalid_utf8_is_read_failure(self, fake_home: Path):
        rc = fake_home / ".bashrc"
        rc.write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(ReadFailure):
            read_rc(rc)

    def test_keeps_crlf(self, fake_home: Path):
        rc = fake_home / ".bashrc"
        rc.write_bytes(b"echo one\r\necho two\r\n")
        assert read_rc(rc) == "echo one\r\necho two\r\n"


class TestBackupRc:
    def test_creates_backup_once(self, fake_home: Path):
        rc = fake_home / ".bashrc"
        rc.write_text("original\n")
        backup = backup_rc(rc)
        assert backup == fake_home / ".bashrc.pathman-backup"
        assert backup.read_text() == "original\n"

        rc.write_text("changed\n")
        assert backup_rc(rc) is None
        assert backup.read_text() == "original\n"

    def test_no_backup_for_missing_file(self, fake_home: Path):
        assert backup_rc(fake_home / ".bashrc") is None
        assert not (fake_home / ".bashrc.pathman-backup").exists()


class TestWriteRc:
    def test_creates_file(self, fake_home: Path):
        rc = fake_home / ".zshrc"
        write_rc(rc, "hello\n")
        assert rc.read_text() == "hello\n"

    def test_replaces_content(self, fake_home: Path):
        rc = fake_home / ".zshrc"
        rc.write_text("old\n")
        write_rc(rc, "new\n")
        assert rc.read_text() == "new\n"

    def test_leaves_no_temp_files(self, fake_home: Path):
        rc = fake_home / ".zshrc"
        write_rc(rc, "new\n")
        assert [p.name for p in fake_home.iterdir()] == [".zshrc"]

    def test_keeps_file_mode(self, fake_home: Path):
        rc = fake_home / ".bashrc"
        rc.write_text("old\n")
        rc.chmod(0o600)
        write_rc(rc, "new\n")
        assert stat.S_IMODE(rc.stat().st_mode) == 0o600

    def test_writes_through_symlink(self, fake_home: Path):
        real = fake_home / "dotfiles" / "bashrc"
        real.parent.mkdir()
        real.write_text("old\n")
        link = fake_home / ".bashrc"
        link.symlink_to(real)

        write_rc(link, "new\n")
        assert link.is_symlink()
        assert real.read_text() == "new\n"

    def test_missing_directory_is_write_failure(self, fake_home: Path):
        rc = fake_home / "missing" / ".bashrc"
        with pytest.raises(WriteFailure, match="missing"):
            write_rc(rc, "new\n")

    def test_new_file_follows_umask(self, fake_home: Path):
        rc = fake_home / ".bashrc"
        old = os.umask(0o022)
        try:
            write_rc(rc, "new\n")
        finally:
            os.umask(old)
        assert stat.S_IMODE(rc.stat().st_mode) == 0o644

    def test_writes_crlf_unchanged(self, fake_home: Path):
        rc = fake_home / ".bashrc"
        write_rc(rc, "echo one\r\necho two\r\n")
        assert rc.read_bytes() == b"echo one\r\necho two\r\n"

    def test_unencodable_text_is_write_failure(self, fake_home: Path):
        rc = fake_home / ".bashrc"
        rc.write_text("old\n")
        with pytest.raises(WriteFailure):
            write_rc(rc, os.fsdecode(b"export PATH=\"/opt/\xff/bin:$PATH\"\n"))
        assert rc.read_text() == "old\n"
        assert [p.name for p in fake_home.iterdir()] == [".bashrc"]

    def test_failed_replace_keeps_original(self, fake_home: Path, monkeypatch):
        rc = fake_home / ".bashrc"
        rc.write_text("old\n")

        def boom(src, dst):
            raise PermissionError("denied")

        monkeypatch.setattr(shell.os, "replace", boom)
        with pytest.raises(WriteFailure, match="denied"):
            write_rc(rc, "new\n")
        assert rc.read_text() == "old\n"
        assert [p.name for p in fake_home.iterdir()] == [".bashrc"]


class TestSourceRc:
    @pytest.fixture
    def zsh_profile(self, fake_home: Path) -> ShellProfile:
        return ShellProfile(shell=ShellKind.ZSH, path=fake_home / ".zshrc")

    def test_source_command_quotes_path(self, tmp_path: Path):
        profile = ShellProfile(shell=ShellKind.BASH, path=tmp_path / "my home" / ".bashrc")
        assert source_command(profile) == f"source '{tmp_path}/my home/.bashrc'"

    def test_runs_shell(self, zsh_profile: ShellProfile, monkeypatch):
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append((cmd, kwargs))
            return subprocess.CompletedProcess(cmd, 0, stdout="ok\n")

        monkeypatch.setattr(shell.subprocess, "run", fake_run)
        assert source_rc(zsh_profile) == "ok\n"

        cmd, kwargs = calls[0]
        assert cmd == ["/bin/zsh", "-c", source_command(zsh_profile)]
        assert kwargs["stderr"] is subprocess.STDOUT

    def test_nonzero_exit(self, zsh_profile: ShellProfile, monkeypatch):
        monkeypatch.setattr(
            shell.subprocess, "run",
            lambda cmd, **kwargs: subprocess.CompletedProcess(cmd, 2, stdout="parse error\n"),
        )
        with pytest.raises(SourceFailure) as exc_info:
            source_rc(zsh_profile)
        assert exc_info.value.returncode == 2
        assert "parse error" in str(exc_info.value)

    def test_shell_not_installed(self, zsh_profile: ShellProfile, monkeypatch):
        def fake_run(cmd, **kwargs):
            raise FileNotFoundError(2, "No such file or directory", cmd[0])

        monkeypatch.setattr(shell.subprocess, "run", fake_run)
        with pytest.raises(SourceFailure) as exc_info:
            source_rc(zsh_profile)
        assert exc_info.value.returncode is None
