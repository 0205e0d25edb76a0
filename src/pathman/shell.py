"""Startup file I/O: read, one-time backup, atomic rewrite and re-sourcing."""

from __future__ import annotations

import os
import shlex
import shutil
import subprocess
import tempfile
from pathlib import Path

from pathman.errors import ReadFailure, SourceFailure, WriteFailure
from pathman.profile import ShellProfile

BACKUP_SUFFIX = ".pathman-backup"


def _current_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


def read_rc(config_path: Path) -> str:
    """Return the startup file's text, or "" if it does not exist yet."""
    try:
        # newline="" keeps CRLF line endings as they are
        with open(config_path, encoding="utf-8", newline="") as f:
            return f.read()
    except FileNotFoundError:
        return ""
    except (OSError, UnicodeDecodeError) as e:
        raise ReadFailure(config_path, e) from e


def backup_rc(config_path: Path) -> Path | None:
    """Create a one-time backup of the startup file. Returns backup path or None if already backed up."""
    backup_path = config_path.parent / f"{config_path.name}{BACKUP_SUFFIX}"
    if backup_path.exists() or not config_path.exists():
        return None
    try:
        shutil.copy2(config_path, backup_path)
    except OSError as e:
        raise WriteFailure(backup_path, e) from e
    return backup_path


def write_rc(config_path: Path, content: str) -> None:
    """Replace the startup file with `content` in one step.

    The text goes to a temporary file next to the target which is then
    renamed over it, so a failure never leaves a half-written file behind.
    Symlinked startup files are written through to their target.
    """
    target = config_path.resolve()
    try:
        handle = tempfile.NamedTemporaryFile(
            "w",
            encoding="utf-8",
            newline="",
            dir=str(target.parent),
            prefix=f".{target.name}.",
            delete=False,
        )
    except OSError as e:
        raise WriteFailure(config_path, e) from e

    temp_name = handle.name
    try:
        with handle:
            handle.write(content)
            handle.flush()
            os.fsync(handle.fileno())
        if target.exists():
            shutil.copymode(target, temp_name)
        else:
            os.chmod(temp_name, 0o666 & ~_current_umask())
        os.replace(temp_name, target)
    except (OSError, UnicodeEncodeError) as e:
        raise WriteFailure(config_path, e) from e
    finally:
        if os.path.exists(temp_name):
            os.remove(temp_name)


def source_command(profile: ShellProfile) -> str:
    return f"source {shlex.quote(str(profile.path))}"


def source_rc(profile: ShellProfile) -> str:
    """Source the startup file in a fresh shell; returns its combined output.

    Raises SourceFailure if the shell cannot be started or exits non-zero.
    """
    command = source_command(profile)
    cmd = [f"/bin/{profile.shell.value}", "-c", command]
    try:
        proc = subprocess.run(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            errors="replace",
        )
    except OSError as e:
        raise SourceFailure(command, None, str(e)) from e

    if proc.returncode != 0:
        raise SourceFailure(command, proc.returncode, proc.stdout or "")
    return proc.stdout or ""
