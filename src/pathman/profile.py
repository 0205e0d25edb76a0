"""Shell detection and startup-file location."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pathman.errors import ShellNotDetected


class ShellKind(Enum):
    BASH = "bash"
    ZSH = "zsh"

    @property
    def rc_name(self) -> str:
        return f".{self.value}rc"

    @classmethod
    def from_shell_path(cls, shell_path: str) -> ShellKind | None:
        """Match a shell executable path like /usr/bin/zsh. First match wins."""
        for kind in (cls.BASH, cls.ZSH):
            if shell_path == kind.value or shell_path.endswith(f"/{kind.value}"):
                return kind
        return None


@dataclass(frozen=True)
class ShellProfile:
    shell: ShellKind
    path: Path


def locate(
    environ: Mapping[str, str] | None = None,
    home: Path | None = None,
    rc_override: Path | None = None,
) -> ShellProfile:
    """Detect the shell from $SHELL and resolve its startup file.

    The file is not required to exist. Raises ShellNotDetected if $SHELL is
    unset or is not bash/zsh.
    """
    if environ is None:
        environ = os.environ
    shell_path = environ.get("SHELL", "").strip()
    kind = ShellKind.from_shell_path(shell_path) if shell_path else None
    if kind is None:
        raise ShellNotDetected(shell_path or None)

    if rc_override is not None:
        path = Path(rc_override).expanduser()
    else:
        path = (home if home is not None else Path.home()) / kind.rc_name
    return ShellProfile(shell=kind, path=path.absolute())
