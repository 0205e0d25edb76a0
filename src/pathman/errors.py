"""Exception classes raised by pathman's core and reported by the CLI."""

from __future__ import annotations


class PathmanError(Exception):
    """Base exception for all pathman errors."""


class ShellNotDetected(PathmanError):
    """Raised when $SHELL is missing or names an unsupported shell."""

    def __init__(self, shell_path: str | None) -> None:
        self.shell_path = shell_path
        if shell_path:
            message = f"Unsupported shell '{shell_path}' (supported: bash, zsh)"
        else:
            message = "SHELL environment variable not found"
        super().__init__(message)


class ReadFailure(PathmanError):
    """Raised when the startup file cannot be read."""

    def __init__(self, path: object, reason: object) -> None:
        self.path = path
        super().__init__(f"Failed to read from file {path}: {reason}")


class WriteFailure(PathmanError):
    """Raised when the startup file (or its backup) cannot be written."""

    def __init__(self, path: object, reason: object) -> None:
        self.path = path
        super().__init__(f"Failed to write to file {path}: {reason}")


class DirectoryNotFound(PathmanError):
    """Raised when a directory to remove is not in any PATH export line."""

    def __init__(self, directory: str) -> None:
        self.directory = directory
        super().__init__(f"Directory '{directory}' not found in PATH")


class SourceFailure(PathmanError):
    """Raised when re-sourcing the startup file fails."""

    def __init__(self, command: str, returncode: int | None, output: str) -> None:
        self.command = command
        self.returncode = returncode
        self.output = output
        if returncode is None:
            detail = output
        else:
            detail = f"exit status {returncode}"
            if output.strip():
                detail += f": {output.strip()}"
        super().__init__(f"'{command}' failed ({detail})")
