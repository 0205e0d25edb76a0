"""Add/remove orchestration: read, edit, write, then optionally re-source."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from pathman.errors import DirectoryNotFound, SourceFailure
from pathman.pathline import AddResult, apply_add, apply_remove
from pathman.profile import ShellProfile, locate
from pathman.shell import backup_rc, read_rc, source_command, source_rc, write_rc

Runner = Callable[[ShellProfile], object]


class ActionKind(Enum):
    ADD = "add"
    REMOVE = "remove"


class Status(Enum):
    ADDED = "added"
    REMOVED = "removed"
    ALREADY_PRESENT = "already_present"
    NOT_FOUND = "not_found"


def validate_directory(directory: str) -> str:
    """Reject values that cannot be stored as a single PATH entry."""
    if not directory:
        raise ValueError("directory must not be empty")
    for ch in (":", '"', "\n"):
        if ch in directory:
            raise ValueError(f"directory must not contain {ch!r}")
    if directory in ("$PATH", "${PATH}"):
        raise ValueError("directory must not be $PATH itself")
    try:
        directory.encode("utf-8")
    except UnicodeEncodeError:
        # undecodable bytes from argv arrive as lone surrogates
        raise ValueError("directory must be valid UTF-8") from None
    return directory


@dataclass(frozen=True)
class PathAction:
    kind: ActionKind
    directory: str

    def __post_init__(self) -> None:
        validate_directory(self.directory)

    @classmethod
    def add(cls, directory: str) -> PathAction:
        return cls(ActionKind.ADD, directory)

    @classmethod
    def remove(cls, directory: str) -> PathAction:
        return cls(ActionKind.REMOVE, directory)


@dataclass
class Outcome:
    status: Status
    message: str
    profile: ShellProfile
    changed: bool = False
    sourced: bool = False
    source_error: SourceFailure | None = None
    hint: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is not Status.NOT_FOUND


class PathManager:
    """Applies PathActions to one shell profile's startup file."""

    def __init__(self, profile: ShellProfile, runner: Runner = source_rc) -> None:
        self.profile = profile
        self.runner = runner

    def add(self, directory: str, source_after: bool = True) -> Outcome:
        return self.modify(PathAction.add(directory), source_after)

    def remove(self, directory: str, source_after: bool = True) -> Outcome:
        return self.modify(PathAction.remove(directory), source_after)

    def modify(self, action: PathAction, source_after: bool = True) -> Outcome:
        """Apply `action` to the startup file.

        ReadFailure and WriteFailure propagate with the file untouched. A
        directory that is already present (add) or missing (remove) yields an
        Outcome without writing. A failed re-source is recorded on the Outcome;
        the edit itself is kept.
        """
        rc_name = self.profile.path.name
        content = read_rc(self.profile.path)

        if action.kind is ActionKind.ADD:
            new_content, result = apply_add(content, action.directory)
            if result is AddResult.ALREADY_PRESENT:
                return Outcome(
                    Status.ALREADY_PRESENT,
                    f"Directory '{action.directory}' is already in PATH in {rc_name}",
                    self.profile,
                )
            status = Status.ADDED
            message = f"Directory added to PATH in {rc_name}"
        else:
            try:
                new_content = apply_remove(content, action.directory)
            except DirectoryNotFound as e:
                return Outcome(
                    Status.NOT_FOUND,
                    f"Failed to remove directory from PATH in {rc_name}: {e}",
                    self.profile,
                )
            status = Status.REMOVED
            message = f"Directory removed from PATH in {rc_name}"

        backup_rc(self.profile.path)
        write_rc(self.profile.path, new_content)
        outcome = Outcome(status, message, self.profile, changed=True)

        if source_after:
            try:
                self.runner(self.profile)
                outcome.sourced = True
            except SourceFailure as e:
                outcome.source_error = e
                outcome.hint = source_command(self.profile)
        else:
            outcome.hint = source_command(self.profile)
        return outcome


def modify(
    action: PathAction,
    source_after: bool = True,
    profile: ShellProfile | None = None,
    runner: Runner = source_rc,
) -> Outcome:
    """Apply `action` to the detected shell's startup file."""
    if profile is None:
        profile = locate()
    return PathManager(profile, runner).modify(action, source_after)
