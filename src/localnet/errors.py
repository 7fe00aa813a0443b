"""Fatal error taxonomy for localnet runs.

Every error is raised at the point of detection and handled once at the CLI
boundary, which prints the message to stderr and exits with ``exit_code``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

    from localnet.exec import ExecResult


class LocalnetError(RuntimeError):
    """Base class for errors that terminate a run."""

    exit_code = 1


class FixtureTableError(LocalnetError):
    """Raised when a fixture table file is malformed."""

    exit_code = 1


class WrongDirectoryError(LocalnetError):
    """Raised when the tool is not run from its own script directory."""

    exit_code = 2


class MissingDependencyError(LocalnetError):
    """Raised when a required CLI tool is not on PATH."""

    exit_code = 3


class DirectoryError(LocalnetError):
    """Raised when a target directory cannot be created or is not writable."""

    exit_code = 4

    def __init__(self, message: str, path: Path):
        super().__init__(message)
        self.path = path


class FetchError(LocalnetError):
    """Raised when the external fetch tool fails for an artifact."""

    exit_code = 5

    def __init__(self, identity: str, path: Path, result: ExecResult):
        detail = (result.stderr or result.stdout).strip()
        message = f"failed to fetch {identity} into {path} (exit {result.returncode})"
        if path.exists():
            message += f"\npartial file left at {path}; remove it before retrying"
        if detail:
            message += f"\n{detail}"
        super().__init__(message)
        self.identity = identity
        self.path = path
        self.result = result


class LaunchError(LocalnetError):
    """Raised when the validator process cannot be started."""

    exit_code = 6
