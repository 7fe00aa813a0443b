"""Fail-closed preconditions checked before any provisioning work."""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterable
from pathlib import Path

from localnet.errors import DirectoryError, MissingDependencyError, WrongDirectoryError
from localnet.ui import narrate

REQUIRED_TOOLS: tuple[str, ...] = ("solana", "solana-test-validator")


def ensure_workdir(workdir: Path, marker: str) -> None:
    """Refuse to run unless ``marker`` (the tool's own script) sits in ``workdir``."""
    if not (workdir / marker).is_file():
        raise WrongDirectoryError(
            f"this tool must be run from the directory containing '{marker}' (cwd: {workdir})"
        )


def missing_tools(tools: Iterable[str] = REQUIRED_TOOLS) -> list[str]:
    return [tool for tool in tools if shutil.which(tool) is None]


def ensure_tools(tools: Iterable[str] = REQUIRED_TOOLS) -> None:
    """Refuse to run unless every tool resolves on PATH."""
    missing = missing_tools(tools)
    if missing:
        raise MissingDependencyError(
            f"Solana CLI tools are not installed or not in PATH (missing: {', '.join(missing)}). "
            "Please install them first."
        )


def _is_writable(path: Path) -> bool:
    return os.access(path, os.W_OK | os.X_OK)


def ensure_dir(path: Path, *, display: Path | None = None) -> bool:
    """Create ``path`` if absent, or verify it is writable if present.

    Returns True when the directory was created.
    """
    shown = display or path
    if path.is_dir():
        if not _is_writable(path):
            raise DirectoryError(f"Directory '{shown}' exists but is not writable. Check permissions.", path)
        return False
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryError(f"Failed to create directory '{shown}': {exc}. Check permissions.", path) from exc
    if not _is_writable(path):
        raise DirectoryError(f"Directory '{shown}' was created but is not writable. Check permissions.", path)
    narrate(f"Created directory: {shown}")
    return True
