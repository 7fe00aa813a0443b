"""Console output: narration on stdout, diagnostics on stderr."""

from __future__ import annotations

import sys

from rich.console import Console

console = Console(highlight=False, soft_wrap=True)
error_console = Console(stderr=True, highlight=False, soft_wrap=True)


def narrate(message: str) -> None:
    console.print(message, markup=False)


def report_error(message: str) -> None:
    error_console.print(f"Error: {message}", markup=False)


def flush() -> None:
    """Flush both streams before the process image is replaced."""
    sys.stdout.flush()
    sys.stderr.flush()
