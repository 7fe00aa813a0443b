"""Run configuration captured once from the process environment."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

DEFAULT_PROGRAMS_DIR = Path("./programs")
DEFAULT_ACCOUNTS_DIR = Path("./accounts")
DEFAULT_CLUSTER = "m"
DEFAULT_MARKER = "pumpfun-test-validator"

PROGRAMS_DIR_ENV = "PROGRAMS_DIR"
ACCOUNTS_DIR_ENV = "ACCOUNTS_DIR"
CLUSTER_ENV = "SOLANA_CLUSTER"


@dataclass(frozen=True)
class LocalnetConfig:
    """Directories and switches for a single provision-and-launch run.

    ``programs_dir`` and ``accounts_dir`` are kept as configured so the
    launch plan shows the same paths the user supplied. Use ``resolve`` to
    get the on-disk location relative to ``workdir``.
    """

    workdir: Path
    programs_dir: Path = DEFAULT_PROGRAMS_DIR
    accounts_dir: Path = DEFAULT_ACCOUNTS_DIR
    cluster: str = DEFAULT_CLUSTER
    reset: bool = True
    marker: str = DEFAULT_MARKER

    @classmethod
    def from_env(cls, environ: Mapping[str, str], workdir: Path | None = None) -> LocalnetConfig:
        """Build config from environment variables, falling back to defaults.

        Empty values count as unset.
        """
        return cls(
            workdir=(workdir or Path.cwd()).resolve(),
            programs_dir=Path(environ.get(PROGRAMS_DIR_ENV) or DEFAULT_PROGRAMS_DIR),
            accounts_dir=Path(environ.get(ACCOUNTS_DIR_ENV) or DEFAULT_ACCOUNTS_DIR),
            cluster=environ.get(CLUSTER_ENV) or DEFAULT_CLUSTER,
        )

    def resolve(self, path: Path) -> Path:
        """Resolve a configured path against the working directory."""
        if path.is_absolute():
            return path
        return self.workdir / path
