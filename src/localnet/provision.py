"""Fixture provisioner: make every declared artifact exist on disk.

Artifacts are fetched at most once. Presence of a non-empty target file is the
whole cache check; nothing is re-validated. Work is strictly sequential and the
first failure aborts the run.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path

from localnet.config import LocalnetConfig
from localnet.errors import FetchError
from localnet.exec import ExecResult, run_command
from localnet.fixtures import ArtifactSpec, FetchMethod
from localnet.guards import ensure_dir
from localnet.ui import narrate

Runner = Callable[..., ExecResult]


@dataclass(frozen=True)
class ProvisionResult:
    """Verified local artifact for one spec.

    ``fetched`` records whether this run downloaded it and is ignored for
    equality, so repeated runs yield equal results.
    """

    spec: ArtifactSpec
    path: Path
    fetched: bool = field(default=False, compare=False)


def fetch_command(spec: ArtifactSpec, path: Path, cluster: str) -> list[str]:
    """Build the solana CLI invocation that writes ``spec`` to ``path``."""
    if spec.method is FetchMethod.PROGRAM_DUMP:
        return ["solana", "program", "dump", "-u", cluster, spec.identity, str(path)]
    return [
        "solana",
        "account",
        "-u",
        cluster,
        "--output",
        "json",
        "--output-file",
        str(path),
        spec.identity,
    ]


def is_present(path: Path) -> bool:
    """True when ``path`` holds a non-empty file."""
    return path.is_file() and path.stat().st_size > 0


def prepare_directories(specs: Sequence[ArtifactSpec], config: LocalnetConfig) -> list[Path]:
    """Check or create each distinct target directory, in declaration order."""
    seen: list[Path] = []
    for spec in specs:
        configured = spec.base_dir(config)
        resolved = config.resolve(configured)
        if resolved in seen:
            continue
        ensure_dir(resolved, display=configured)
        seen.append(resolved)
    return seen


def provision_one(
    spec: ArtifactSpec,
    config: LocalnetConfig,
    *,
    runner: Runner = run_command,
) -> ProvisionResult:
    """Fetch a single artifact unless it is already present."""
    shown = spec.target_path(config)
    path = config.resolve(shown)

    if is_present(path):
        narrate(f"Found {spec.display_name} at {shown}, skipping download")
        return ProvisionResult(spec=spec, path=shown, fetched=False)

    if path.is_file():
        narrate(f"Found empty file for {spec.display_name} at {shown}; downloading again...")
    else:
        narrate(f"Downloading {spec.display_name}...")

    result = runner(fetch_command(spec, path, config.cluster), cwd=config.workdir)
    if not result.ok:
        raise FetchError(spec.identity, path, result)
    if not path.is_file():
        raise FetchError(spec.identity, path, replace(result, stderr="fetch reported success but wrote no file"))

    narrate(f"Downloaded {spec.display_name} to {shown}")
    return ProvisionResult(spec=spec, path=shown, fetched=True)


def provision(
    specs: Sequence[ArtifactSpec],
    config: LocalnetConfig,
    *,
    runner: Runner = run_command,
) -> list[ProvisionResult]:
    """Ensure every artifact in ``specs`` exists locally.

    Directories are checked before any fetch. Raises DirectoryError or
    FetchError on the first failure; nothing after it is attempted.
    """
    prepare_directories(specs, config)
    return [provision_one(spec, config, runner=runner) for spec in specs]
