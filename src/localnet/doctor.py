"""Read-only environment report (doctor command).

Reports whether a run would get past its guards and which fixtures are
already cached. Never creates directories or fetches anything.
"""

from __future__ import annotations

import os
import platform
from collections.abc import Sequence
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Literal

from localnet import __version__
from localnet.config import LocalnetConfig
from localnet.fixtures import ArtifactSpec
from localnet.guards import REQUIRED_TOOLS, missing_tools
from localnet.provision import is_present


@dataclass
class CheckItem:
    """Individual check result."""

    id: str
    status: Literal["pass", "fail", "warn"]
    message: str
    remediation: list[str] = field(default_factory=list)


@dataclass
class DoctorReport:
    """Complete doctor check report."""

    status: Literal["passed", "failed"] = "passed"
    version: str = __version__
    environment: dict = field(default_factory=dict)
    config: dict = field(default_factory=dict)
    fixtures: list[dict] = field(default_factory=list)
    checks: list[CheckItem] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return sum(1 for c in self.checks if c.status == "fail")

    def to_dict(self) -> dict:
        return asdict(self)


def _check_workdir(config: LocalnetConfig) -> CheckItem:
    if (config.workdir / config.marker).is_file():
        return CheckItem(
            id="workdir",
            status="pass",
            message=f"Running from {config.workdir}",
        )
    return CheckItem(
        id="workdir",
        status="fail",
        message=f"'{config.marker}' not found in {config.workdir}",
        remediation=[f"cd into the directory that contains '{config.marker}'"],
    )


def _check_tools() -> CheckItem:
    missing = missing_tools(REQUIRED_TOOLS)
    if not missing:
        return CheckItem(
            id="tools",
            status="pass",
            message=f"Found on PATH: {', '.join(REQUIRED_TOOLS)}",
        )
    return CheckItem(
        id="tools",
        status="fail",
        message=f"Missing from PATH: {', '.join(missing)}",
        remediation=[
            "Install the Solana CLI tool suite",
            "Ensure its install directory is on PATH",
        ],
    )


def _check_dir(check_id: str, config: LocalnetConfig, configured: Path) -> CheckItem:
    path = config.resolve(configured)
    if not path.exists():
        return CheckItem(
            id=check_id,
            status="warn",
            message=f"{configured} does not exist yet (created on first run)",
        )
    if not path.is_dir():
        return CheckItem(
            id=check_id,
            status="fail",
            message=f"{configured} exists but is not a directory",
            remediation=[f"Remove {path} or point the run at another directory"],
        )
    if not os.access(path, os.W_OK | os.X_OK):
        return CheckItem(
            id=check_id,
            status="fail",
            message=f"{configured} is not writable",
            remediation=[f"Fix permissions on {path}"],
        )
    return CheckItem(id=check_id, status="pass", message=f"{configured} is writable")


def run_doctor(config: LocalnetConfig, specs: Sequence[ArtifactSpec]) -> DoctorReport:
    """Run environment checks and describe the fixture cache."""
    report = DoctorReport()
    report.environment = {
        "python_version": platform.python_version(),
        "platform": platform.platform(),
        "cwd": str(config.workdir),
    }
    report.config = {
        "programs_dir": str(config.programs_dir),
        "accounts_dir": str(config.accounts_dir),
        "cluster": config.cluster,
        "reset": config.reset,
    }

    report.checks = [
        _check_workdir(config),
        _check_tools(),
        _check_dir("programs_dir", config, config.programs_dir),
    ]
    if config.resolve(config.accounts_dir) != config.resolve(config.programs_dir):
        report.checks.append(_check_dir("accounts_dir", config, config.accounts_dir))

    for spec in specs:
        shown = spec.target_path(config)
        report.fixtures.append(
            {
                "label": spec.display_name,
                "identity": spec.identity,
                "method": spec.method.value,
                "path": str(shown),
                "present": is_present(config.resolve(shown)),
            }
        )

    report.status = "passed" if report.failed == 0 else "failed"
    return report
