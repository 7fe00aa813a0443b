"""Tests for the read-only doctor report."""

from __future__ import annotations

from pathlib import Path

import pytest

from localnet.config import LocalnetConfig
from localnet.doctor import run_doctor
from localnet.fixtures import DEFAULT_FIXTURES


def _statuses(report) -> dict[str, str]:
    return {c.id: c.status for c in report.checks}


def test_fresh_checkout_passes_with_warnings(workdir: Path, solana_on_path: None) -> None:
    report = run_doctor(LocalnetConfig.from_env({}, workdir), DEFAULT_FIXTURES)

    assert report.status == "passed"
    assert _statuses(report) == {
        "workdir": "pass",
        "tools": "pass",
        "programs_dir": "warn",
        "accounts_dir": "warn",
    }


def test_cached_fixtures_are_reported(workdir: Path, solana_on_path: None) -> None:
    (workdir / "programs").mkdir()
    (workdir / "programs" / "pumpfun.so").write_bytes(b"elf")
    (workdir / "programs" / "pumpamm.so").write_bytes(b"")

    report = run_doctor(LocalnetConfig.from_env({}, workdir), DEFAULT_FIXTURES)

    present = {f["path"]: f["present"] for f in report.fixtures}
    assert present["programs/pumpfun.so"] is True
    assert present["programs/pumpamm.so"] is False
    assert _statuses(report)["programs_dir"] == "pass"


def test_missing_tools_fail(workdir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("localnet.guards.shutil.which", lambda name: None)

    report = run_doctor(LocalnetConfig.from_env({}, workdir), DEFAULT_FIXTURES)

    assert report.status == "failed"
    tools = next(c for c in report.checks if c.id == "tools")
    assert "solana-test-validator" in tools.message
    assert tools.remediation


def test_shared_directory_checked_once(workdir: Path, solana_on_path: None) -> None:
    config = LocalnetConfig.from_env({"PROGRAMS_DIR": "fx", "ACCOUNTS_DIR": "fx"}, workdir)

    report = run_doctor(config, DEFAULT_FIXTURES)

    assert "accounts_dir" not in _statuses(report)


def test_report_serializes(workdir: Path, solana_on_path: None) -> None:
    data = run_doctor(LocalnetConfig.from_env({}, workdir), DEFAULT_FIXTURES).to_dict()

    assert data["config"]["cluster"] == "m"
    assert data["checks"][0]["id"] == "workdir"
