"""Pytest configuration and fixtures for localnet tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from localnet.config import DEFAULT_MARKER
from localnet.exec import ExecResult


def pytest_sessionfinish(session, exitstatus):
    """Fail the run if --cov was requested but no coverage data was written."""
    if not any("--cov" in str(arg) for arg in session.config.invocation_params.args):
        return
    if not list(Path.cwd().glob(".coverage*")):
        pytest.exit(
            "Coverage was enabled but no data was collected. "
            "Check that tests import from 'localnet' (the package) not 'src/localnet'.",
            returncode=1,
        )


class FetchStub:
    """Stand-in for the solana CLI runner that writes the requested file."""

    def __init__(self, fail_on: set[str] | None = None, payload: bytes = b"fixture-bytes"):
        self.fail_on = fail_on or set()
        self.payload = payload
        self.calls: list[list[str]] = []

    def __call__(self, argv: list[str], *, cwd: Path) -> ExecResult:
        self.calls.append(list(argv))
        identity, target = _identity_and_target(argv)
        if identity in self.fail_on:
            return ExecResult(argv=tuple(argv), cwd=cwd, returncode=1, stdout="", stderr="Error: RPC request failed")
        Path(target).write_bytes(self.payload)
        return ExecResult(argv=tuple(argv), cwd=cwd, returncode=0, stdout="", stderr="")

    @property
    def fetched_identities(self) -> list[str]:
        return [_identity_and_target(argv)[0] for argv in self.calls]


def _identity_and_target(argv: list[str]) -> tuple[str, str]:
    if argv[1] == "program":
        return argv[-2], argv[-1]
    return argv[-1], argv[argv.index("--output-file") + 1]


class ExecStub:
    """Records validator hand-off instead of replacing the process."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, list[str]]] = []

    def __call__(self, file: str, args) -> None:
        self.calls.append((file, list(args)))


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Script directory containing the marker file, used as cwd."""
    root = tmp_path / "scripts"
    root.mkdir()
    (root / DEFAULT_MARKER).write_text("#!/usr/bin/env bash\n", encoding="utf-8")
    monkeypatch.chdir(root)
    for name in ("PROGRAMS_DIR", "ACCOUNTS_DIR", "SOLANA_CLUSTER"):
        monkeypatch.delenv(name, raising=False)
    return root


@pytest.fixture
def solana_on_path(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("localnet.guards.shutil.which", lambda name: f"/usr/local/bin/{name}")


@pytest.fixture
def fetch_stub() -> FetchStub:
    return FetchStub()


@pytest.fixture
def exec_stub() -> ExecStub:
    return ExecStub()


@pytest.fixture
def make_fetch_stub():
    return FetchStub
