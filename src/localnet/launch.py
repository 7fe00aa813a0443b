"""Validator launcher: build the argument list and hand off to the validator."""

from __future__ import annotations

import os
import shlex
import subprocess
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from localnet.config import LocalnetConfig
from localnet.errors import LaunchError
from localnet.fixtures import FetchMethod
from localnet.provision import ProvisionResult
from localnet.ui import flush, narrate

VALIDATOR = "solana-test-validator"
RESET_FLAG = "-r"

BINDING_FLAGS: dict[FetchMethod, str] = {
    FetchMethod.PROGRAM_DUMP: "--bpf-program",
    FetchMethod.ACCOUNT_SNAPSHOT: "--account",
}


@dataclass(frozen=True)
class Binding:
    """One ``<flag> <identity> <path>`` triple of the launch plan."""

    flag: str
    identity: str
    path: Path

    def tokens(self) -> tuple[str, str, str]:
        return (self.flag, self.identity, str(self.path))


class LaunchPlanBuilder:
    """Accumulates bindings and flattens them into an ordered token list.

    Program bindings come before account bindings. Within each group the
    order of ``add`` calls is kept.
    """

    def __init__(self, invocation: Sequence[str]):
        self._invocation = tuple(invocation)
        self._programs: list[Binding] = []
        self._accounts: list[Binding] = []

    def add(self, result: ProvisionResult) -> LaunchPlanBuilder:
        spec = result.spec
        binding = Binding(flag=BINDING_FLAGS[spec.method], identity=spec.identity, path=result.path)
        if spec.method is FetchMethod.PROGRAM_DUMP:
            self._programs.append(binding)
        else:
            self._accounts.append(binding)
        return self

    def extend(self, results: Iterable[ProvisionResult]) -> LaunchPlanBuilder:
        for result in results:
            self.add(result)
        return self

    @property
    def bindings(self) -> tuple[Binding, ...]:
        return (*self._programs, *self._accounts)

    def build(self, passthrough: Sequence[str] = ()) -> tuple[str, ...]:
        tokens: list[str] = list(self._invocation)
        for binding in self.bindings:
            tokens.extend(binding.tokens())
        tokens.extend(passthrough)
        return tuple(tokens)


def validator_invocation(config: LocalnetConfig) -> list[str]:
    invocation = [VALIDATOR]
    if config.reset:
        invocation.append(RESET_FLAG)
    return invocation


def build_launch_plan(
    results: Iterable[ProvisionResult],
    passthrough: Sequence[str],
    config: LocalnetConfig,
) -> tuple[str, ...]:
    """Build the full validator command; passthrough tokens are appended verbatim and last."""
    return LaunchPlanBuilder(validator_invocation(config)).extend(results).build(passthrough)


def render_plan(plan: Sequence[str]) -> str:
    return shlex.join(plan)


def exec_validator(
    plan: Sequence[str],
    *,
    execvp: Callable[[str, Sequence[str]], object] = os.execvp,
) -> int:
    """Replace the current process with the validator.

    Only returns on platforms without process replacement, where the validator
    runs as a child and its exit code is returned for the caller to mirror.
    """
    argv = list(plan)
    narrate("Starting Solana test validator...")
    flush()

    if os.name == "nt":
        try:
            return subprocess.call(argv)
        except OSError as exc:
            raise LaunchError(f"failed to start {argv[0]}: {exc}") from exc

    try:
        execvp(argv[0], argv)
    except OSError as exc:
        raise LaunchError(f"failed to start {argv[0]}: {exc}") from exc
    # Only reached when execvp is stubbed.
    return 0
