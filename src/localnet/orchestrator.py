"""Sequential provision-then-launch run with an explicit state machine."""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from enum import Enum

from localnet.config import LocalnetConfig
from localnet.errors import LaunchError, LocalnetError
from localnet.exec import run_command
from localnet.fixtures import ArtifactSpec
from localnet.guards import ensure_tools, ensure_workdir
from localnet.launch import build_launch_plan, exec_validator
from localnet.provision import ProvisionResult, Runner, provision


class RunState(str, Enum):
    NOT_STARTED = "not_started"
    PROVISIONING = "provisioning"
    PROVISIONING_FAILED = "provisioning_failed"
    PROVISIONED = "provisioned"
    LAUNCHING = "launching"
    LAUNCH_FAILED = "launch_failed"
    LAUNCHED = "launched"


class Bootstrap:
    """One run of the tool: guards, provisioning, then the validator hand-off.

    Any error moves the run to its failed terminal state and propagates.
    """

    def __init__(
        self,
        config: LocalnetConfig,
        specs: Sequence[ArtifactSpec],
        *,
        runner: Runner = run_command,
        execvp: Callable[[str, Sequence[str]], object] = os.execvp,
    ):
        self.config = config
        self.specs = tuple(specs)
        self.runner = runner
        self.execvp = execvp
        self.state = RunState.NOT_STARTED
        self.results: list[ProvisionResult] = []

    def provision(self) -> list[ProvisionResult]:
        if self.state is not RunState.NOT_STARTED:
            raise RuntimeError(f"cannot provision from state {self.state.value}")
        self.state = RunState.PROVISIONING
        try:
            ensure_workdir(self.config.workdir, self.config.marker)
            ensure_tools()
            self.results = provision(self.specs, self.config, runner=self.runner)
        except LocalnetError:
            self.state = RunState.PROVISIONING_FAILED
            raise
        self.state = RunState.PROVISIONED
        return self.results

    def plan(self, passthrough: Sequence[str] = ()) -> tuple[str, ...]:
        if self.state is not RunState.PROVISIONED:
            raise RuntimeError(f"cannot build launch plan from state {self.state.value}")
        return build_launch_plan(self.results, passthrough, self.config)

    def launch(self, passthrough: Sequence[str] = ()) -> int:
        """Hand off to the validator; returns its exit code where exec is unavailable."""
        plan = self.plan(passthrough)
        self.state = RunState.LAUNCHING
        try:
            code = exec_validator(plan, execvp=self.execvp)
        except LaunchError:
            self.state = RunState.LAUNCH_FAILED
            raise
        self.state = RunState.LAUNCHED
        return code
