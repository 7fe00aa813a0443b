"""CLI surface for the local test validator bootstrap.

``pumpfun-test-validator`` provisions fixtures and execs the validator.
``localnet`` exposes the same run as ``start`` plus ``provision``, ``plan``
and ``doctor``.
"""

from __future__ import annotations

import json
import os
from dataclasses import replace
from pathlib import Path
from typing import NoReturn

import typer

from localnet import __version__
from localnet.config import LocalnetConfig
from localnet.doctor import run_doctor
from localnet.errors import LocalnetError
from localnet.fixtures import DEFAULT_FIXTURES, ArtifactSpec, load_fixture_table
from localnet.launch import render_plan
from localnet.orchestrator import Bootstrap
from localnet.ui import console, narrate, report_error

PASSTHROUGH_SETTINGS = {"allow_extra_args": True, "ignore_unknown_options": True}

cli = typer.Typer(
    name="localnet",
    help="Provision Pump.fun fixtures and run a local Solana test validator",
    no_args_is_help=True,
    add_completion=False,
)

validator_app = typer.Typer(
    name="pumpfun-test-validator",
    add_completion=False,
)

ProgramsDirOption = typer.Option(
    None,
    "--programs-dir",
    help="Directory for program binaries (default: $PROGRAMS_DIR or ./programs).",
)
AccountsDirOption = typer.Option(
    None,
    "--accounts-dir",
    help="Directory for account snapshots (default: $ACCOUNTS_DIR or ./accounts).",
)
ClusterOption = typer.Option(
    None,
    "--cluster",
    help="Cluster moniker or RPC URL fixtures are fetched from (default: $SOLANA_CLUSTER or m).",
)
FixturesOption = typer.Option(
    None,
    "--fixtures",
    help="Fixture table file (TOML, YAML or JSON) replacing the built-in table.",
)
NoResetOption = typer.Option(
    False,
    "--no-reset",
    help="Keep the existing ledger instead of starting the validator with -r.",
)


def _build_config(
    programs_dir: Path | None,
    accounts_dir: Path | None,
    cluster: str | None,
    no_reset: bool = False,
) -> LocalnetConfig:
    config = LocalnetConfig.from_env(os.environ)
    overrides: dict = {}
    if programs_dir is not None:
        overrides["programs_dir"] = programs_dir
    if accounts_dir is not None:
        overrides["accounts_dir"] = accounts_dir
    if cluster:
        overrides["cluster"] = cluster
    if no_reset:
        overrides["reset"] = False
    return replace(config, **overrides)


def _load_specs(fixtures: Path | None) -> tuple[ArtifactSpec, ...]:
    if fixtures is None:
        return DEFAULT_FIXTURES
    return load_fixture_table(fixtures)


def _fail(exc: LocalnetError) -> NoReturn:
    report_error(str(exc))
    raise typer.Exit(exc.exit_code) from exc


def start(
    ctx: typer.Context,
    programs_dir: Path | None = ProgramsDirOption,
    accounts_dir: Path | None = AccountsDirOption,
    cluster: str | None = ClusterOption,
    fixtures: Path | None = FixturesOption,
    no_reset: bool = NoResetOption,
) -> None:
    """Provision fixtures, then replace this process with solana-test-validator.

    Unrecognized options and extra arguments are forwarded to the validator
    unchanged, after the fixture bindings.
    """
    passthrough = list(ctx.args)
    try:
        config = _build_config(programs_dir, accounts_dir, cluster, no_reset)
        bootstrap = Bootstrap(config, _load_specs(fixtures))
        bootstrap.provision()
        code = bootstrap.launch(passthrough)
    except LocalnetError as exc:
        _fail(exc)
    raise typer.Exit(code)


cli.command("start", context_settings=PASSTHROUGH_SETTINGS)(start)
validator_app.command(context_settings=PASSTHROUGH_SETTINGS)(start)


@cli.command("provision")
def provision_cmd(
    programs_dir: Path | None = ProgramsDirOption,
    accounts_dir: Path | None = AccountsDirOption,
    cluster: str | None = ClusterOption,
    fixtures: Path | None = FixturesOption,
) -> None:
    """Fetch any missing fixtures without starting the validator."""
    try:
        config = _build_config(programs_dir, accounts_dir, cluster)
        results = Bootstrap(config, _load_specs(fixtures)).provision()
    except LocalnetError as exc:
        _fail(exc)

    fetched = sum(1 for r in results if r.fetched)
    narrate(f"{len(results)} fixtures ready ({fetched} downloaded, {len(results) - fetched} cached)")


@cli.command("plan", context_settings=PASSTHROUGH_SETTINGS)
def plan_cmd(
    ctx: typer.Context,
    programs_dir: Path | None = ProgramsDirOption,
    accounts_dir: Path | None = AccountsDirOption,
    cluster: str | None = ClusterOption,
    fixtures: Path | None = FixturesOption,
    no_reset: bool = NoResetOption,
) -> None:
    """Provision fixtures and print the validator command instead of running it."""
    try:
        config = _build_config(programs_dir, accounts_dir, cluster, no_reset)
        bootstrap = Bootstrap(config, _load_specs(fixtures))
        bootstrap.provision()
        plan = bootstrap.plan(list(ctx.args))
    except LocalnetError as exc:
        _fail(exc)
    typer.echo(render_plan(plan))


@cli.command("doctor")
def doctor_cmd(
    programs_dir: Path | None = ProgramsDirOption,
    accounts_dir: Path | None = AccountsDirOption,
    fixtures: Path | None = FixturesOption,
    as_json: bool = typer.Option(False, "--json", help="Emit the report as JSON."),
) -> None:
    """Report whether a run would succeed, without touching the filesystem.

    Exit codes:
      0 - All checks passed
      2 - One or more checks failed
    """
    try:
        config = _build_config(programs_dir, accounts_dir, None)
        report = run_doctor(config, _load_specs(fixtures))
    except LocalnetError as exc:
        _fail(exc)

    if as_json:
        typer.echo(json.dumps(report.to_dict(), indent=2, sort_keys=True))
    else:
        symbols = {"pass": "✅", "fail": "❌", "warn": "⚠️"}
        console.print(f"localnet doctor ({__version__}): {report.status.upper()}", markup=False)
        for check in report.checks:
            console.print(f"{symbols[check.status]} {check.id}: {check.message}", markup=False)
            for step in check.remediation:
                console.print(f"    - {step}", markup=False)
        for fixture in report.fixtures:
            state = "cached" if fixture["present"] else "missing"
            console.print(f"  [{state}] {fixture['label']} -> {fixture['path']}", markup=False)

    if report.status != "passed":
        raise typer.Exit(2)


def main() -> None:
    validator_app()


if __name__ == "__main__":
    cli()
