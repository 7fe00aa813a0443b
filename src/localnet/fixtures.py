"""Declarative fixture table: which artifacts the validator is preloaded with."""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from localnet.config import LocalnetConfig
from localnet.errors import FixtureTableError


class FetchMethod(str, Enum):
    """External operation used to materialize an artifact."""

    PROGRAM_DUMP = "program-dump"
    ACCOUNT_SNAPSHOT = "account-snapshot"


@dataclass(frozen=True)
class ArtifactSpec:
    """A single artifact keyed by its on-chain address."""

    identity: str
    file_name: str
    method: FetchMethod
    label: str = ""

    @property
    def display_name(self) -> str:
        return self.label or self.identity

    def base_dir(self, config: LocalnetConfig) -> Path:
        """Configured (unresolved) directory this artifact lives in."""
        if self.method is FetchMethod.PROGRAM_DUMP:
            return config.programs_dir
        return config.accounts_dir

    def target_path(self, config: LocalnetConfig) -> Path:
        """Configured (unresolved) path of the artifact file."""
        return self.base_dir(config) / self.file_name


DEFAULT_FIXTURES: tuple[ArtifactSpec, ...] = (
    ArtifactSpec(
        identity="metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s",
        file_name="mpl-token-metadata.so",
        method=FetchMethod.PROGRAM_DUMP,
        label="MPL Token Metadata program",
    ),
    ArtifactSpec(
        identity="6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBEwF6P",
        file_name="pumpfun.so",
        method=FetchMethod.PROGRAM_DUMP,
        label="Pump.fun program",
    ),
    ArtifactSpec(
        identity="pAMMBay6oceH9fJKBRHGP5D4bD4sWpmSwMn52FMfXEA",
        file_name="pumpamm.so",
        method=FetchMethod.PROGRAM_DUMP,
        label="Pump.fun AMM program",
    ),
    ArtifactSpec(
        identity="4wTV1YmiEkRvAtNtsSGPtUrqRYQMe5SKy2uB4Jjaxnjf",
        file_name="4wTV1YmiEkRvAtNtsSGPtUrqRYQMe5SKy2uB4Jjaxnjf.json",
        method=FetchMethod.ACCOUNT_SNAPSHOT,
        label="Pump.fun Global Account",
    ),
    ArtifactSpec(
        identity="ADyA8hdefvWN2dbGGWFotbzWxrAvLW83WG6QCVXvJKqw",
        file_name="ADyA8hdefvWN2dbGGWFotbzWxrAvLW83WG6QCVXvJKqw.json",
        method=FetchMethod.ACCOUNT_SNAPSHOT,
        label="Pump.fun AMM Global Account",
    ),
)


def fixtures_from_dict(data: dict[str, Any]) -> tuple[ArtifactSpec, ...]:
    """Parse ``{"fixture": [{identity, file_name, method, label?}, ...]}``."""
    entries = data.get("fixture")
    if not isinstance(entries, list) or not entries:
        raise FixtureTableError("fixture table must contain a non-empty 'fixture' list")

    specs: list[ArtifactSpec] = []
    seen: set[str] = set()
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise FixtureTableError(f"fixture #{index} is not a table")
        try:
            identity = str(entry["identity"])
            file_name = str(entry["file_name"])
            method = FetchMethod(entry["method"])
        except KeyError as e:
            raise FixtureTableError(f"fixture #{index} is missing {e}") from e
        except ValueError as e:
            raise FixtureTableError(f"fixture #{index}: {e}") from e

        if Path(file_name).name != file_name:
            raise FixtureTableError(f"fixture #{index}: file_name must be a bare file name, got {file_name!r}")
        key = f"{method.value}:{file_name}"
        if key in seen:
            raise FixtureTableError(f"fixture #{index}: duplicate target {file_name!r}")
        seen.add(key)

        specs.append(
            ArtifactSpec(
                identity=identity,
                file_name=file_name,
                method=method,
                label=str(entry.get("label", "")),
            )
        )
    return tuple(specs)


def load_fixture_table(path: Path) -> tuple[ArtifactSpec, ...]:
    """Load a fixture table from a TOML, YAML or JSON file.

    Raises:
        FixtureTableError: If the file is missing, malformed or invalid
    """
    if not path.is_file():
        raise FixtureTableError(f"fixture table not found: {path}")

    suffix = path.suffix.lower()
    try:
        if suffix == ".toml":
            with open(path, "rb") as f:
                data = tomllib.load(f)
        elif suffix in (".yaml", ".yml"):
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        elif suffix == ".json":
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        else:
            raise FixtureTableError(f"unsupported fixture table format: {path}")
    except (tomllib.TOMLDecodeError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise FixtureTableError(f"malformed fixture table at {path}: {e}") from e

    if not isinstance(data, dict):
        raise FixtureTableError(f"invalid fixture table structure in {path}")
    return fixtures_from_dict(data)
