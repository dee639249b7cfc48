# SPDX-License-Identifier: Apache-2.0
"""
Harness configuration.

Values come from keyword overrides first, then environment variables, then
defaults:

    JSONSCHEMA_SUITE_ROOT      suite directory           (default: tests/draft7)
    JSONSCHEMA_REMOTES_ROOT    remote fixture directory  (default: remotes)
    JSONSCHEMA_ENGINE          'package.module:Class'    (default: built-in jsonschema engine)
    JSONSCHEMA_DRAFT           default dialect           (default: draft7)
    JSONSCHEMA_JOBS            parallel suite files      (default: 1)
    JSONSCHEMA_TIME_BUDGET     seconds before remaining cases are not run
    JSONSCHEMA_SUITE_PATTERN   glob for suite file names (default: *)
    JSONSCHEMA_ID_KEYWORD      schema identifier keyword (default: $id)
    JSONSCHEMA_CHECK_FORMATS   assert `format` keywords  (default: false)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from jsonschema_conformance.engine import DEFAULT_DRAFT, DEFAULT_ENGINE, DRAFTS, ValidationEngine, load_engine
from jsonschema_conformance.errors import ConfigError
from jsonschema_conformance.session import DEFAULT_ID_KEYWORD

ENV_PREFIX = "JSONSCHEMA_"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


def _env_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def _env_int(name: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def _env_float(name: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class HarnessConfig:
    """Immutable harness configuration with validation."""
    suite_root: Path = Path("tests/draft7")
    remotes_root: Path = Path("remotes")
    engine: str = DEFAULT_ENGINE
    draft: str = DEFAULT_DRAFT
    jobs: int = 1
    time_budget: Optional[float] = None
    pattern: str = "*"
    id_keyword: str = DEFAULT_ID_KEYWORD
    check_formats: bool = False

    def validate(self) -> "HarnessConfig":
        """Check configuration values for consistency; returns self."""
        if self.jobs < 1:
            raise ConfigError(f"jobs must be >= 1, got {self.jobs}")
        if self.time_budget is not None and self.time_budget <= 0:
            raise ConfigError(f"time_budget must be positive, got {self.time_budget}")
        if self.draft not in DRAFTS:
            raise ConfigError(
                f"unknown draft '{self.draft}'", details={"available": sorted(DRAFTS)}
            )
        if not self.pattern:
            raise ConfigError("pattern cannot be empty")
        if not self.id_keyword:
            raise ConfigError("id_keyword cannot be empty")
        return self

    @classmethod
    def from_env(
        cls, env: Optional[Mapping[str, str]] = None, **overrides: Any
    ) -> "HarnessConfig":
        """
        Build a configuration from the environment, then apply non-None
        keyword overrides (typically parsed CLI flags).
        """
        env = os.environ if env is None else env
        values: Dict[str, Any] = {}

        def get(key: str) -> Optional[str]:
            return env.get(ENV_PREFIX + key)

        if get("SUITE_ROOT"):
            values["suite_root"] = Path(get("SUITE_ROOT"))
        if get("REMOTES_ROOT"):
            values["remotes_root"] = Path(get("REMOTES_ROOT"))
        if get("ENGINE"):
            values["engine"] = get("ENGINE")
        if get("DRAFT"):
            values["draft"] = get("DRAFT")
        if get("JOBS"):
            values["jobs"] = _env_int(ENV_PREFIX + "JOBS", get("JOBS"))
        if get("TIME_BUDGET"):
            values["time_budget"] = _env_float(ENV_PREFIX + "TIME_BUDGET", get("TIME_BUDGET"))
        if get("SUITE_PATTERN"):
            values["pattern"] = get("SUITE_PATTERN")
        if get("ID_KEYWORD"):
            values["id_keyword"] = get("ID_KEYWORD")
        if get("CHECK_FORMATS") is not None:
            values["check_formats"] = _env_bool(ENV_PREFIX + "CHECK_FORMATS", get("CHECK_FORMATS"))

        for key, value in overrides.items():
            if value is None:
                continue
            if key in ("suite_root", "remotes_root"):
                value = Path(value)
            values[key] = value

        return cls(**values).validate()

    def with_overrides(self, **overrides: Any) -> "HarnessConfig":
        return replace(self, **{k: v for k, v in overrides.items() if v is not None}).validate()

    def create_engine(self) -> ValidationEngine:
        """Instantiate the configured engine with this configuration's options."""
        return load_engine(self.engine, draft=self.draft, check_formats=self.check_formats)


__all__ = ["ENV_PREFIX", "HarnessConfig"]
