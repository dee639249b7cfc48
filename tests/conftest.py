# SPDX-License-Identifier: Apache-2.0
"""
Shared pytest fixtures for the JSON Schema conformance harness.

The `engine` fixture is pluggable: set JSONSCHEMA_ENGINE to a
'package.module:ClassName' spec to run the engine-level tests against another
implementation. The default is the built-in jsonschema engine.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import pytest

from jsonschema_conformance.engine import DEFAULT_ENGINE, ValidationEngine, load_engine
from tests.mock.mock_engine import MockEngine

ENGINE_ENV = "JSONSCHEMA_ENGINE"
DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture(scope="session")
def engine() -> ValidationEngine:
    """Engine under test, resolved from JSONSCHEMA_ENGINE (or the default)."""
    return load_engine(os.getenv(ENGINE_ENV, DEFAULT_ENGINE))


@pytest.fixture
def mock_engine() -> MockEngine:
    return MockEngine()


@pytest.fixture
def write_json(tmp_path: Path) -> Callable[..., Path]:
    """Write a JSON document at a path relative to tmp_path."""
    def _write(rel: str, doc: Any = None, *, raw: Optional[str] = None) -> Path:
        p = tmp_path / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(raw if raw is not None else json.dumps(doc), encoding="utf-8")
        return p
    return _write


@pytest.fixture
def suite_tree(tmp_path: Path, write_json) -> Dict[str, Path]:
    """
    A small suite and remote tree:

        remotes/integer.json            {"$id": ..., "type": "integer"}
        remotes/nested/string.json      {"$id": ..., "type": "string"}
        suite/type.json                 one group, two passing cases
        suite/optional/boolean.json     one group, one passing case
    """
    write_json("remotes/integer.json", {
        "$id": "http://localhost:1234/integer.json",
        "type": "integer",
    })
    write_json("remotes/nested/string.json", {
        "$id": "http://localhost:1234/nested/string.json",
        "type": "string",
    })
    write_json("suite/type.json", [
        {
            "description": "integer type matches integers",
            "schema": {"type": "integer"},
            "tests": [
                {"description": "an integer is an integer", "data": 5, "valid": True},
                {"description": "a string is not an integer", "data": "x", "valid": False},
            ],
        },
    ])
    write_json("suite/optional/boolean.json", [
        {
            "description": "boolean schema true",
            "schema": True,
            "tests": [
                {"description": "anything is valid", "data": {"a": 1}, "valid": True},
            ],
        },
    ])
    return {"root": tmp_path, "suite": tmp_path / "suite", "remotes": tmp_path / "remotes"}


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    markers = [
        "suite: JSON Schema test suite conformance cases",
        "slow: Tests that take longer to run (skip with -m 'not slow')",
    ]
    for marker in markers:
        config.addinivalue_line("markers", marker)
