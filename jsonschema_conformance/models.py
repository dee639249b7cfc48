# SPDX-License-Identifier: Apache-2.0
"""
Immutable value types for suite documents and validation sessions.

Suite content is parsed once into frozen dataclasses and shared read-only
across every session built from it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Tuple
from urllib.parse import SplitResult, urlsplit

from jsonschema_conformance.errors import LoadError, URIParseError


@dataclass(frozen=True)
class TestCase:
    """One instance to validate and its expected verdict."""
    __test__ = False

    description: str
    data: Any
    valid: bool


@dataclass(frozen=True)
class TestGroup:
    """A schema under test and the ordered cases evaluated against it."""
    __test__ = False

    description: str
    schema: Any
    tests: Tuple[TestCase, ...] = ()


@dataclass(frozen=True)
class SuiteFile:
    """
    One suite document. `error` is set instead of `groups` when the file
    could not be read or parsed.
    """
    path: Path
    groups: Tuple[TestGroup, ...] = ()
    error: Optional[LoadError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def case_count(self) -> int:
        return sum(len(g.tests) for g in self.groups)


@dataclass(frozen=True)
class BaseURI:
    """
    Base URI a schema resolves against. The empty string is the zero URI:
    validation then starts at the root schema rather than a registry lookup.
    """
    raw: str = ""

    @classmethod
    def parse(cls, value: Any) -> "BaseURI":
        if not isinstance(value, str):
            raise URIParseError(
                f"schema identifier must be a string, got {type(value).__name__}",
                details={"value": repr(value)},
            )
        if any(ord(ch) < 0x20 or ord(ch) == 0x7F for ch in value):
            raise URIParseError(
                "schema identifier contains a control character",
                details={"value": value},
            )
        try:
            parts = urlsplit(value)
            parts.port  # validates the port component
        except ValueError as exc:
            raise URIParseError(
                f"invalid schema identifier {value!r}: {exc}",
                details={"value": value},
            ) from exc
        return cls(value)

    @property
    def parts(self) -> SplitResult:
        return urlsplit(self.raw)

    def __bool__(self) -> bool:
        return bool(self.raw)

    def __str__(self) -> str:
        return self.raw


EMPTY_URI = BaseURI()


@dataclass(frozen=True)
class ValidationSession:
    """
    Validator for a single group: the engine, its opaque validator handle and
    the base URI derived from the group schema. Owned by one group run.
    """
    engine: Any
    validator: Any
    group: TestGroup
    base_uri: BaseURI = field(default=EMPTY_URI)


__all__ = [
    "TestCase",
    "TestGroup",
    "SuiteFile",
    "BaseURI",
    "EMPTY_URI",
    "ValidationSession",
]
