# SPDX-License-Identifier: Apache-2.0
"""
Error taxonomy for the conformance harness.

Every failure the harness can attribute to a report node is a subclass of
ConformanceError. The class decides how far a failure propagates:

- LoadError (FilesystemError, ParseError, URIParseError):
    fatal for the remote fixture set, otherwise scoped to the file or group
    being loaded.
- ConstructionError:
    the engine rejected the schema set for a group; scoped to that group.
- RuntimeValidationError, AssertionMismatch:
    always case-local.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional, Union


class ConformanceError(Exception):
    """
    Base exception for all harness errors.

    Attributes:
        message:
            Human-readable description.
        path:
            Filesystem path the error relates to, when there is one.
        details:
            Additional JSON-safe context for reports.
    """
    def __init__(
        self,
        message: str = "",
        *,
        path: Optional[Union[str, Path]] = None,
        details: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.path = str(path) if path is not None else None
        self.details = dict(details or {})

    @property
    def kind(self) -> str:
        return self.__class__.__name__

    def __str__(self) -> str:
        base = self.message or self.kind
        if self.path:
            base += f" [path={self.path}]"
        if self.details:
            base += f" details={self.details}"
        return base


class LoadError(ConformanceError):
    """Fixture or suite content could not be loaded."""


class FilesystemError(LoadError):
    """A directory walk or file read failed."""


class ParseError(LoadError):
    """A file is not valid JSON or does not have the expected suite shape."""


class URIParseError(LoadError):
    """A schema identifier could not be parsed as a URI."""


class ConstructionError(ConformanceError):
    """The engine rejected the combined schema set for a group."""


class RuntimeValidationError(ConformanceError):
    """The engine raised while validating an instance."""


class AssertionMismatch(ConformanceError):
    """The engine verdict differs from the expected verdict."""
    def __init__(self, expected: bool, actual: bool, **kwargs: Any):
        kwargs.setdefault("details", {"expected": expected, "actual": actual})
        super().__init__(f"expected valid={expected}, got valid={actual}", **kwargs)
        self.expected = expected
        self.actual = actual


class ConfigError(ConformanceError):
    """Harness configuration is invalid."""


class EngineLoadError(ConfigError):
    """An engine spec could not be resolved to a usable engine."""


__all__ = [
    "ConformanceError",
    "LoadError",
    "FilesystemError",
    "ParseError",
    "URIParseError",
    "ConstructionError",
    "RuntimeValidationError",
    "AssertionMismatch",
    "ConfigError",
    "EngineLoadError",
]
