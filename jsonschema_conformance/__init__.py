# jsonschema_conformance/__init__.py
# SPDX-License-Identifier: Apache-2.0

"""
JSON Schema Conformance Harness - Public API

Drives a JSON Schema implementation through the language-agnostic test suite
and reports a file -> group -> case pass/fail tree.
"""

from jsonschema_conformance.config import HarnessConfig
from jsonschema_conformance.engine import (
    DEFAULT_DRAFT,
    DEFAULT_ENGINE,
    CompiledSchemaSet,
    JsonschemaEngine,
    ValidationEngine,
    load_engine,
)
from jsonschema_conformance.errors import (
    AssertionMismatch,
    ConfigError,
    ConformanceError,
    ConstructionError,
    EngineLoadError,
    FilesystemError,
    LoadError,
    ParseError,
    RuntimeValidationError,
    URIParseError,
)
from jsonschema_conformance.fixtures import (
    iter_suite_files,
    load_remotes,
    load_suite_file,
    parse_suite_document,
)
from jsonschema_conformance.models import (
    EMPTY_URI,
    BaseURI,
    SuiteFile,
    TestCase,
    TestGroup,
    ValidationSession,
)
from jsonschema_conformance.report import (
    NodeKind,
    ReportNode,
    Status,
    Summary,
    iter_failures,
    render_text,
    summarize,
    to_dict,
)
from jsonschema_conformance.runner import run_case, run_file, run_group, run_suite
from jsonschema_conformance.session import build_session, derive_base_uri

__version__ = "0.1.0"

__all__ = [
    # Configuration
    "HarnessConfig",

    # Engine boundary
    "DEFAULT_DRAFT",
    "DEFAULT_ENGINE",
    "CompiledSchemaSet",
    "JsonschemaEngine",
    "ValidationEngine",
    "load_engine",

    # Error types
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

    # Loading
    "load_remotes",
    "iter_suite_files",
    "load_suite_file",
    "parse_suite_document",

    # Models
    "BaseURI",
    "EMPTY_URI",
    "SuiteFile",
    "TestCase",
    "TestGroup",
    "ValidationSession",

    # Sessions and execution
    "build_session",
    "derive_base_uri",
    "run_case",
    "run_group",
    "run_file",
    "run_suite",

    # Reporting
    "NodeKind",
    "ReportNode",
    "Status",
    "Summary",
    "iter_failures",
    "render_text",
    "summarize",
    "to_dict",
]
