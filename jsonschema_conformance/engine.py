# SPDX-License-Identifier: Apache-2.0
"""
Validation engine boundary.

The harness only ever talks to an engine through two calls:

    construct(schemas)                  -> opaque validator handle
    validate(validator, base_uri, data) -> bool

Any object providing them satisfies ValidationEngine and can be selected with
a 'package.module:ClassName' spec. JsonschemaEngine is the built-in engine,
backed by the `jsonschema` library and its `referencing` registry.
"""

from __future__ import annotations

import importlib
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, Sequence, Tuple, runtime_checkable

import referencing.jsonschema
from jsonschema import (
    Draft3Validator,
    Draft4Validator,
    Draft6Validator,
    Draft7Validator,
    Draft201909Validator,
    Draft202012Validator,
)
from jsonschema.validators import validator_for
from referencing import Registry, Resource, Specification

from jsonschema_conformance.errors import EngineLoadError
from jsonschema_conformance.models import BaseURI

LOG = logging.getLogger(__name__)

DEFAULT_ENGINE = "jsonschema_conformance.engine:JsonschemaEngine"
DEFAULT_DRAFT = "draft7"

DRAFTS: Dict[str, Tuple[type, Specification]] = {
    "draft3": (Draft3Validator, referencing.jsonschema.DRAFT3),
    "draft4": (Draft4Validator, referencing.jsonschema.DRAFT4),
    "draft6": (Draft6Validator, referencing.jsonschema.DRAFT6),
    "draft7": (Draft7Validator, referencing.jsonschema.DRAFT7),
    "draft2019-09": (Draft201909Validator, referencing.jsonschema.DRAFT201909),
    "draft2020-12": (Draft202012Validator, referencing.jsonschema.DRAFT202012),
}


@runtime_checkable
class ValidationEngine(Protocol):
    """Capability boundary between the harness and a JSON Schema implementation."""

    def construct(self, schemas: Sequence[Any]) -> Any:
        """
        Build a validator over an ordered schema set. The first schema is the
        one under test; the rest are available for reference resolution.
        Raise on a structurally invalid schema set.
        """
        ...

    def validate(self, validator: Any, base_uri: BaseURI, instance: Any) -> bool:
        """
        Return the validity verdict for `instance`, resolving from `base_uri`
        (or from the root schema when the URI is empty). Raise only when the
        engine itself fails.
        """
        ...


# ---------------------------------------------------------------------------
# jsonschema-backed engine
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CompiledSchemaSet:
    """Validator handle returned by JsonschemaEngine.construct."""
    root: Any
    root_id: Optional[str]
    registry: Registry


def _declared_id(schema: Any) -> Optional[str]:
    # Read the raw keyword: draft 7 and earlier ignore $id beside $ref when
    # resolving, but the schema still names itself with it.
    if not isinstance(schema, dict):
        return None
    for key in ("$id", "id"):
        value = schema.get(key)
        if isinstance(value, str) and value.rstrip("#"):
            return value.rstrip("#")
    return None


class JsonschemaEngine:
    """
    ValidationEngine over python-jsonschema.

    Args:
        draft:
            Dialect used for schemas that do not declare `$schema`.
        check_formats:
            Treat `format` as an assertion using the dialect's format checker.
    """

    def __init__(self, draft: str = DEFAULT_DRAFT, check_formats: bool = False):
        if draft not in DRAFTS:
            raise EngineLoadError(
                f"unknown draft '{draft}'", details={"available": sorted(DRAFTS)}
            )
        self.draft = draft
        self.check_formats = check_formats
        self._default_cls, self._default_spec = DRAFTS[draft]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(draft={self.draft!r}, check_formats={self.check_formats})"

    def _validator_cls(self, schema: Any) -> type:
        return validator_for(schema, default=self._default_cls)

    def construct(self, schemas: Sequence[Any]) -> CompiledSchemaSet:
        if not schemas:
            raise ValueError("construct() needs at least the schema under test")

        resources = []
        for schema in schemas:
            self._validator_cls(schema).check_schema(schema)
            resource = Resource.from_contents(schema, default_specification=self._default_spec)
            uri = resource.id()
            if uri:
                resources.append((uri.rstrip("#"), resource))

        registry = Registry().with_resources(resources).crawl()
        root = schemas[0]
        return CompiledSchemaSet(root=root, root_id=_declared_id(root), registry=registry)

    def validate(self, validator: CompiledSchemaSet, base_uri: BaseURI, instance: Any) -> bool:
        schema = validator.root
        target = str(base_uri).rstrip("#")
        if target and target != validator.root_id:
            schema = validator.registry.resolver().lookup(str(base_uri)).contents

        cls = self._validator_cls(schema)
        checker = cls.FORMAT_CHECKER if self.check_formats else None
        return cls(schema, registry=validator.registry, format_checker=checker).is_valid(instance)


# ---------------------------------------------------------------------------
# Engine selection
# ---------------------------------------------------------------------------

def _load_class_from_spec(spec: str) -> type:
    """Load a class from a 'package.module:ClassName' string."""
    module_name, _, class_name = spec.partition(":")
    if not module_name or not class_name:
        raise EngineLoadError(
            f"Invalid engine spec '{spec}'. Expected 'package.module:ClassName'."
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise EngineLoadError(
            f"Failed to import engine module '{module_name}' for spec '{spec}'."
        ) from exc

    try:
        cls = getattr(module, class_name)
    except AttributeError as exc:
        raise EngineLoadError(
            f"Engine class '{class_name}' not found in module '{module_name}' "
            f"for spec '{spec}'."
        ) from exc

    if not inspect.isclass(cls):
        raise EngineLoadError(
            f"Engine spec must resolve to a class; got {type(cls)!r} from {spec!r}."
        )
    return cls


def load_engine(spec: Optional[str] = None, **options: Any) -> ValidationEngine:
    """
    Instantiate the engine named by `spec` (default: JsonschemaEngine).

    Keyword options are passed to the constructor; engines that take no
    arguments are constructed bare.
    """
    spec = spec or DEFAULT_ENGINE
    cls = _load_class_from_spec(spec)

    try:
        engine = cls(**options)
    except TypeError:
        try:
            engine = cls()
        except TypeError as exc:
            raise EngineLoadError(
                f"Failed to instantiate engine '{spec}'. Ensure it has a no-arg "
                f"constructor or accepts {sorted(options)}."
            ) from exc

    if not isinstance(engine, ValidationEngine):
        raise EngineLoadError(
            f"Engine '{spec}' does not provide construct() and validate()."
        )
    LOG.debug("Using engine %r", engine)
    return engine


__all__ = [
    "DEFAULT_ENGINE",
    "DEFAULT_DRAFT",
    "DRAFTS",
    "ValidationEngine",
    "CompiledSchemaSet",
    "JsonschemaEngine",
    "load_engine",
]
