# SPDX-License-Identifier: Apache-2.0
"""
Validation session construction for a single test group.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from jsonschema_conformance.engine import ValidationEngine
from jsonschema_conformance.errors import ConstructionError
from jsonschema_conformance.models import EMPTY_URI, BaseURI, TestGroup, ValidationSession

LOG = logging.getLogger(__name__)

DEFAULT_ID_KEYWORD = "$id"


def derive_base_uri(schema: Any, id_keyword: str = DEFAULT_ID_KEYWORD) -> BaseURI:
    """
    Base URI for a schema under test.

    Objects carrying the identifier keyword resolve from that identifier;
    everything else (including boolean schemas) gets the empty URI.

    Raises:
        URIParseError: the identifier is not a string or not a URI.
    """
    if isinstance(schema, dict) and id_keyword in schema:
        return BaseURI.parse(schema[id_keyword])
    return EMPTY_URI


def build_session(
    engine: ValidationEngine,
    group: TestGroup,
    remotes: Sequence[Any],
    *,
    id_keyword: str = DEFAULT_ID_KEYWORD,
) -> ValidationSession:
    """
    Build the session for `group` over its schema plus every remote.

    Raises:
        URIParseError: the group schema identifier is malformed.
        ConstructionError: the engine rejected the schema set.
    """
    base_uri = derive_base_uri(group.schema, id_keyword)

    schemas = [group.schema, *remotes]
    try:
        validator = engine.construct(schemas)
    except ConstructionError:
        raise
    except Exception as exc:
        LOG.debug("Engine rejected schema set for %r: %s", group.description, exc)
        raise ConstructionError(
            f"engine rejected schema set: {exc}",
            details={"group": group.description, "cause": type(exc).__name__},
        ) from exc

    return ValidationSession(engine=engine, validator=validator, group=group, base_uri=base_uri)


__all__ = ["DEFAULT_ID_KEYWORD", "derive_base_uri", "build_session"]
