# SPDX-License-Identifier: Apache-2.0
"""
Built-in jsonschema engine and engine selection.
"""

import pytest
from jsonschema.exceptions import SchemaError

from jsonschema_conformance.engine import (
    DEFAULT_ENGINE,
    JsonschemaEngine,
    ValidationEngine,
    load_engine,
)
from jsonschema_conformance.errors import EngineLoadError
from jsonschema_conformance.models import EMPTY_URI, BaseURI
from tests.mock.mock_engine import MockEngine

REMOTES = [
    {"$id": "http://localhost:1234/integer.json", "type": "integer"},
    {
        "$id": "http://localhost:1234/subSchemas.json",
        "definitions": {
            "integer": {"type": "integer"},
            "refToInteger": {"$ref": "#/definitions/integer"},
        },
    },
]


@pytest.fixture
def jsonschema_engine():
    return JsonschemaEngine()


def test_satisfies_engine_protocol(jsonschema_engine):
    assert isinstance(jsonschema_engine, ValidationEngine)


def test_integer_type_verdicts(jsonschema_engine):
    validator = jsonschema_engine.construct([{"type": "integer"}])

    assert jsonschema_engine.validate(validator, EMPTY_URI, 5) is True
    assert jsonschema_engine.validate(validator, EMPTY_URI, "x") is False


def test_malformed_schema_is_rejected(jsonschema_engine):
    with pytest.raises(SchemaError):
        jsonschema_engine.construct([{"type": 123}])


def test_malformed_remote_is_rejected(jsonschema_engine):
    with pytest.raises(SchemaError):
        jsonschema_engine.construct([{}, {"$id": "http://localhost:1234/bad.json", "minimum": "x"}])


def test_empty_schema_list_is_rejected(jsonschema_engine):
    with pytest.raises(ValueError):
        jsonschema_engine.construct([])


@pytest.mark.parametrize(
    "ref",
    [
        "http://localhost:1234/integer.json",
        "http://localhost:1234/subSchemas.json#/definitions/integer",
        "http://localhost:1234/subSchemas.json#/definitions/refToInteger",
    ],
)
def test_remote_refs_resolve(jsonschema_engine, ref):
    validator = jsonschema_engine.construct([{"$ref": ref}, *REMOTES])

    assert jsonschema_engine.validate(validator, EMPTY_URI, 1) is True
    assert jsonschema_engine.validate(validator, EMPTY_URI, "a") is False


def test_relative_ref_resolves_against_schema_id(jsonschema_engine):
    schema = {"$id": "http://localhost:1234/", "items": {"$ref": "integer.json"}}
    validator = jsonschema_engine.construct([schema, *REMOTES])
    base = BaseURI("http://localhost:1234/")

    assert jsonschema_engine.validate(validator, base, [1, 2]) is True
    assert jsonschema_engine.validate(validator, base, [1, "a"]) is False


def test_base_uri_selects_registered_schema(jsonschema_engine):
    validator = jsonschema_engine.construct([{"type": "string"}, *REMOTES])
    base = BaseURI("http://localhost:1234/integer.json")

    assert jsonschema_engine.validate(validator, base, 3) is True
    assert jsonschema_engine.validate(validator, EMPTY_URI, 3) is False


def test_unknown_base_uri_raises(jsonschema_engine):
    validator = jsonschema_engine.construct([{"type": "string"}])

    with pytest.raises(Exception):
        jsonschema_engine.validate(validator, BaseURI("http://nowhere.example/x.json"), 1)


def test_validation_is_deterministic(jsonschema_engine):
    validator = jsonschema_engine.construct([{"type": "integer", "minimum": 2}])

    first = [jsonschema_engine.validate(validator, EMPTY_URI, v) for v in (1, 2, "x")]
    second = [jsonschema_engine.validate(validator, EMPTY_URI, v) for v in (1, 2, "x")]

    assert first == second == [False, True, False]


def test_format_checking_is_opt_in():
    schema = {"format": "ipv4"}
    lenient = JsonschemaEngine()
    strict = JsonschemaEngine(check_formats=True)

    assert lenient.validate(lenient.construct([schema]), EMPTY_URI, "not-an-ip") is True
    assert strict.validate(strict.construct([schema]), EMPTY_URI, "not-an-ip") is False


def test_declared_dialect_wins_over_default():
    # draft 2020-12 prefixItems is ignored by draft 7
    schema = {
        "$schema": "https://json-schema.org/draft/2020-12/schema",
        "prefixItems": [{"type": "integer"}],
    }
    engine = JsonschemaEngine(draft="draft7")

    assert engine.validate(engine.construct([schema]), EMPTY_URI, ["a"]) is False


def test_unknown_draft_is_rejected():
    with pytest.raises(EngineLoadError):
        JsonschemaEngine(draft="draft99")


# ---------------------------------------------------------------------------
# load_engine
# ---------------------------------------------------------------------------

def test_load_default_engine_with_options():
    engine = load_engine(None, draft="draft2020-12", check_formats=True)

    assert isinstance(engine, JsonschemaEngine)
    assert engine.draft == "draft2020-12"
    assert engine.check_formats is True


def test_load_engine_falls_back_to_no_arg_constructor():
    engine = load_engine("tests.mock.mock_engine:MockEngine", draft="draft7")

    assert isinstance(engine, MockEngine)


@pytest.mark.parametrize(
    "spec",
    [
        "no-colon",
        "tests.mock.does_not_exist:Engine",
        "tests.mock.mock_engine:Missing",
        "tests.mock.mock_engine:_TYPE_CHECKS",
        "tests.mock.mock_engine:NotAnEngine",
    ],
    ids=["bad-format", "missing-module", "missing-class", "not-a-class", "not-an-engine"],
)
def test_bad_engine_specs(spec):
    with pytest.raises(EngineLoadError):
        load_engine(spec)


def test_default_engine_spec_resolves():
    assert isinstance(load_engine(DEFAULT_ENGINE), JsonschemaEngine)


def test_engine_fixture_is_an_engine(engine):
    assert isinstance(engine, ValidationEngine)
