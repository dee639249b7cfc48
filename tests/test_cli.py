# SPDX-License-Identifier: Apache-2.0
"""
Command line entry point.
"""

import json

import pytest

from jsonschema_conformance import cli
from jsonschema_conformance.cli import EXIT_FAILURES, EXIT_OK, EXIT_USAGE, _build_pytest_args, main


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in ("JSONSCHEMA_SUITE_ROOT", "JSONSCHEMA_REMOTES_ROOT", "JSONSCHEMA_ENGINE", "JSONSCHEMA_JOBS"):
        monkeypatch.delenv(key, raising=False)


def _run_args(tree, *extra):
    return ["run", "--suite", str(tree["suite"]), "--remotes", str(tree["remotes"]), *extra]


def test_run_passing_suite(suite_tree, capsys):
    rc = main(_run_args(suite_tree))

    out = capsys.readouterr().out
    assert rc == EXIT_OK
    assert "PASS type.json" in out
    assert "3 passed, 0 failed, 0 not run (3 total)" in out


def test_run_reports_failures(suite_tree, write_json, capsys):
    write_json("suite/wrong.json", [
        {"description": "g", "schema": {"type": "integer"},
         "tests": [{"description": "lies", "data": "x", "valid": True}]},
    ])

    rc = main(_run_args(suite_tree, "--failures-only"))

    out = capsys.readouterr().out
    assert rc == EXIT_FAILURES
    assert "FAIL wrong.json" in out
    assert "expected valid=True, got valid=False" in out
    assert "PASS type.json" not in out


def test_run_json_output(suite_tree, capsys):
    rc = main(_run_args(suite_tree, "--json", "--jobs", "2"))

    doc = json.loads(capsys.readouterr().out)
    assert rc == EXIT_OK
    assert doc["kind"] == "suite"
    assert doc["summary"]["passed"] == 3


def test_run_with_mock_engine(suite_tree, capsys):
    rc = main(["-q", *_run_args(suite_tree, "--engine", "tests.mock.mock_engine:MockEngine")])

    assert rc == EXIT_OK
    assert capsys.readouterr().out.strip() == "3 passed, 0 failed, 0 not run"


def test_broken_remotes_exit_with_usage_error(suite_tree, write_json, capsys):
    write_json("remotes/broken.json", raw="{")

    rc = main(_run_args(suite_tree))

    assert rc == EXIT_USAGE
    assert "invalid JSON" in capsys.readouterr().err


def test_bad_engine_spec_exits_with_usage_error(suite_tree, capsys):
    rc = main(_run_args(suite_tree, "--engine", "nope"))

    assert rc == EXIT_USAGE
    assert "Invalid engine spec" in capsys.readouterr().err


def test_list_command(suite_tree, write_json, capsys):
    write_json("suite/broken.json", raw="[")

    rc = main(["list", "--suite", str(suite_tree["suite"])])

    out = capsys.readouterr().out
    assert rc == EXIT_OK
    assert "ERROR" in out
    assert out.strip().splitlines()[-1] == "3 files, 2 groups, 3 cases"


def test_missing_command_is_usage_error(capsys):
    assert main([]) == EXIT_USAGE


def test_pytest_args_default_to_a_single_process():
    args = _build_pytest_args("tests/suite", passthrough_args=["-x"])

    assert args == ["tests/suite", "-x"]


def test_pytest_args_enable_xdist_and_coverage():
    args = _build_pytest_args("tests/suite", jobs=4, coverage=True, quiet=True)

    assert args[:2] == ["tests/suite", "-q"]
    assert args[args.index("-n") + 1] == "4"
    assert "--cov=jsonschema_conformance" in args


def test_pytest_command_forwards_jobs_and_coverage(suite_tree, monkeypatch):
    # the command exports its configuration; register the keys for restore
    for key in ("SUITE_ROOT", "REMOTES_ROOT", "ENGINE", "DRAFT", "SUITE_PATTERN",
                "ID_KEYWORD", "CHECK_FORMATS"):
        monkeypatch.setenv("JSONSCHEMA_" + key, "")
    monkeypatch.setenv("JSONSCHEMA_CHECK_FORMATS", "false")
    seen = []
    monkeypatch.setattr(cli.pytest, "main", lambda args: seen.append(args) or 0)

    rc = main([
        "pytest", "--suite", str(suite_tree["suite"]), "--remotes", str(suite_tree["remotes"]),
        "--jobs", "3", "--cov", "--", "-x",
    ])

    assert rc == EXIT_OK
    (args,) = seen
    assert args[0].endswith("tests/suite") or args[0].endswith("tests\\suite")
    assert "-x" in args
    assert args[args.index("-n") + 1] == "3"
    assert "--cov=jsonschema_conformance" in args
