# jsonschema_conformance/cli.py
# SPDX-License-Identifier: Apache-2.0
"""
JSON Schema Conformance CLI

Run the JSON Schema test suite against an engine with one command.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time
from typing import Any, Dict, List, Optional

try:
    import pytest
except ImportError:  # pragma: no cover
    pytest = None  # type: ignore[assignment]

from jsonschema_conformance.config import ENV_PREFIX, HarnessConfig
from jsonschema_conformance.engine import DRAFTS
from jsonschema_conformance.errors import ConfigError, LoadError
from jsonschema_conformance.fixtures import iter_suite_files
from jsonschema_conformance.report import render_text, summarize, to_dict
from jsonschema_conformance.runner import run_suite

LOG_LEVEL_ENV = ENV_PREFIX + "CONFORMANCE_LOG_LEVEL"
SUITE_TESTS_PATH = "tests/suite"
COV_MODULE = "jsonschema_conformance"

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_USAGE = 2


# --------------------------------------------------------------------------- #
# Internal helpers
# --------------------------------------------------------------------------- #

def _configure_logging(quiet: bool, verbose: bool) -> None:
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = getattr(logging, os.environ.get(LOG_LEVEL_ENV, "WARNING").upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _repo_root() -> str:
    """Best-effort guess of repo root."""
    here = os.path.abspath(os.path.dirname(__file__))
    return os.path.dirname(here)


def _config_from_args(args: argparse.Namespace) -> HarnessConfig:
    return HarnessConfig.from_env(
        suite_root=getattr(args, "suite", None),
        remotes_root=getattr(args, "remotes", None),
        engine=getattr(args, "engine", None),
        draft=getattr(args, "draft", None),
        jobs=getattr(args, "jobs", None),
        time_budget=getattr(args, "time_budget", None),
        pattern=getattr(args, "pattern", None),
        check_formats=True if getattr(args, "check_formats", False) else None,
    )


def _build_pytest_args(
    test_path: str,
    *,
    jobs: int = 1,
    coverage: bool = False,
    quiet: bool = False,
    verbose: bool = False,
    passthrough_args: Optional[List[str]] = None,
) -> List[str]:
    """Build pytest arguments for the suite run."""
    args = [test_path, *(passthrough_args or [])]

    if quiet:
        args.append("-q")
    elif verbose:
        args.append("-vv")

    # pytest-xdist workers
    if jobs > 1:
        args.extend(["-n", str(jobs)])

    # pytest-cov over the harness package
    if coverage:
        args.extend([f"--cov={COV_MODULE}", "--cov-report=term"])

    return args


def _add_suite_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--suite", help="Suite directory (env: JSONSCHEMA_SUITE_ROOT)")
    p.add_argument("--pattern", help="Glob for suite file names (env: JSONSCHEMA_SUITE_PATTERN)")


def _add_engine_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--remotes", help="Remote fixture directory (env: JSONSCHEMA_REMOTES_ROOT)")
    p.add_argument("--engine", help="Engine as 'package.module:ClassName' (env: JSONSCHEMA_ENGINE)")
    p.add_argument("--draft", choices=sorted(DRAFTS), help="Default dialect (env: JSONSCHEMA_DRAFT)")
    p.add_argument(
        "--check-formats", action="store_true",
        help="Treat 'format' as an assertion (env: JSONSCHEMA_CHECK_FORMATS)",
    )


# --------------------------------------------------------------------------- #
# Commands
# --------------------------------------------------------------------------- #

def _cmd_run(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    engine = config.create_engine()

    if not args.json and not args.quiet:
        print(f"Running {config.suite_root} against {engine!r}...")

    start = time.time()
    try:
        report = run_suite(
            engine,
            config.suite_root,
            config.remotes_root,
            jobs=config.jobs,
            time_budget=config.time_budget,
            pattern=config.pattern,
            id_keyword=config.id_keyword,
        )
    except LoadError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_USAGE
    elapsed = time.time() - start

    summary = summarize(report)
    if args.json:
        print(json.dumps(to_dict(report), indent=2, default=str))
    elif args.quiet:
        print(f"{summary.passed} passed, {summary.failed} failed, {summary.not_run} not run")
    else:
        print(render_text(report, failures_only=args.failures_only))
        print(f"Completed in {elapsed:.1f}s")

    return EXIT_OK if summary.failed == 0 else EXIT_FAILURES


def _cmd_list(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    total_files = total_groups = total_cases = 0
    rows: List[Dict[str, Any]] = []

    for suite_file in iter_suite_files(config.suite_root, config.pattern):
        total_files += 1
        total_groups += len(suite_file.groups)
        total_cases += suite_file.case_count
        rows.append({
            "path": str(suite_file.path),
            "groups": len(suite_file.groups),
            "cases": suite_file.case_count,
            "error": str(suite_file.error) if suite_file.error else None,
        })

    if args.json:
        print(json.dumps({"files": rows, "groups": total_groups, "cases": total_cases}, indent=2))
        return EXIT_OK

    for row in rows:
        if row["error"]:
            print(f"  {row['path']}: ERROR {row['error']}")
        else:
            print(f"  {row['path']}: {row['groups']} groups, {row['cases']} cases")
    print(f"{total_files} files, {total_groups} groups, {total_cases} cases")
    return EXIT_OK


def _cmd_pytest(args: argparse.Namespace, passthrough_args: List[str]) -> int:
    if pytest is None:  # pragma: no cover
        print(
            "error: pytest is required for this command.\n"
            "Install test dependencies via:\n"
            "    pip install .[test]",
            file=sys.stderr,
        )
        return EXIT_FAILURES

    config = _config_from_args(args)
    # the suite module reads its configuration from the environment
    os.environ[ENV_PREFIX + "SUITE_ROOT"] = os.path.abspath(config.suite_root)
    os.environ[ENV_PREFIX + "REMOTES_ROOT"] = os.path.abspath(config.remotes_root)
    os.environ[ENV_PREFIX + "ENGINE"] = config.engine
    os.environ[ENV_PREFIX + "DRAFT"] = config.draft
    os.environ[ENV_PREFIX + "SUITE_PATTERN"] = config.pattern
    os.environ[ENV_PREFIX + "ID_KEYWORD"] = config.id_keyword
    os.environ[ENV_PREFIX + "CHECK_FORMATS"] = "true" if config.check_formats else "false"

    root = _repo_root()
    test_path = os.path.join(root, SUITE_TESTS_PATH)
    if not os.path.isdir(test_path):
        print(f"error: test path does not exist: {test_path}", file=sys.stderr)
        return EXIT_USAGE

    pytest_args = _build_pytest_args(
        test_path,
        jobs=config.jobs,
        coverage=args.cov,
        quiet=args.quiet,
        verbose=args.verbose,
        passthrough_args=passthrough_args,
    )
    return int(pytest.main(pytest_args))


# --------------------------------------------------------------------------- #
# main
# --------------------------------------------------------------------------- #

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsonschema-conformance",
        description="Run the JSON Schema test suite against a validation engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  jsonschema-conformance run --suite tests/draft7 --remotes remotes
  jsonschema-conformance run --failures-only --jobs 4
  jsonschema-conformance run --engine mypkg.engine:MyEngine --json
  jsonschema-conformance list --suite tests/draft7
  jsonschema-conformance pytest -- -x --tb=short
  jsonschema-conformance pytest --jobs 4 --cov

Configuration (environment variables):
  JSONSCHEMA_SUITE_ROOT=tests/draft7     Suite directory
  JSONSCHEMA_REMOTES_ROOT=remotes        Remote fixture directory
  JSONSCHEMA_ENGINE=pkg.mod:Class        Engine under test
  JSONSCHEMA_CONFORMANCE_LOG_LEVEL=INFO  Log level
        """.strip(),
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Minimal output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(
        dest="command", required=True, help="command to execute", metavar="COMMAND"
    )

    run_parser = subparsers.add_parser("run", help="Run the suite and print the result tree")
    _add_suite_args(run_parser)
    _add_engine_args(run_parser)
    run_parser.add_argument("-j", "--jobs", type=int, help="Suite files run in parallel")
    run_parser.add_argument(
        "--time-budget", type=float, help="Seconds after which remaining cases are not run"
    )
    run_parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    run_parser.add_argument(
        "--failures-only", action="store_true", help="Only print failing nodes"
    )

    list_parser = subparsers.add_parser("list", help="List suite files with group and case counts")
    _add_suite_args(list_parser)
    list_parser.add_argument("--json", action="store_true", help="Print the listing as JSON")

    pytest_parser = subparsers.add_parser(
        "pytest", help="Run the suite as pytest nodes (args after -- go to pytest)"
    )
    _add_suite_args(pytest_parser)
    _add_engine_args(pytest_parser)
    pytest_parser.add_argument(
        "-j", "--jobs", type=int, help="pytest-xdist workers (env: JSONSCHEMA_JOBS)"
    )
    pytest_parser.add_argument(
        "--cov", action="store_true", help=f"Measure coverage of {COV_MODULE} with pytest-cov"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    cli_args = list(sys.argv[1:] if argv is None else argv)
    passthrough_args: List[str] = []
    if "--" in cli_args:
        split_index = cli_args.index("--")
        passthrough_args = cli_args[split_index + 1:]
        cli_args = cli_args[:split_index]

    parser = build_parser()
    try:
        args = parser.parse_args(cli_args)
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else EXIT_USAGE

    _configure_logging(args.quiet, args.verbose)

    try:
        if args.command == "run":
            return _cmd_run(args)
        if args.command == "list":
            return _cmd_list(args)
        if args.command == "pytest":
            return _cmd_pytest(args, passthrough_args)
    except (ConfigError, LoadError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    # This should never happen due to argparse required=True
    print(f"error: unknown command '{args.command}'\n", file=sys.stderr)
    parser.print_help()
    return EXIT_USAGE


if __name__ == "__main__":
    raise SystemExit(main())
