# SPDX-License-Identifier: Apache-2.0
"""
Case execution and the file/group/case driver.

run_suite() loads the remote fixtures once, walks the suite tree and returns a
ReportNode tree. Remote load failures raise; everything below that is
captured on the most specific node it belongs to.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, List, Optional, Sequence, Union

from jsonschema_conformance.engine import ValidationEngine
from jsonschema_conformance.errors import (
    AssertionMismatch,
    ConstructionError,
    LoadError,
    RuntimeValidationError,
)
from jsonschema_conformance.fixtures import iter_suite_files, load_remotes
from jsonschema_conformance.models import SuiteFile, TestCase, TestGroup, ValidationSession
from jsonschema_conformance.report import (
    NodeKind,
    ReportNode,
    Status,
    case_node,
    parent_node,
)
from jsonschema_conformance.session import DEFAULT_ID_KEYWORD, build_session

LOG = logging.getLogger(__name__)


def _expired(deadline: Optional[float]) -> bool:
    return deadline is not None and time.monotonic() >= deadline


def run_case(
    session: ValidationSession,
    case: TestCase,
    *,
    deadline: Optional[float] = None,
) -> ReportNode:
    """
    Validate one case's data and compare against its expected verdict.

    Engine exceptions become RuntimeValidationError; a verdict mismatch becomes
    AssertionMismatch carrying both values. Neither propagates.
    """
    if _expired(deadline):
        return case_node(case.description, status=Status.NOT_RUN, expected=case.valid)

    start = time.perf_counter()
    try:
        actual = session.engine.validate(session.validator, session.base_uri, case.data)
    except Exception as exc:
        error = RuntimeValidationError(
            f"engine failed during validation: {exc}",
            details={"case": case.description, "cause": type(exc).__name__},
        )
        error.__cause__ = exc
        LOG.debug("Engine error on case %r: %s", case.description, exc)
        return case_node(
            case.description,
            status=Status.FAILED,
            error=error,
            expected=case.valid,
            duration=time.perf_counter() - start,
        )
    elapsed = time.perf_counter() - start

    if not isinstance(actual, bool):
        error = RuntimeValidationError(
            f"engine returned a non-boolean verdict: {actual!r}",
            details={"case": case.description},
        )
        return case_node(
            case.description, status=Status.FAILED, error=error, expected=case.valid, duration=elapsed
        )

    if actual != case.valid:
        return case_node(
            case.description,
            status=Status.FAILED,
            error=AssertionMismatch(expected=case.valid, actual=actual),
            expected=case.valid,
            actual=actual,
            duration=elapsed,
        )

    return case_node(
        case.description, status=Status.PASSED, expected=case.valid, actual=actual, duration=elapsed
    )


def run_group(
    engine: ValidationEngine,
    group: TestGroup,
    remotes: Sequence[Any],
    *,
    id_keyword: str = DEFAULT_ID_KEYWORD,
    deadline: Optional[float] = None,
) -> ReportNode:
    """Build the group's session and run every case against it."""
    start = time.perf_counter()
    if _expired(deadline):
        skipped = [
            case_node(c.description, status=Status.NOT_RUN, expected=c.valid) for c in group.tests
        ]
        return parent_node(NodeKind.GROUP, group.description, skipped)

    try:
        session = build_session(engine, group, remotes, id_keyword=id_keyword)
    except (LoadError, ConstructionError) as exc:
        LOG.warning("Group %r not run: %s", group.description, exc)
        return parent_node(
            NodeKind.GROUP, group.description, error=exc, duration=time.perf_counter() - start
        )

    children = [run_case(session, case, deadline=deadline) for case in group.tests]
    return parent_node(
        NodeKind.GROUP, group.description, children, duration=time.perf_counter() - start
    )


def run_file(
    engine: ValidationEngine,
    suite_file: SuiteFile,
    remotes: Sequence[Any],
    *,
    name: Optional[str] = None,
    id_keyword: str = DEFAULT_ID_KEYWORD,
    deadline: Optional[float] = None,
) -> ReportNode:
    """Run every group of one suite file; a load error fails the file alone."""
    name = name or str(suite_file.path)
    if suite_file.error is not None:
        return parent_node(NodeKind.FILE, name, error=suite_file.error)

    start = time.perf_counter()
    children = [
        run_group(engine, group, remotes, id_keyword=id_keyword, deadline=deadline)
        for group in suite_file.groups
    ]
    return parent_node(NodeKind.FILE, name, children, duration=time.perf_counter() - start)


def _display_name(path: Path, root: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return str(path)


def run_suite(
    engine: ValidationEngine,
    suite_root: Union[str, Path],
    remotes_root: Union[str, Path],
    *,
    jobs: int = 1,
    time_budget: Optional[float] = None,
    pattern: str = "*",
    id_keyword: str = DEFAULT_ID_KEYWORD,
) -> ReportNode:
    """
    Run the whole suite and return its report tree.

    Raises:
        LoadError: the remote fixtures could not be loaded completely, or the
            suite root cannot be walked.
    """
    start = time.perf_counter()
    remotes = load_remotes(remotes_root)
    deadline = time.monotonic() + time_budget if time_budget is not None else None
    root = Path(suite_root)

    def _run(suite_file: SuiteFile) -> ReportNode:
        return run_file(
            engine,
            suite_file,
            remotes,
            name=_display_name(suite_file.path, root),
            id_keyword=id_keyword,
            deadline=deadline,
        )

    files = iter_suite_files(root, pattern)
    if jobs <= 1:
        children: List[ReportNode] = [_run(f) for f in files]
    else:
        # one future per file, collected in discovery order
        with ThreadPoolExecutor(max_workers=jobs, thread_name_prefix="conformance") as pool:
            futures = [pool.submit(_run, f) for f in files]
            children = [f.result() for f in futures]

    report = parent_node(NodeKind.SUITE, str(root), children, duration=time.perf_counter() - start)
    LOG.info("Suite %s finished: %s", root, report.status.value)
    return report


__all__ = ["run_case", "run_group", "run_file", "run_suite"]
