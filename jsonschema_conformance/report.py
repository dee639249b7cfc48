# SPDX-License-Identifier: Apache-2.0
"""
Hierarchical pass/fail reporting: suite -> file -> group -> case.

Nodes are immutable and built bottom-up, so each result slot is written
exactly once. A parent's status is derived from its own error and its
children; a failing child never hides its siblings.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from jsonschema_conformance.errors import ConformanceError


class Status(str, enum.Enum):
    PASSED = "passed"
    FAILED = "failed"
    NOT_RUN = "not_run"


class NodeKind(str, enum.Enum):
    SUITE = "suite"
    FILE = "file"
    GROUP = "group"
    CASE = "case"


@dataclass(frozen=True)
class ReportNode:
    kind: NodeKind
    name: str
    status: Status
    error: Optional[ConformanceError] = None
    expected: Optional[bool] = None
    actual: Optional[bool] = None
    children: Tuple["ReportNode", ...] = ()
    duration: float = 0.0

    @property
    def passed(self) -> bool:
        return self.status is Status.PASSED

    @property
    def failed(self) -> bool:
        return self.status is Status.FAILED


@dataclass(frozen=True)
class Summary:
    passed: int = 0
    failed: int = 0
    not_run: int = 0

    @property
    def total(self) -> int:
        return self.passed + self.failed + self.not_run

    @property
    def ok(self) -> bool:
        return self.failed == 0 and self.not_run == 0


def aggregate_status(
    children: Sequence[ReportNode], error: Optional[ConformanceError] = None
) -> Status:
    """Logical AND over children; an error on the node itself always fails it."""
    if error is not None:
        return Status.FAILED
    statuses = {c.status for c in children}
    if Status.FAILED in statuses:
        return Status.FAILED
    if Status.NOT_RUN in statuses:
        return Status.NOT_RUN
    return Status.PASSED


def case_node(
    name: str,
    *,
    status: Status,
    error: Optional[ConformanceError] = None,
    expected: Optional[bool] = None,
    actual: Optional[bool] = None,
    duration: float = 0.0,
) -> ReportNode:
    return ReportNode(
        kind=NodeKind.CASE,
        name=name,
        status=status,
        error=error,
        expected=expected,
        actual=actual,
        duration=duration,
    )


def parent_node(
    kind: NodeKind,
    name: str,
    children: Sequence[ReportNode] = (),
    *,
    error: Optional[ConformanceError] = None,
    duration: float = 0.0,
) -> ReportNode:
    children = tuple(children)
    return ReportNode(
        kind=kind,
        name=name,
        status=aggregate_status(children, error),
        error=error,
        children=children,
        duration=duration,
    )


def iter_outcomes(node: ReportNode, path: Tuple[str, ...] = ()) -> Iterator[Tuple[Tuple[str, ...], ReportNode]]:
    """
    Yield (path, node) for every terminal outcome: each case, plus each file
    or group that failed before its children could run.
    """
    here = path + (node.name,) if node.kind is not NodeKind.SUITE else path
    if node.kind is NodeKind.CASE or node.error is not None:
        yield here, node
        return
    for child in node.children:
        yield from iter_outcomes(child, here)


def iter_failures(node: ReportNode) -> Iterator[Tuple[Tuple[str, ...], ReportNode]]:
    for path, outcome in iter_outcomes(node):
        if outcome.failed:
            yield path, outcome


def summarize(node: ReportNode) -> Summary:
    counts = {Status.PASSED: 0, Status.FAILED: 0, Status.NOT_RUN: 0}
    for _, outcome in iter_outcomes(node):
        counts[outcome.status] += 1
    return Summary(
        passed=counts[Status.PASSED],
        failed=counts[Status.FAILED],
        not_run=counts[Status.NOT_RUN],
    )


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

_MARKS = {Status.PASSED: "PASS", Status.FAILED: "FAIL", Status.NOT_RUN: "SKIP"}


def _detail(node: ReportNode) -> str:
    if node.error is not None:
        return f"  [{node.error.kind}] {node.error.message}"
    return ""


def render_text(root: ReportNode, *, failures_only: bool = False, indent: str = "  ") -> str:
    """Indented tree, one line per node."""
    lines: List[str] = []

    def visit(node: ReportNode, depth: int) -> None:
        if failures_only and node.passed:
            return
        if node.kind is NodeKind.SUITE:
            child_depth = depth
        else:
            lines.append(f"{indent * depth}{_MARKS[node.status]} {node.name}{_detail(node)}")
            child_depth = depth + 1
        for child in node.children:
            visit(child, child_depth)

    visit(root, 0)
    s = summarize(root)
    lines.append(f"{s.passed} passed, {s.failed} failed, {s.not_run} not run ({s.total} total)")
    return "\n".join(lines)


def to_dict(node: ReportNode) -> Dict[str, Any]:
    """JSON-safe representation of a report subtree."""
    out: Dict[str, Any] = {
        "kind": node.kind.value,
        "name": node.name,
        "status": node.status.value,
        "duration": round(node.duration, 6),
    }
    if node.error is not None:
        out["error"] = {
            "type": node.error.kind,
            "message": node.error.message,
            "path": node.error.path,
            "details": node.error.details,
        }
    if node.kind is NodeKind.CASE and node.expected is not None:
        out["expected"] = node.expected
        out["actual"] = node.actual
    if node.children:
        out["children"] = [to_dict(c) for c in node.children]
    if node.kind is NodeKind.SUITE:
        s = summarize(node)
        out["summary"] = {"passed": s.passed, "failed": s.failed, "not_run": s.not_run, "total": s.total}
    return out


__all__ = [
    "Status",
    "NodeKind",
    "ReportNode",
    "Summary",
    "aggregate_status",
    "case_node",
    "parent_node",
    "iter_outcomes",
    "iter_failures",
    "summarize",
    "render_text",
    "to_dict",
]
