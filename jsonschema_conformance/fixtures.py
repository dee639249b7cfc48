# SPDX-License-Identifier: Apache-2.0
"""
Fixture discovery and parsing.

- load_remotes(root): every file under root, parsed as JSON, in sorted order.
  Any failure raises; an incomplete remote set would change the meaning of
  every downstream test.
- iter_suite_files(root): suite documents yielded one at a time. A file that
  cannot be read or parsed is yielded with its error attached so the caller
  can fail that file alone.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Iterator, List, Tuple, Union

from jsonschema_conformance.errors import FilesystemError, LoadError, ParseError
from jsonschema_conformance.models import SuiteFile, TestCase, TestGroup

LOG = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]


def _raise_walk_error(exc: OSError) -> None:
    raise FilesystemError(
        f"cannot walk directory: {exc.strerror or exc}",
        path=exc.filename,
    ) from exc


def iter_files(root: PathLike, pattern: str = "*") -> Iterator[Path]:
    """
    Yield every non-directory entry under root, depth-first in sorted order.

    Directories are traversed but never yielded. Entries whose name does not
    match `pattern` are skipped.
    """
    root_path = Path(root)
    if not root_path.is_dir():
        raise FilesystemError("fixture root is not a directory", path=root_path)

    for dirpath, dirnames, filenames in os.walk(root_path, onerror=_raise_walk_error):
        dirnames.sort()
        for name in sorted(filenames):
            p = Path(dirpath) / name
            if p.match(pattern):
                yield p


def read_json(path: Path) -> Any:
    """Read and decode one JSON file."""
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError(f"not UTF-8 text: {exc}", path=path) from exc
    except OSError as exc:
        raise FilesystemError(f"cannot read file: {exc}", path=path) from exc
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"invalid JSON: {exc}", path=path) from exc


def load_remotes(root: PathLike) -> Tuple[Any, ...]:
    """
    Load every remote schema document under root.

    Returns:
        Tuple of parsed JSON values, one per file.

    Raises:
        FilesystemError: the walk or a read failed.
        ParseError: a file is not valid JSON.
    """
    remotes: List[Any] = [read_json(p) for p in iter_files(root)]
    LOG.info("Loaded %d remote schemas from %s", len(remotes), root)
    return tuple(remotes)


# ---------------------------------------------------------------------------
# Suite documents
# ---------------------------------------------------------------------------

def _require(obj: Any, key: str, kind: type, where: str, path: Path) -> Any:
    if not isinstance(obj, dict):
        raise ParseError(f"{where}: expected an object, got {type(obj).__name__}", path=path)
    if key not in obj:
        raise ParseError(f"{where}: missing '{key}'", path=path)
    value = obj[key]
    if kind is not object and not isinstance(value, kind):
        raise ParseError(
            f"{where}: '{key}' must be {kind.__name__}, got {type(value).__name__}",
            path=path,
        )
    return value


def _parse_case(raw: Any, where: str, path: Path) -> TestCase:
    return TestCase(
        description=_require(raw, "description", str, where, path),
        data=_require(raw, "data", object, where, path),
        valid=_require(raw, "valid", bool, where, path),
    )


def _parse_group(raw: Any, where: str, path: Path) -> TestGroup:
    description = _require(raw, "description", str, where, path)
    schema = _require(raw, "schema", object, where, path)
    tests = _require(raw, "tests", list, where, path)
    return TestGroup(
        description=description,
        schema=schema,
        tests=tuple(
            _parse_case(t, f"{where}.tests[{i}]", path) for i, t in enumerate(tests)
        ),
    )


def parse_suite_document(doc: Any, path: Path) -> Tuple[TestGroup, ...]:
    """
    Turn a decoded suite document into its ordered groups.

    Raises:
        ParseError: the document is not an array of well-formed groups.
    """
    if not isinstance(doc, list):
        raise ParseError(
            f"suite document must be an array, got {type(doc).__name__}", path=path
        )
    return tuple(_parse_group(g, f"[{i}]", path) for i, g in enumerate(doc))


def load_suite_file(path: Path) -> SuiteFile:
    """Load one suite document, capturing any load error on the result."""
    try:
        groups = parse_suite_document(read_json(path), path)
    except LoadError as exc:
        LOG.warning("Failed to load suite file %s: %s", path, exc)
        return SuiteFile(path=path, error=exc)
    return SuiteFile(path=path, groups=groups)


def iter_suite_files(root: PathLike, pattern: str = "*") -> Iterator[SuiteFile]:
    """
    Lazily yield each suite document under root.

    Raises:
        FilesystemError: root is missing or the directory walk fails.
    """
    count = 0
    for p in iter_files(root, pattern):
        count += 1
        yield load_suite_file(p)
    LOG.info("Discovered %d suite files under %s", count, root)


__all__ = [
    "iter_files",
    "read_json",
    "load_remotes",
    "parse_suite_document",
    "load_suite_file",
    "iter_suite_files",
]
