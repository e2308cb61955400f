"""Resolve command-line scan targets to Python source files.

A target is one of:

* a ``.py`` file;
* a directory, whose ``.py`` files (not subdirectories) are scanned;
* a dotted module or package name importable from the current environment;
* any directory or package followed by ``/...`` (or ``...`` alone for the
  current directory), which scans it recursively.

Directory listings are sorted so the resulting file order is deterministic.
"""

from __future__ import annotations

import importlib.util
import logging
import re
from pathlib import Path
from typing import Iterable, Sequence

from identypo.errors import TargetResolutionError

LOGGER = logging.getLogger(__name__)

RECURSIVE_WILDCARD = "..."
PYTHON_SUFFIX = ".py"
_MODULE_NAME_RE = re.compile(r"^[A-Za-z_]\w*(\.[A-Za-z_]\w*)*$")
_SKIPPED_DIRECTORIES = {"__pycache__", "node_modules"}


def is_test_file(path: Path) -> bool:
    """Return True for pytest-style test modules and ``conftest.py``."""

    name = path.name
    return (
        name == "conftest.py"
        or name.startswith("test_")
        or name.endswith("_test.py")
    )


def _find_module(name: str) -> Path | None:
    """Locate the source of an importable module or the directory of a package."""

    if not _MODULE_NAME_RE.match(name):
        return None
    try:
        spec = importlib.util.find_spec(name)
    except (ImportError, ValueError):
        return None
    if spec is None:
        return None
    if spec.submodule_search_locations:
        return Path(next(iter(spec.submodule_search_locations)))
    if spec.origin and spec.origin.endswith(PYTHON_SUFFIX):
        return Path(spec.origin)
    return None


def _python_files(directory: Path, include_tests: bool) -> list[Path]:
    files = sorted(
        (item for item in directory.iterdir() if item.is_file() and item.suffix == PYTHON_SUFFIX),
        key=lambda path: path.name,
    )
    if include_tests:
        return files
    return [path for path in files if not is_test_file(path)]


def _walk_python_files(directory: Path, include_tests: bool) -> list[Path]:
    files = _python_files(directory, include_tests)
    subdirectories = sorted(
        (
            item
            for item in directory.iterdir()
            if item.is_dir()
            and not item.name.startswith(".")
            and item.name not in _SKIPPED_DIRECTORIES
        ),
        key=lambda path: path.name,
    )
    for subdirectory in subdirectories:
        files.extend(_walk_python_files(subdirectory, include_tests))
    return files


def _resolve_recursive(target: str, include_tests: bool) -> list[Path]:
    base = target[: -len(RECURSIVE_WILDCARD)].rstrip("/") or "."
    directory = Path(base)
    if not directory.is_dir():
        located = _find_module(base)
        if located is None or not located.is_dir():
            raise TargetResolutionError(f"cannot find directory or package {base!r}")
        directory = located

    files = _walk_python_files(directory, include_tests)
    if not files:
        raise TargetResolutionError(f"{target!r} matched no Python files")
    return files


def _resolve_single(target: str, include_tests: bool) -> list[Path]:
    path = Path(target)
    if not path.exists():
        located = _find_module(target)
        if located is None:
            raise TargetResolutionError(f"cannot find file, directory or module {target!r}")
        path = located

    if path.is_dir():
        files = _python_files(path, include_tests)
        if not files:
            raise TargetResolutionError(f"no Python files to scan in {path}")
        return files

    if path.suffix != PYTHON_SUFFIX:
        raise TargetResolutionError(f"{path} is not a Python source file")
    return [path]


def resolve_targets(
    targets: Sequence[str] | None,
    *,
    include_tests: bool = True,
) -> list[Path]:
    """Return the files named by ``targets`` in argument order.

    With no targets the current directory is scanned. Files reached through
    several targets are only returned once. Test files are skipped only while
    expanding directories; a test file named explicitly is always scanned.
    """

    resolved: list[Path] = []
    seen: set[Path] = set()
    for target in targets or ["."]:
        if target == RECURSIVE_WILDCARD or target.endswith("/" + RECURSIVE_WILDCARD):
            files: Iterable[Path] = _resolve_recursive(target, include_tests)
        else:
            files = _resolve_single(target, include_tests)

        for path in files:
            key = path.resolve()
            if key in seen:
                continue
            seen.add(key)
            resolved.append(path)

    LOGGER.debug("Resolved %d target(s) to %d file(s)", len(targets or ["."]), len(resolved))
    return resolved
