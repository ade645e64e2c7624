"""Staleness - decides whether a document's output must be regenerated."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path


def needs_rebuild(
    doc_mtime: float,
    output_mtime: float | None,
    tool_mtime: float,
    config_mtime: float,
    skeleton_mtime: float,
    dependency_mtimes: Sequence[float],
) -> bool:
    """Return True when the output is missing or older than anything it was built from.

    Output must be strictly newer than the source document to count as fresh.
    """
    if output_mtime is None:
        return True
    if any(dep > output_mtime for dep in dependency_mtimes):
        return True
    if max(tool_mtime, config_mtime, skeleton_mtime) > output_mtime:
        return True
    return output_mtime <= doc_mtime


def mtime(path: Path) -> float | None:
    """Modification time of `path`, or None when it doesn't exist."""
    try:
        return path.stat().st_mtime
    except FileNotFoundError:
        return None


def dependency_mtimes(paths: Iterable[Path]) -> list[float]:
    """Modification times of recorded dependencies.

    A dependency that vanished counts as infinitely new.
    """
    result = []
    for p in paths:
        m = mtime(p)
        result.append(float("inf") if m is None else m)
    return result


def tool_mtime() -> float:
    """Newest modification time among noten's own source files."""
    package_dir = Path(__file__).resolve().parent.parent
    return max(
        (p.stat().st_mtime for p in package_dir.rglob("*.py")),
        default=0.0,
    )
