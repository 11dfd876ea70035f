"""
Cargo.lock loading.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import List, Optional, Tuple

from .errors import LockfileError
from .graph import DependencyGraph
from .models import LockedPackage


logger = logging.getLogger(__name__)


def load_lockfile(path: Path) -> DependencyGraph:
    """Read a Cargo.lock file and build its dependency graph."""
    path = Path(path)
    logger.info("Loading lockfile %s", path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise LockfileError(f"Failed to read {path}: {e}") from e
    return parse_lockfile(text)


def parse_lockfile(text: str) -> DependencyGraph:
    """Build a dependency graph from the contents of a Cargo.lock file."""
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise LockfileError(f"Failed to parse Cargo.lock: {e}") from e

    entries = data.get("package", [])
    if not isinstance(entries, list):
        raise LockfileError("Failed to parse Cargo.lock: 'package' is not an array of tables")

    graph = DependencyGraph()
    declared: List[Tuple[int, List[str]]] = []
    for entry in entries:
        try:
            package = LockedPackage(
                name=entry["name"],
                version=entry["version"],
                source=entry.get("source"),
            )
        except (KeyError, TypeError) as e:
            raise LockfileError(f"Failed to parse Cargo.lock: invalid package entry {entry!r}") from e
        index = graph.add_package(package)
        declared.append((index, entry.get("dependencies", [])))

    for index, dependencies in declared:
        for reference in dependencies:
            graph.add_dependency(index, _resolve_reference(graph, graph[index], reference))

    logger.debug("Lockfile contains %d packages", len(graph))
    return graph


def parse_reference(reference: str) -> Tuple[str, Optional[str], Optional[str]]:
    """Split a dependency reference into name, version and source.

    Cargo writes references as ``name``, ``name version`` or
    ``name version (source)`` depending on what is needed to disambiguate.
    """
    name, _, rest = reference.strip().partition(" ")
    version, _, source = rest.strip().partition(" ")
    source = source.strip()
    if source.startswith("(") and source.endswith(")"):
        source = source[1:-1]
    return name, version or None, source or None


def _resolve_reference(graph: DependencyGraph, dependent: LockedPackage, reference: str) -> int:
    name, version, source = parse_reference(reference)
    candidates = graph.find(name, version)
    if source is not None and len(candidates) > 1:
        candidates = [index for index in candidates if graph[index].source == source]

    if not candidates:
        raise LockfileError(
            f"Package {dependent.name} {dependent.version} depends on {reference!r}, "
            "which is not in the lockfile"
        )
    if len(candidates) > 1:
        raise LockfileError(
            f"Package {dependent.name} {dependent.version} has an ambiguous dependency {reference!r}"
        )
    return candidates[0]
