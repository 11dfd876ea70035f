"""
Selection of transitive dependencies by their distance from the root packages.
"""

from __future__ import annotations

import logging
from typing import Optional, Set

from .graph import DependencyGraph


logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 255


def select_dependencies(
    graph: DependencyGraph,
    dependency_level: Optional[int] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Set[str]:
    """Get the crate names of transitive dependencies in a dependency graph.

    The graph is walked breadth first, one level at a time, starting from the
    packages nothing depends on (level 0). Those root packages are never part
    of the result.

    Args:
        graph: Dependency graph of the lockfile
        dependency_level: Only return the crates found on exactly this level.
            If omitted, the crates of every level below the roots are returned.
        max_depth: Last level that is visited. Deeper levels are ignored and
            whatever was collected so far is returned.

    Returns:
        Set of crate names
    """
    if dependency_level is not None and dependency_level < 1:
        raise ValueError(f"dependency_level must be at least 1, got {dependency_level}")

    crate_names: Set[str] = set()
    worklist = set(graph.roots())
    level = 0

    while worklist:
        next_level_worklist: Set[int] = set()
        dependencies_current_level: Set[str] = set()
        for index in worklist:
            dependencies_current_level.add(graph[index].name)
            next_level_worklist.update(graph.dependencies(index))

        logger.info(
            "dependencies on level %d: %s",
            level,
            ", ".join(sorted(dependencies_current_level)),
        )

        if level > 0:
            if dependency_level is None:
                crate_names |= dependencies_current_level
            elif level == dependency_level:
                return dependencies_current_level

        worklist = next_level_worklist
        if level >= max_depth:
            if worklist:
                logger.warning(
                    "more than %d levels of dependencies found, aborting", max_depth
                )
            break
        level += 1

    return crate_names
