"""
Index-based dependency graph built from a lockfile.
"""

from __future__ import annotations

from typing import Iterator, List, Optional

from .models import LockedPackage


class DependencyGraph:
    """Directed graph of locked packages.

    Nodes are stored in a flat list and addressed by their index. Edges point
    from a dependent package to each of its direct dependencies.
    """

    def __init__(self) -> None:
        self._packages: List[LockedPackage] = []
        self._dependencies: List[List[int]] = []
        self._incoming: List[int] = []

    def __len__(self) -> int:
        return len(self._packages)

    def __getitem__(self, index: int) -> LockedPackage:
        return self._packages[index]

    def __iter__(self) -> Iterator[LockedPackage]:
        return iter(self._packages)

    def add_package(self, package: LockedPackage) -> int:
        """Add a node and return its index."""
        self._packages.append(package)
        self._dependencies.append([])
        self._incoming.append(0)
        return len(self._packages) - 1

    def add_dependency(self, dependent: int, dependency: int) -> None:
        """Add an edge from ``dependent`` to ``dependency``."""
        self._check_index(dependent)
        self._check_index(dependency)
        if dependency in self._dependencies[dependent]:
            return
        self._dependencies[dependent].append(dependency)
        self._incoming[dependency] += 1

    def dependencies(self, index: int) -> List[int]:
        """Indices of the direct dependencies of a node."""
        self._check_index(index)
        return list(self._dependencies[index])

    def roots(self) -> List[int]:
        """Indices of all nodes without incoming edges."""
        return [index for index, count in enumerate(self._incoming) if count == 0]

    def find(self, name: str, version: Optional[str] = None) -> List[int]:
        """Indices of packages matching a name and, optionally, a version."""
        return [
            index
            for index, package in enumerate(self._packages)
            if package.name == name and (version is None or package.version == version)
        ]

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._packages):
            raise IndexError(f"No package with index {index}")
