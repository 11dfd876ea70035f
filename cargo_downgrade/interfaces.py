"""
Interfaces for the registry and the package manager.
"""

from __future__ import annotations

from typing import List, Protocol

from .models import DowngradeTarget, VersionRecord


class VersionSource(Protocol):
    """Provide the published versions of a crate."""

    def fetch_versions(self, crate_name: str) -> List[VersionRecord]:
        ...


class Applier(Protocol):
    """Pin a crate to an exact version."""

    def __call__(self, target: DowngradeTarget) -> None:
        ...
