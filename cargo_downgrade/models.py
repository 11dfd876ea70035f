"""
Core data models for dependency downgrading.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional


@dataclass(frozen=True)
class LockedPackage:
    """A package entry as recorded in the lockfile."""

    name: str
    version: str
    source: Optional[str] = None


@dataclass(frozen=True)
class VersionRecord:
    """A published version of a crate with its publish date."""

    num: str
    published_at: datetime
    yanked: bool = False


@dataclass(frozen=True)
class DowngradeTarget:
    """A crate and the exact version it should be pinned to."""

    name: str
    version: str

    def __str__(self) -> str:
        return f'{self.name} = "={self.version}"'


@dataclass
class DowngradeResult:
    """Outcome of a downgrade run."""

    cutoff: datetime
    targets: List[DowngradeTarget] = field(default_factory=list)
    skipped: Dict[str, str] = field(default_factory=dict)
