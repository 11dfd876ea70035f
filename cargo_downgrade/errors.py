"""
Exceptions raised while downgrading dependencies.
"""

from __future__ import annotations

from typing import Optional


class DowngradeError(Exception):
    """Base class for all downgrade errors."""


class LockfileError(DowngradeError):
    """The lockfile could not be read or parsed into a dependency graph."""


class GitTimestampError(DowngradeError):
    """The commit timestamp could not be read from git."""


class RegistryFetchError(DowngradeError):
    """The version list of a single crate could not be retrieved."""

    def __init__(self, crate_name: str, reason: str) -> None:
        super().__init__(f"Failed to fetch crate {crate_name} from the registry: {reason}")
        self.crate_name = crate_name
        self.reason = reason


class RegistryUnavailableError(DowngradeError):
    """The registry could not be reached at all."""


class NoQualifyingVersion(DowngradeError):
    """No unyanked version of a crate was published before the cutoff."""

    def __init__(self, crate_name: str, oldest_unyanked: Optional[str]) -> None:
        hint = oldest_unyanked or "no known versions at all?"
        super().__init__(
            f"No version of crate {crate_name} found before date. "
            f"Oldest unyanked version is: {hint}"
        )
        self.crate_name = crate_name
        self.oldest_unyanked = oldest_unyanked


class ApplyError(DowngradeError):
    """Cargo failed to pin a crate to the requested version."""

    def __init__(self, crate_name: str, version: str, reason: str) -> None:
        super().__init__(f"Failed to pin {crate_name} to {version}: {reason}")
        self.crate_name = crate_name
        self.version = version
        self.reason = reason
