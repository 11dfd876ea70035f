"""
Selection of the version of a crate that was current at a given date.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from .errors import NoQualifyingVersion
from .models import DowngradeTarget, VersionRecord
from .time_utils import ensure_utc


def find_appropriate_version(
    crate_name: str,
    versions: Iterable[VersionRecord],
    date: datetime,
) -> DowngradeTarget:
    """Find the newest unyanked version published strictly before ``date``.

    Raises:
        NoQualifyingVersion: if no version qualifies. The error carries the
            oldest unyanked version, if any, as a hint.
    """
    date = ensure_utc(date)
    ordered = sorted(
        versions, key=lambda version: (ensure_utc(version.published_at), version.num)
    )

    for version in reversed(ordered):
        if ensure_utc(version.published_at) < date and not version.yanked:
            return DowngradeTarget(name=crate_name, version=version.num)

    oldest = next((version for version in ordered if not version.yanked), None)
    hint = None
    if oldest is not None:
        hint = f"{oldest.num} ({ensure_utc(oldest.published_at):%Y-%m-%d})"
    raise NoQualifyingVersion(crate_name, hint)
