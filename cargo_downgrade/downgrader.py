"""
Downgrade a set of crates to the versions that were current at a given date.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from tqdm import tqdm

from .errors import NoQualifyingVersion, RegistryFetchError
from .interfaces import VersionSource
from .models import DowngradeResult
from .picker import find_appropriate_version
from .registry import CratesIoClient
from .time_utils import ensure_utc


logger = logging.getLogger(__name__)


def normalize_crate_names(crate_names: Iterable[str]) -> List[str]:
    """Strip, sort and deduplicate crate names given on the command line."""
    return sorted({name.strip() for name in crate_names if name.strip()})


class Downgrader:
    """Find the downgraded version of every crate in a batch."""

    def __init__(
        self,
        date: datetime,
        client: Optional[VersionSource] = None,
        show_progress: bool = False,
    ):
        """Initialize the downgrader.

        Args:
            date: Cutoff date, versions must have been published before it
            client: Source of crate versions, crates.io by default
            show_progress: Display a progress bar while fetching crates
        """
        self.date = ensure_utc(date)
        self.client = client if client is not None else CratesIoClient()
        self.show_progress = show_progress

    def downgrade(self, crate_names: Sequence[str]) -> DowngradeResult:
        """Find the version of each crate that was current at the cutoff date.

        Crates are fetched one after the other since the registry client
        limits how often it may be called. A crate that cannot be fetched or
        has no matching version is logged and skipped; failing to reach the
        registry at all aborts the batch.
        """
        logger.info(
            "downgrading the following %d dependencies to %s: %s",
            len(crate_names),
            self.date,
            ", ".join(crate_names),
        )

        result = DowngradeResult(cutoff=self.date)
        for crate_name in tqdm(
            crate_names, desc="Fetching crates", unit="crate", disable=not self.show_progress
        ):
            logger.info("fetching infos for crate %s", crate_name)
            try:
                versions = self.client.fetch_versions(crate_name)
                target = find_appropriate_version(crate_name, versions, self.date)
            except (RegistryFetchError, NoQualifyingVersion) as e:
                logger.error("%s", e)
                result.skipped[crate_name] = str(e)
                continue
            logger.debug("Downgrading %s to %s", target.name, target.version)
            result.targets.append(target)

        return result
