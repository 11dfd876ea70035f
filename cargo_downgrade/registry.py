"""
crates.io registry client.
"""

from __future__ import annotations

import logging
import time
from typing import Dict, List, Optional

import requests

from .errors import RegistryFetchError, RegistryUnavailableError
from .interfaces import VersionSource
from .models import VersionRecord
from .time_utils import parse_timestamp


logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_URL = "https://crates.io/api/v1"
DEFAULT_REQUEST_INTERVAL = 1.0
DEFAULT_TIMEOUT = 30
USER_AGENT = "cargo-downgrade (https://github.com/obraunsdorf/cargo-downgrade)"


class CratesIoClient(VersionSource):
    """Fetch version information from the crates.io API.

    crates.io asks crawlers to send at most one request per second, so the
    client waits until ``request_interval`` seconds have passed since the
    previous request before sending the next one.
    """

    def __init__(
        self,
        registry_url: str = DEFAULT_REGISTRY_URL,
        request_interval: float = DEFAULT_REQUEST_INTERVAL,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = USER_AGENT,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the client.

        Args:
            registry_url: Base URL of the crates.io API
            request_interval: Minimum number of seconds between two requests
            timeout: Timeout in seconds for a single request
            user_agent: User-Agent header sent with every request
            session: Session to use, a new one is created if omitted
        """
        self.registry_url = registry_url.rstrip("/")
        self.request_interval = request_interval
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = user_agent
        self._last_request: Optional[float] = None

    def fetch_crate(self, crate_name: str) -> Dict:
        """Fetch the raw crate metadata."""
        url = f"{self.registry_url}/crates/{crate_name}"
        self._wait()
        logger.info("Fetching metadata for %s", crate_name)
        try:
            with self.session.get(url, timeout=self.timeout) as response:
                response.raise_for_status()
                return response.json()
        except (requests.ConnectionError, requests.Timeout) as e:
            raise RegistryUnavailableError(f"Failed to connect to {self.registry_url}: {e}") from e
        except requests.HTTPError as e:
            raise RegistryFetchError(crate_name, str(e)) from e
        except ValueError as e:
            raise RegistryFetchError(crate_name, f"invalid JSON response: {e}") from e
        except requests.RequestException as e:
            raise RegistryFetchError(crate_name, str(e)) from e
        finally:
            self._last_request = time.monotonic()

    def fetch_versions(self, crate_name: str) -> List[VersionRecord]:
        """Fetch all published versions of a crate."""
        metadata = self.fetch_crate(crate_name)
        versions = metadata.get("versions") if isinstance(metadata, dict) else None
        if not isinstance(versions, list):
            raise RegistryFetchError(crate_name, "response contains no version list")

        records = []
        for version_data in versions:
            try:
                num = version_data["num"]
                published = version_data.get("created_at") or version_data.get("updated_at")
                yanked = bool(version_data.get("yanked", False))
            except (KeyError, TypeError, AttributeError) as e:
                raise RegistryFetchError(crate_name, f"malformed version entry: {e}") from e

            published_at = parse_timestamp(published or "")
            if published_at is None:
                logger.warning("Ignoring version %s of %s without a valid publish date", num, crate_name)
                continue
            records.append(VersionRecord(num=num, published_at=published_at, yanked=yanked))

        logger.debug("Crate %s has %d versions", crate_name, len(records))
        return records

    def _wait(self) -> None:
        if self._last_request is None:
            return
        remaining = self.request_interval - (time.monotonic() - self._last_request)
        if remaining > 0:
            logger.debug("Waiting %.3fs before the next registry request", remaining)
            time.sleep(remaining)
