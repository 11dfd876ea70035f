"""
Shared datetime helpers.
"""

from __future__ import annotations

import subprocess
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from pathlib import Path
from typing import Optional

from .errors import GitTimestampError


def ensure_utc(dt: datetime) -> datetime:
    """Return a timezone-aware UTC datetime."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp and normalize it to UTC."""
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return ensure_utc(parsed)


def parse_cutoff(value: str) -> datetime:
    """Parse the cutoff date given on the command line.

    Accepts RFC 2822 (``22 Feb 2021 23:16:09 GMT``) as well as ISO 8601
    (``2021-02-22T23:16:09Z`` or ``2021-02-22``).
    """
    try:
        return ensure_utc(parsedate_to_datetime(value))
    except (TypeError, ValueError, IndexError):
        pass

    parsed = parse_timestamp(value.strip())
    if parsed is None:
        raise ValueError(
            f"Invalid date {value!r}. Use RFC 2822 (e.g. '22 Feb 2021 23:16:09 GMT') "
            "or ISO 8601 (e.g. '2021-02-22T23:16:09Z')"
        )
    return parsed


def timestamp_from_git(repo: Optional[Path] = None) -> datetime:
    """Return the commit time of ``HEAD`` in the given repository."""
    cmd = ["git", "show", "-s", "--format=%ct"]
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            cwd=repo,
            timeout=30,
        )
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        raise GitTimestampError(f"Failed to run git: {e}") from e

    if result.returncode != 0:
        raise GitTimestampError(f"git show failed: {result.stderr.strip()}")

    try:
        seconds = int(result.stdout.strip())
    except ValueError as e:
        raise GitTimestampError(f"Unexpected output from git: {result.stdout!r}") from e
    return datetime.fromtimestamp(seconds, tz=timezone.utc)
