"""
Pin crates to exact versions with cargo.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from pathlib import Path
from typing import Dict, Iterable, Optional

from .errors import ApplyError
from .interfaces import Applier
from .models import DowngradeTarget


logger = logging.getLogger(__name__)


def format_pin(target: DowngradeTarget) -> str:
    """Render a target as a Cargo.toml dependency line."""
    return str(target)


def apply_target(target: DowngradeTarget, manifest_path: Optional[Path] = None) -> None:
    """Run ``cargo update -p <name> --precise <version>`` for one crate."""
    cmd = ["cargo", "update", "-p", target.name, "--precise", target.version]
    if manifest_path is not None:
        cmd += ["--manifest-path", str(manifest_path)]

    logger.info("Running: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise ApplyError(target.name, target.version, f"failed to run cargo: {e}") from e

    sys.stdout.write(result.stdout)
    sys.stderr.write(result.stderr)
    if result.returncode != 0:
        raise ApplyError(
            target.name, target.version, f"cargo exited with status {result.returncode}"
        )


def apply_targets(
    targets: Iterable[DowngradeTarget],
    apply: Applier = apply_target,
) -> Dict[str, str]:
    """Pin every target, continuing past failures.

    Returns:
        Mapping of crate name to error message for every pin that failed
    """
    failures: Dict[str, str] = {}
    for target in targets:
        try:
            apply(target)
        except ApplyError as e:
            logger.error("%s", e)
            failures[target.name] = str(e)
    return failures
