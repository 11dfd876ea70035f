"""
Reporting and export utilities.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional

import pandas as pd

from .models import DowngradeResult


logger = logging.getLogger(__name__)


def print_summary(result: DowngradeResult, apply_failures: Optional[Dict[str, str]] = None) -> None:
    apply_failures = apply_failures or {}
    logger.info("=" * 60)
    logger.info("DOWNGRADE RESULTS")
    logger.info("=" * 60)
    logger.info("Cutoff: %s", result.cutoff.isoformat())
    logger.info("Downgraded crates: %d", len(result.targets))
    logger.info("Skipped crates: %d", len(result.skipped))
    if apply_failures:
        logger.info("Failed pins: %d", len(apply_failures))
    logger.info("=" * 60)


def results_to_frame(result: DowngradeResult, apply_failures: Optional[Dict[str, str]] = None) -> pd.DataFrame:
    """One row per crate with its downgraded version or the reason it was skipped."""
    apply_failures = apply_failures or {}
    rows = []
    for target in result.targets:
        error = apply_failures.get(target.name)
        rows.append({
            "name": target.name,
            "version": target.version,
            "status": "failed" if error else "ok",
            "error": error,
        })
    for name, error in result.skipped.items():
        rows.append({"name": name, "version": None, "status": "skipped", "error": error})
    return pd.DataFrame(rows, columns=["name", "version", "status", "error"])


def save_results_json(
    result: DowngradeResult,
    output_dir: Path,
    apply_failures: Optional[Dict[str, str]] = None,
) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    results_file = output_dir / "downgrade_results.json"
    payload = {
        "cutoff": result.cutoff,
        "targets": [{"name": t.name, "version": t.version} for t in result.targets],
        "skipped": result.skipped,
        "apply_failures": apply_failures or {},
    }
    with open(results_file, 'w') as f:
        json.dump(payload, f, indent=2, default=str)
    return results_file


def export_plan_csv(
    result: DowngradeResult,
    output_dir: Path,
    apply_failures: Optional[Dict[str, str]] = None,
) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    plan_file = output_dir / "downgrade_plan.csv"
    results_to_frame(result, apply_failures).to_csv(plan_file, index=False)
    return plan_file
