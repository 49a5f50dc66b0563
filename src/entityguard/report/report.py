# src/entityguard/report/report.py
from __future__ import annotations

import json
import logging
import os
import tempfile
from collections import Counter
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from entityguard.errors import ReportError
from entityguard.validator.violations import ValidationResult

logger = logging.getLogger(__name__)


def build_report(results: Iterable[ValidationResult]) -> dict[str, Any]:
    """
    @brief
    Assemble validation results into a structured dictionary.

    @details
    One entry per checked entity, plus totals and a histogram of violation
    kinds. The batch is valid only if every entity is valid. No files are
    written at this stage.

    @params
        results : Iterable[ValidationResult]
            Outcomes in the order the entities were checked.

    @returns
        Serializable report dictionary.
    """
    results = list(results)
    rejected = [r for r in results if not r.ok]
    kinds = Counter(r.violation.kind.value for r in rejected if r.violation is not None)

    return {
        "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
        "valid": not rejected,
        "total": len(results),
        "accepted": len(results) - len(rejected),
        "rejected": len(rejected),
        "violations_by_kind": dict(sorted(kinds.items())),
        "entities": [r.to_dict() for r in results],
    }


def write_report(
    report: dict[str, Any],
    out_dir: Path,
    filename: str = "validation_report.json",
) -> Path:
    """
    @brief
    Writes the validation report atomically in UTF-8 encoding.

    @details
    Serializes the report to JSON first, so an unserializable report never
    leaves a partial file behind, then swaps it into place.

    @params
        report : dict[str, Any]
            Report produced by build_report().
        out_dir : Path
            Target directory, created if missing.
        filename : str
            Target filename (default 'validation_report.json').

    @returns
        Path to the written JSON file.

    @raises
        ReportError
            If the report is not serializable or cannot be written.
    """
    if not isinstance(report, dict):
        raise ReportError("report must be a dict", source="report.write_report")

    # (1) Validate JSON serializability
    try:
        payload = json.dumps(report, ensure_ascii=False, indent=2)
    except (TypeError, ValueError) as e:
        raise ReportError(
            f"report not JSON-serializable: {e}",
            source="report.write_report",
            suggested_action="Build the report with build_report().",
        ) from e

    # (2) Atomically write payload
    target = Path(out_dir) / filename
    _atomic_write_text(target, payload)
    logger.info("Validation report saved: %s", target)
    return target


def _atomic_write_text(path: Path, text: str, encoding: str = "utf-8") -> None:
    """
    @brief
    Performs atomic text file writing using a temporary file swap.

    @raises
        ReportError
            On write or rename failure.
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(prefix=path.name + ".", dir=str(path.parent))
    try:
        with open(fd, "w", encoding=encoding, newline="") as f:
            f.write(text)
        os.replace(tmp_path, path)
    except OSError as e:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise ReportError(
            f"atomic write failed for {path}: {e}",
            source="report._atomic_write_text",
            suggested_action="Check output directory permissions and disk space.",
        ) from e


__all__ = ["build_report", "write_report"]
