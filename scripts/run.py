# scripts/run.py
from __future__ import annotations

import argparse
import logging
import sys
import time
import traceback
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from entityguard.dataloader import ConfigLoader, DescriptorLoader
from entityguard.errors import EntityGuardError
from entityguard.introspection import describe_path
from entityguard.report import build_report, write_report
from entityguard.schemas.models import Config, IdPosition, TypeDescriptor
from entityguard.validator import ValidationResult, validate


def _setup_logging(level: str = "INFO") -> None:
    """
    @brief
    Initializes global logging configuration.

    @details
    Sets the root logging level and a simple console format so messages
    look the same across all entityguard modules.
    """
    logging.basicConfig(level=getattr(logging, level.upper()), format="[%(levelname)s] %(message)s")


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """
    @brief
    Parses command-line arguments for the entity check.

    @details
    Every option except --config may be repeated or left out; values given
    on the command line are added to (or override) those from the config.
    """
    parser = argparse.ArgumentParser(
        prog="entityguard-check",
        description="Validate entity type shapes: load → describe → validate → report",
    )

    # (1) Config path argument
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to config YAML (optional)",
    )

    # (2) Entities to check
    parser.add_argument(
        "--entity",
        action="append",
        default=[],
        metavar="MODULE:CLASS",
        help="Entity class to check, e.g. shop.models:Customer (repeatable)",
    )
    parser.add_argument(
        "--descriptors",
        action="append",
        default=[],
        metavar="FILE",
        help="YAML/JSON descriptor file to check (repeatable)",
    )

    # (3) Output and behavior overrides
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output directory for validation_report.json (default from config)",
    )
    parser.add_argument(
        "--id-position",
        choices=[p.value for p in IdPosition],
        default=None,
        help="Which end of the field list holds the identifier (default: last)",
    )
    parser.add_argument(
        "--marker",
        default=None,
        metavar="NAME",
        help="Qualified name of the entity marker supertype (default from config)",
    )
    parser.add_argument(
        "--root",
        default=None,
        metavar="NAME",
        help="Qualified name of the root supertype (default from config)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Logging level (default from config, INFO)",
    )

    return parser.parse_args(argv)


def _collect_descriptors(cfg: Config) -> list[TypeDescriptor]:
    """
    @brief
    Build the list of descriptors named by the configuration.

    @details
    Classes are described first (in config order), then descriptor files
    are loaded (in config order, entries in file order).
    """
    descriptors = [describe_path(path) for path in cfg.entities]

    loader = DescriptorLoader()
    for file in cfg.descriptor_files:
        descriptors.extend(loader.load(Path(file)))

    return descriptors


def run_check(cfg: Config, output_dir: Path | None = None) -> dict[str, Any]:
    """
    @brief
    Executes the full entity check.

    @details
    Performs sequential steps:
    (1) Describe entity classes and load descriptor files.
    (2) Validate every descriptor (fail-fast per entity).
    (3) Build the report and optionally write it to disk.
    With validation.fail_on_first the batch stops at the first rejected
    entity.

    @params
        cfg : Config
            Runtime configuration listing the entities to check.
        output_dir : Path | None
            Overrides cfg.output_dir when given.

    @returns
        Dictionary containing the validity flag, the report and the report path.

    @raises
        EntityGuardError
            On configuration, introspection, descriptor, or report issues.
    """
    t0 = time.perf_counter()

    # (1) Collect descriptors
    descriptors = _collect_descriptors(cfg)
    if not descriptors:
        logging.warning("No entities to check. Use --entity/--descriptors or the config file.")

    # (2) Validate
    results: list[ValidationResult] = []
    for descriptor in descriptors:
        result = validate(
            descriptor,
            id_position=cfg.validation.id_position,
            marker=cfg.validation.marker,
            root=cfg.validation.root,
        )
        results.append(result)
        if not result.ok and cfg.validation.fail_on_first:
            logging.warning("Stopping at first rejected entity (fail_on_first=true).")
            break

    # (3) Report
    report = build_report(results)
    report_path: Path | None = None
    if cfg.validation.write_report:
        target = output_dir or Path(cfg.output_dir or "data/output")
        report_path = write_report(report, out_dir=target)

    logging.info(
        "Checked %d entit%s in %.2f s: %d accepted, %d rejected",
        report["total"],
        "y" if report["total"] == 1 else "ies",
        time.perf_counter() - t0,
        report["accepted"],
        report["rejected"],
    )

    return {"valid": report["valid"], "report": report, "report_path": report_path}


def _build_config(args: argparse.Namespace) -> Config:
    """Load the config file (if any) and apply command-line overrides."""
    cfg = ConfigLoader().load(Path(args.config)) if args.config else Config()

    updates: dict[str, Any] = {
        "entities": [*cfg.entities, *args.entity],
        "descriptor_files": [*cfg.descriptor_files, *args.descriptors],
    }
    if args.output:
        updates["output_dir"] = args.output
    validation: dict[str, Any] = {}
    if args.id_position:
        validation["id_position"] = IdPosition(args.id_position)
    if args.marker:
        validation["marker"] = args.marker
    if args.root:
        validation["root"] = args.root
    if validation:
        updates["validation"] = cfg.validation.model_copy(update=validation)
    if args.log_level:
        updates["logging"] = cfg.logging.model_copy(update={"level": args.log_level})

    return cfg.model_copy(update=updates)


def main(argv: Sequence[str] | None = None) -> int:
    """
    @brief
    CLI entry point for the entity check.

    @details
    Returns numeric exit codes suitable for shell integration:
      0 – every entity is valid
      1 – controlled failure (config/descriptor/introspection) or rejected entity
      2 – unexpected crash
    """
    args = _parse_args(argv)
    _setup_logging(args.log_level or "INFO")

    try:
        cfg = _build_config(args)
        logging.getLogger().setLevel(cfg.logging.level)

        result = run_check(cfg)
        if result["report_path"]:
            logging.info("Report: %s", Path(result["report_path"]).as_posix())
        return 0 if result["valid"] else 1

    except EntityGuardError as e:
        logging.error(str(e))
        return 1
    except Exception:
        logging.error("Unexpected error occurred:")
        traceback.print_exc()
        return 2


if __name__ == "__main__":
    sys.exit(main())
