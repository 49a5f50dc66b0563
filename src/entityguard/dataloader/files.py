# src/entityguard/dataloader/files.py
from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from entityguard.errors import EntityGuardError

YAML_SUFFIXES = frozenset({".yaml", ".yml"})
JSON_SUFFIXES = frozenset({".json"})


def read_mapping(
    path: Path,
    *,
    error_cls: type[EntityGuardError],
    source: str,
    suffixes: frozenset[str] = YAML_SUFFIXES,
    what: str = "configuration",
) -> dict[str, Any]:
    """
    @brief
    Read a YAML or JSON file into a Python mapping with strict checks.

    @details
    Validates path type, existence, extension, readability and syntax.
    Ensures non-empty content and a top-level mapping before returning a
    plain dictionary. Every failure is raised as `error_cls` so each loader
    keeps its own error type.

    @params
        path : Path
            File to read.
        error_cls : type[EntityGuardError]
            Structured error raised on failure (ConfigError, DescriptorError).
        source : str
            Reported as the error source.
        suffixes : frozenset[str]
            Accepted file extensions (lowercase, with dot).
        what : str
            Human-readable name of the file's role, used in messages.

    @returns
        Parsed mapping as dict[str, Any].
    """
    # (1) Validate path type and existence
    if not isinstance(path, Path):
        raise error_cls(
            message=f"Invalid path type: expected pathlib.Path, got {type(path).__name__}",
            source=source,
            suggested_action=f"Pass a pathlib.Path object pointing to the {what} file.",
        )

    if not path.exists():
        raise error_cls(
            message=f"{what.capitalize()} file not found: {path}",
            source=source,
            suggested_action="Ensure the file exists and the path is correct.",
        )

    # (2) Enforce accepted file extension
    suffix = path.suffix.lower()
    if suffix not in suffixes:
        raise error_cls(
            message=f"Invalid {what} file extension: {path.suffix}",
            source=source,
            suggested_action=f"Use one of: {', '.join(sorted(suffixes))}.",
        )

    # (3) Read and parse content
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f) if suffix in JSON_SUFFIXES else yaml.safe_load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise error_cls(
            message=f"Parsing {path.name} failed: {e}",
            source=source,
            suggested_action="Fix the file syntax/indentation.",
        ) from e
    except OSError as e:
        raise error_cls(
            message=f"Unable to read {what} file: {e}",
            source=source,
            suggested_action="Check file permissions and path accessibility.",
        ) from e

    # (4) Validate structural integrity of parsed data
    if data is None:
        raise error_cls(
            message=f"{what.capitalize()} file is empty.",
            source=source,
            suggested_action=f"Populate {path.name} with the required content.",
        )

    if not isinstance(data, Mapping):
        raise error_cls(
            message=f"{what.capitalize()} root must be a mapping (key: value pairs).",
            source=source,
            suggested_action="Ensure the top-level structure uses key: value mappings.",
        )

    return dict(data)
