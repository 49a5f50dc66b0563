# src/entityguard/dataloader/config_loader.py
from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import ValidationError

from entityguard.dataloader.files import YAML_SUFFIXES, read_mapping
from entityguard.errors import ConfigError
from entityguard.schemas.models import Config


class ConfigLoader:
    """
    @brief
    Loader responsible for reading and validating runtime configuration.

    @details
    Reads YAML from disk, validates the mapping against the Pydantic `Config`
    schema, and raises structured `ConfigError` instances for all failure
    modes.
    """

    def load(self, path: Path) -> Config:
        """
        @brief
        Load and validate configuration from YAML file.

        @params
            path : Path
                Filesystem path to configuration file (.yaml or .yml).

        @returns
            Validated Config instance with defaults applied.

        @raises
            ConfigError
                Raised if file is missing, malformed, or fails schema validation.
        """
        # (1) Read and parse YAML configuration file
        data = read_mapping(
            path,
            error_cls=ConfigError,
            source="ConfigLoader.load",
            suffixes=YAML_SUFFIXES,
            what="configuration",
        )

        # (2) Validate mapping against Pydantic schema
        return self._validate(data)

    def _validate(self, data: dict[str, Any]) -> Config:
        """
        @brief
        Validate parsed configuration mapping via Pydantic schema.

        @raises
            ConfigError
                Raised if schema validation fails due to structural inconsistencies.
        """
        try:
            return Config(**data)
        except ValidationError as e:
            raise ConfigError(
                message=f"Invalid configuration structure: {e}",
                source="ConfigLoader._validate",
                suggested_action=(
                    "Check field names, types, and values in config.yaml. "
                    "Remove unknown keys (extra fields are forbidden)."
                ),
            ) from e


__all__ = ["ConfigLoader"]
