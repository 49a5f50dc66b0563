# src/entityguard/dataloader/descriptor_loader.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from entityguard.dataloader.files import JSON_SUFFIXES, YAML_SUFFIXES, read_mapping
from entityguard.errors import DescriptorError
from entityguard.schemas.models import TypeDescriptor

logger = logging.getLogger(__name__)


class DescriptorLoader:
    """
    @brief
    Loader for type descriptors stored in YAML or JSON files.

    @details
    Lets descriptors produced by an external metadata facility (for
    instance another language's reflection API) be validated without
    importing any Python class. `supertypes` must be listed explicitly;
    validation.marker/root name the accepted pair. Expected layout:

        entities:
          - qualified_name: shop.Customer
            is_data: true
            supertypes: [entityguard.introspection.entity.Entity, builtins.object]
            constructor:
              parameters: [{name: text}, {name: decimal}, {name: int64}]
            fields:
              - {name: name, type: {name: text}}
              - {name: balance, type: {name: decimal}}
              - {name: id, type: {name: int64}}
    """

    def load(self, path: Path) -> list[TypeDescriptor]:
        """
        @brief
        Load and validate every descriptor declared in a file.

        @returns
            Descriptors in file order.

        @raises
            DescriptorError
                Raised if the file is missing, malformed, or any entry fails
                schema validation.
        """
        # (1) Read file into mapping
        data = read_mapping(
            path,
            error_cls=DescriptorError,
            source="DescriptorLoader.load",
            suffixes=YAML_SUFFIXES | JSON_SUFFIXES,
            what="descriptor",
        )

        # (2) Locate the entity list
        entries = data.get("entities")
        if not isinstance(entries, list):
            raise DescriptorError(
                message=f"{path.name}: 'entities' must be a list of descriptors",
                source="DescriptorLoader.load",
                suggested_action="Put descriptors under a top-level 'entities:' list.",
            )

        # (3) Validate entries one by one so errors point at the culprit
        descriptors = [self._validate(entry, idx, path) for idx, entry in enumerate(entries)]
        logger.info("Loaded %d descriptor(s) from %s", len(descriptors), path)
        return descriptors

    def _validate(self, entry: Any, idx: int, path: Path) -> TypeDescriptor:
        label = entry.get("qualified_name") if isinstance(entry, dict) else None
        try:
            return TypeDescriptor.model_validate(entry)
        except ValidationError as e:
            raise DescriptorError(
                message=f"{path.name}: invalid descriptor #{idx} ({label or 'unnamed'}): {e}",
                source="DescriptorLoader._validate",
                suggested_action="Check field names and types; unknown keys are forbidden.",
            ) from e


__all__ = ["DescriptorLoader"]
