# src/entityguard/registry.py
"""
Entity Registry.

Holds the entity types a persistence layer is allowed to map. Every type is
shape-validated when it is registered, so a registry only ever contains
approved descriptors:

    registry = EntityRegistry()
    registry.register(Customer)
    descriptor = registry.get("shop.models.Customer")
"""

from __future__ import annotations

import logging
from typing import cast

from entityguard.errors import RegistrationError
from entityguard.introspection.describe import describe
from entityguard.schemas.models import MARKER_TYPE_NAME, ROOT_TYPE_NAME, IdPosition, TypeDescriptor
from entityguard.validator.validator import verify

logger = logging.getLogger(__name__)


class EntityRegistry:
    """
    Registry of validated entity descriptors keyed by qualified name.

    Each instance owns its own mapping; nothing is shared between registries.
    """

    def __init__(
        self,
        id_position: IdPosition | str = IdPosition.LAST,
        marker: str = MARKER_TYPE_NAME,
        root: str = ROOT_TYPE_NAME,
    ) -> None:
        self.id_position = IdPosition(id_position)
        self.marker = marker
        self.root = root
        self._entities: dict[str, TypeDescriptor] = {}

    def register(self, entity: type | TypeDescriptor) -> TypeDescriptor:
        """
        Validate and register an entity class or descriptor.

        Args:
            entity: Entity class (described via introspection) or a
                ready-made TypeDescriptor.

        Returns:
            The registered descriptor.

        Raises:
            EntityValidationError: If the type fails shape validation; the
                registry is left unchanged.
            RegistrationError: If a type with the same name is registered.
        """
        descriptor = entity if isinstance(entity, TypeDescriptor) else describe(entity)
        verify(descriptor, id_position=self.id_position, marker=self.marker, root=self.root)

        # verify() guarantees a qualified name
        name = cast(str, descriptor.qualified_name)
        if name in self._entities:
            raise RegistrationError(
                f"Entity '{name}' is already registered",
                source="EntityRegistry.register",
                suggested_action="Register each entity type once at startup.",
            )

        self._entities[name] = descriptor
        logger.info("Registered entity %s", name)
        return descriptor

    def get(self, name: str) -> TypeDescriptor:
        """
        Get a registered descriptor by qualified name.

        Raises:
            RegistrationError: If no entity with that name is registered.
        """
        if name not in self._entities:
            available = ", ".join(self._entities) or "(none)"
            raise RegistrationError(
                f"Entity '{name}' not found. Registered entities: {available}",
                source="EntityRegistry.get",
            )
        return self._entities[name]

    def available(self) -> list[str]:
        """List registered entity names in registration order."""
        return list(self._entities)

    def clear(self) -> None:
        """Clear all registered entities (mainly for tests)."""
        self._entities.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._entities

    def __len__(self) -> int:
        return len(self._entities)
