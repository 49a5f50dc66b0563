# src/entityguard/introspection/entity.py
from __future__ import annotations

from typing import NewType


class Entity:
    """
    @brief
    Marker base class for persisted entity types.

    @details
    Entity classes inherit from this marker and nothing else, and are
    declared as frozen, final dataclasses whose last field is `id: int`.

    Example:
        @final
        @dataclass(frozen=True)
        class Customer(Entity):
            name: str
            balance: Decimal
            id: int
    """

    __slots__ = ()


# Narrow numeric column types; plain int and float map to 64-bit columns
Int32 = NewType("Int32", int)
Float32 = NewType("Float32", float)
