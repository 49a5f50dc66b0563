# src/entityguard/validator/violations.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from entityguard.errors import EntityValidationError


class ViolationKind(str, Enum):
    """Closed set of structural violations an entity type can exhibit."""

    # --- class level ---
    ANONYMOUS_TYPE = "AnonymousType"
    NOT_A_VALUE_TYPE = "NotAValueType"
    TYPE_IS_OPEN = "TypeIsOpen"
    TYPE_IS_ABSTRACT = "TypeIsAbstract"
    TYPE_IS_INNER = "TypeIsInner"
    TYPE_IS_COMPANION = "TypeIsCompanion"
    TYPE_IS_SEALED = "TypeIsSealed"
    TYPE_NOT_PUBLIC = "TypeNotPublic"
    TYPE_HAS_TYPE_PARAMETERS = "TypeHasTypeParameters"
    INVALID_SUPERTYPES = "InvalidSupertypes"

    # --- structure ---
    NO_PRIMARY_CONSTRUCTOR = "NoPrimaryConstructor"
    NO_PROPERTIES = "NoProperties"

    # --- constructor ---
    CONSTRUCTOR_IS_EXTERNAL = "ConstructorIsExternal"
    CONSTRUCTOR_IS_INFIX = "ConstructorIsInfix"
    CONSTRUCTOR_IS_INLINE = "ConstructorIsInline"
    CONSTRUCTOR_IS_ABSTRACT = "ConstructorIsAbstract"
    CONSTRUCTOR_IS_OPEN = "ConstructorIsOpen"
    CONSTRUCTOR_HAS_TYPE_PARAMETERS = "ConstructorHasTypeParameters"
    CONSTRUCTOR_NOT_PUBLIC = "ConstructorNotPublic"
    ID_ARGUMENT_MISMATCH = "IdArgumentMismatch"
    PROPERTY_ORDER_MISMATCH = "PropertyOrderMismatch"

    # --- identifier field ---
    ID_NOT_DECLARED_LAST = "IdNotDeclaredLast"
    ID_NOT_LONG = "IdNotLong"
    ID_IS_NULLABLE = "IdIsNullable"

    # --- fields ---
    PROPERTY_IS_ABSTRACT = "PropertyIsAbstract"
    PROPERTY_IS_OPEN = "PropertyIsOpen"
    PROPERTY_IS_LATEINIT = "PropertyIsLateinit"
    PROPERTY_NOT_PUBLIC = "PropertyNotPublic"
    INVALID_PROPERTY_TYPE = "InvalidPropertyType"


@dataclass(frozen=True)
class Violation:
    """
    @brief
    One structural violation found in an entity type.

    @details
    `type_name` is None only for ANONYMOUS_TYPE. `member_name` names the
    offending field when the violation concerns a single field.
    """

    kind: ViolationKind
    type_name: str | None
    message: str
    member_name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "type_name": self.type_name,
            "member_name": self.member_name,
            "message": self.message,
        }


@dataclass(frozen=True)
class ValidationResult:
    """
    @brief
    Outcome of validating one type descriptor.

    @details
    Either `ok=True` with no violation, or `ok=False` carrying exactly one
    Violation (the first one encountered).
    """

    ok: bool
    violation: Violation | None = None
    type_name: str | None = None

    @classmethod
    def success(cls, type_name: str | None) -> ValidationResult:
        return cls(ok=True, type_name=type_name)

    @classmethod
    def failure(cls, violation: Violation) -> ValidationResult:
        return cls(ok=False, violation=violation, type_name=violation.type_name)

    @property
    def kind(self) -> ViolationKind | None:
        return self.violation.kind if self.violation else None

    def unwrap(self) -> None:
        """Raise EntityValidationError if the result is a failure."""
        if self.violation is not None:
            raise EntityValidationError(
                self.violation,
                source="ValidationResult.unwrap",
                suggested_action=_ACTIONS.get(self.violation.kind),
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type_name": self.type_name,
            "valid": self.ok,
            "violation": self.violation.to_dict() if self.violation else None,
        }


# Hints attached to EntityValidationError for each kind
_ACTIONS: dict[ViolationKind, str] = {
    ViolationKind.ANONYMOUS_TYPE: "Declare the entity as a named top-level class.",
    ViolationKind.NOT_A_VALUE_TYPE: "Declare the entity as a data class.",
    ViolationKind.TYPE_IS_OPEN: "Mark the entity class final.",
    ViolationKind.TYPE_IS_ABSTRACT: "Remove abstract members from the entity class.",
    ViolationKind.TYPE_IS_INNER: "Move the entity class to module level.",
    ViolationKind.TYPE_IS_COMPANION: "Use a regular class, not a companion object.",
    ViolationKind.TYPE_IS_SEALED: "Do not seal the entity class.",
    ViolationKind.TYPE_NOT_PUBLIC: "Make the entity class public.",
    ViolationKind.TYPE_HAS_TYPE_PARAMETERS: "Remove generic type parameters.",
    ViolationKind.INVALID_SUPERTYPES: "Inherit from the Entity marker only.",
    ViolationKind.NO_PRIMARY_CONSTRUCTOR: "Declare a primary constructor.",
    ViolationKind.NO_PROPERTIES: "Declare at least the 'id' field.",
    ViolationKind.CONSTRUCTOR_IS_EXTERNAL: "Use a plain primary constructor.",
    ViolationKind.CONSTRUCTOR_IS_INFIX: "Use a plain primary constructor.",
    ViolationKind.CONSTRUCTOR_IS_INLINE: "Use a plain primary constructor.",
    ViolationKind.CONSTRUCTOR_IS_ABSTRACT: "Use a plain primary constructor.",
    ViolationKind.CONSTRUCTOR_IS_OPEN: "Use a plain primary constructor.",
    ViolationKind.CONSTRUCTOR_HAS_TYPE_PARAMETERS: "Remove constructor type parameters.",
    ViolationKind.CONSTRUCTOR_NOT_PUBLIC: "Make the primary constructor public.",
    ViolationKind.ID_ARGUMENT_MISMATCH: "Make 'id' the last constructor argument.",
    ViolationKind.PROPERTY_ORDER_MISMATCH: "Declare fields in constructor argument order.",
    ViolationKind.ID_NOT_DECLARED_LAST: "Declare the 'id' field last.",
    ViolationKind.ID_NOT_LONG: "Declare 'id' as a 64-bit integer.",
    ViolationKind.ID_IS_NULLABLE: "Declare 'id' as non-nullable.",
    ViolationKind.PROPERTY_IS_ABSTRACT: "Give the field a concrete declaration.",
    ViolationKind.PROPERTY_IS_OPEN: "Make the field read-only.",
    ViolationKind.PROPERTY_IS_LATEINIT: "Initialize the field through the constructor.",
    ViolationKind.PROPERTY_NOT_PUBLIC: "Make the field public.",
    ViolationKind.INVALID_PROPERTY_TYPE: "Use a supported column type or an entity reference.",
}


def suggested_action(kind: ViolationKind) -> str | None:
    return _ACTIONS.get(kind)
