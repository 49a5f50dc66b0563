# src/entityguard/validator/checks.py
"""
@brief
Individual shape checks applied to an entity type descriptor.

@details
Each check inspects one aspect of a TypeDescriptor and raises
EntityValidationError on the first violation it finds. Checks never mutate
the descriptor and never accumulate results; ordering between checks is
owned by EntityValidator.
"""

from __future__ import annotations

from collections.abc import Sequence

from entityguard.errors import EntityValidationError
from entityguard.schemas.models import (
    ALLOWED_VALUE_TYPES,
    ID_FIELD_NAME,
    MARKER_TYPE_NAME,
    ROOT_TYPE_NAME,
    ConstructorDescriptor,
    FieldDescriptor,
    TypeDescriptor,
    TypeRef,
    ValueType,
    Visibility,
)
from entityguard.validator.violations import Violation, ViolationKind, suggested_action


def reject(
    kind: ViolationKind,
    type_name: str | None,
    message: str,
    member_name: str | None = None,
    source: str = "checks",
) -> EntityValidationError:
    """Build the structured error for one violation."""
    violation = Violation(kind=kind, type_name=type_name, message=message, member_name=member_name)
    return EntityValidationError(
        violation, source=source, suggested_action=suggested_action(kind)
    )


# ----------------------------
# CLASS LEVEL
# ----------------------------
def resolve_name(descriptor: TypeDescriptor) -> str:
    """
    @brief
    Return the qualified name every later message embeds.

    @raises
        EntityValidationError
            ANONYMOUS_TYPE if the name is missing or blank.
    """
    name = descriptor.qualified_name
    if name is None or not name.strip():
        raise reject(
            ViolationKind.ANONYMOUS_TYPE,
            None,
            "Passed an entity type that is local or anonymous. "
            "There is no name to report, so no further detail can be given.",
            source="checks.resolve_name",
        )
    return name


def check_class(
    descriptor: TypeDescriptor,
    name: str,
    marker: str = MARKER_TYPE_NAME,
    root: str = ROOT_TYPE_NAME,
) -> None:
    """
    @brief
    Validate modifiers, visibility and inheritance of the type itself.

    @details
    The type must be a public, final, concrete, top-level value-record type
    without generic parameters whose only supertypes are the entity marker
    and the root type.
    """
    src = "checks.check_class"

    # (1) Modifier flags, one violation kind each
    flags = (
        (not descriptor.is_data, ViolationKind.NOT_A_VALUE_TYPE, "is not a data class"),
        (descriptor.is_open, ViolationKind.TYPE_IS_OPEN, "is open"),
        (descriptor.is_abstract, ViolationKind.TYPE_IS_ABSTRACT, "is abstract"),
        (descriptor.is_inner, ViolationKind.TYPE_IS_INNER, "is an inner class"),
        (descriptor.is_companion, ViolationKind.TYPE_IS_COMPANION, "is a companion object"),
        (descriptor.is_sealed, ViolationKind.TYPE_IS_SEALED, "is a sealed class"),
    )
    for violated, kind, text in flags:
        if violated:
            raise reject(kind, name, f"{name} {text}", source=src)

    # (2) Visibility and generics
    if descriptor.visibility != Visibility.PUBLIC:
        raise reject(ViolationKind.TYPE_NOT_PUBLIC, name, f"{name} is not public", source=src)

    if descriptor.type_parameters:
        raise reject(
            ViolationKind.TYPE_HAS_TYPE_PARAMETERS,
            name,
            f"{name} has type parameters: {', '.join(descriptor.type_parameters)}",
            source=src,
        )

    # (3) Exactly the marker and the root type, nothing else
    if len(descriptor.supertypes) != 2 or set(descriptor.supertypes) != {marker, root}:
        extra = sorted(descriptor.supertypes - {marker, root})
        raise reject(
            ViolationKind.INVALID_SUPERTYPES,
            name,
            f'{name} extends something other than "{marker}" and "{root}"'
            + (f" ({', '.join(extra)})" if extra else ""),
            source=src,
        )


# ----------------------------
# CONSTRUCTOR
# ----------------------------
def check_constructor(
    constructor: ConstructorDescriptor,
    id_field: FieldDescriptor,
    other_fields: Sequence[FieldDescriptor],
    name: str,
) -> None:
    """
    @brief
    Validate the primary constructor against the declared fields.

    @details
    Modifier checks run first. Then the parameter types are split into
    all-but-last and last: the last parameter must have exactly the
    identifier field's type, and the remaining parameter types must equal
    the remaining field types element by element, in order. Parameter names
    are never compared.

    @params
        constructor : ConstructorDescriptor
            Primary constructor of the entity.
        id_field : FieldDescriptor
            Identifier candidate picked by the orchestrator.
        other_fields : Sequence[FieldDescriptor]
            Every other declared field, in declaration order.
        name : str
            Qualified entity name for messages.
    """
    src = "checks.check_constructor"
    prefix = f"The primary constructor in {name}"

    # (1) Modifier flags
    flags = (
        (constructor.is_external, ViolationKind.CONSTRUCTOR_IS_EXTERNAL, "is external"),
        (constructor.is_infix, ViolationKind.CONSTRUCTOR_IS_INFIX, "is infix"),
        (constructor.is_inline, ViolationKind.CONSTRUCTOR_IS_INLINE, "is inline"),
        (constructor.is_abstract, ViolationKind.CONSTRUCTOR_IS_ABSTRACT, "is abstract"),
        (constructor.is_open, ViolationKind.CONSTRUCTOR_IS_OPEN, "is open"),
    )
    for violated, kind, text in flags:
        if violated:
            raise reject(kind, name, f"{prefix} {text}", source=src)

    if constructor.type_parameters:
        raise reject(
            ViolationKind.CONSTRUCTOR_HAS_TYPE_PARAMETERS,
            name,
            f"{prefix} takes type parameters",
            source=src,
        )

    if constructor.visibility != Visibility.PUBLIC:
        raise reject(
            ViolationKind.CONSTRUCTOR_NOT_PUBLIC, name, f"{prefix} is not public", source=src
        )

    # (2) Last argument carries the identifier
    params = list(constructor.parameters)
    if not params or params[-1] != id_field.type:
        got = str(params[-1]) if params else "nothing"
        raise reject(
            ViolationKind.ID_ARGUMENT_MISMATCH,
            name,
            f"Last argument to the constructor is not the ID argument in {name} "
            f"(expected {id_field.type}, got {got})",
            member_name=id_field.name,
            source=src,
        )

    # (3) Remaining arguments follow field declaration order exactly
    args = params[:-1]
    if args != [f.type for f in other_fields]:
        idx = next(
            i
            for i in range(max(len(args), len(other_fields)))
            if i >= len(args) or i >= len(other_fields) or args[i] != other_fields[i].type
        )
        field = other_fields[idx] if idx < len(other_fields) else None
        expected = str(field.type) if field else "nothing"
        got = str(args[idx]) if idx < len(args) else "nothing"
        raise reject(
            ViolationKind.PROPERTY_ORDER_MISMATCH,
            name,
            "Properties are not declared in the same order as the primary constructor "
            f"arguments in {name} (argument #{idx}: expected {expected}"
            + (f" for '{field.name}'" if field else "")
            + f", got {got})",
            member_name=field.name if field else None,
            source=src,
        )


# ----------------------------
# IDENTIFIER FIELD
# ----------------------------
def check_id_field(field: FieldDescriptor, name: str) -> None:
    """Validate name, type and nullability of the identifier candidate."""
    src = "checks.check_id_field"

    if field.name != ID_FIELD_NAME:
        raise reject(
            ViolationKind.ID_NOT_DECLARED_LAST,
            name,
            f"{name} does not declare the ID property last (found '{field.name}')",
            member_name=field.name,
            source=src,
        )

    if field.type.name != ValueType.INT64.value or field.type.arguments or field.type.is_entity:
        raise reject(
            ViolationKind.ID_NOT_LONG,
            name,
            f"The ID property in {name} is not a 64-bit integer (got {field.type})",
            member_name=field.name,
            source=src,
        )

    if field.type.nullable:
        raise reject(
            ViolationKind.ID_IS_NULLABLE,
            name,
            f"The ID property in {name} is nullable",
            member_name=field.name,
            source=src,
        )


# ----------------------------
# FIELDS
# ----------------------------
def is_allowed_type(ref: TypeRef) -> bool:
    """
    @brief
    Tell whether a field type may be persisted.

    @details
    Accepts a non-nullable value type from ALLOWED_VALUE_TYPES without
    generic arguments, or a non-nullable reference to another entity type.
    Referenced entities are not validated here and cycles are not detected.
    """
    if ref.nullable or ref.arguments:
        return False
    if ref.is_entity:
        return True
    return ref.name in ALLOWED_VALUE_TYPES


def check_field(field: FieldDescriptor, name: str) -> None:
    """Validate modifiers, visibility and value type of one declared field."""
    src = "checks.check_field"
    fname = field.name

    if field.is_abstract:
        raise reject(
            ViolationKind.PROPERTY_IS_ABSTRACT,
            name,
            f"{fname} declares an abstract property (in {name})",
            member_name=fname,
            source=src,
        )

    # only the identifier may stay open
    if field.is_open and fname != ID_FIELD_NAME:
        raise reject(
            ViolationKind.PROPERTY_IS_OPEN,
            name,
            f"{fname} declares an open property (in {name})",
            member_name=fname,
            source=src,
        )

    if field.is_lateinit:
        raise reject(
            ViolationKind.PROPERTY_IS_LATEINIT,
            name,
            f"{fname} declares a lateinit property (in {name})",
            member_name=fname,
            source=src,
        )

    if field.visibility != Visibility.PUBLIC:
        raise reject(
            ViolationKind.PROPERTY_NOT_PUBLIC,
            name,
            f"{fname} must be public in {name}",
            member_name=fname,
            source=src,
        )

    if not is_allowed_type(field.type):
        raise reject(
            ViolationKind.INVALID_PROPERTY_TYPE,
            name,
            f"{fname} in {name} is not a valid type ({field.type})",
            member_name=fname,
            source=src,
        )


__all__ = [
    "check_class",
    "reject",
    "check_constructor",
    "check_field",
    "check_id_field",
    "is_allowed_type",
    "resolve_name",
]
