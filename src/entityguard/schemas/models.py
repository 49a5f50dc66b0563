# src/entityguard/schemas/models.py
"""
@brief
Pydantic data models for the entityguard project.

@details
Defines two families of models:
    - Type descriptors: immutable metadata snapshots of a candidate entity
      type (TypeDescriptor, ConstructorDescriptor, FieldDescriptor, TypeRef).
      They are produced by an adapter or loaded from a descriptor file and
      never mutated afterwards.
    - Config: runtime configuration (from config.yaml) for the batch checker.

Descriptor models are frozen so a single snapshot can be validated any number
of times, from any thread, with identical results.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

# ------------------------------------------------------------
# Fixed vocabulary
# ------------------------------------------------------------
ID_FIELD_NAME = "id"
MARKER_TYPE_NAME = "entityguard.introspection.entity.Entity"
ROOT_TYPE_NAME = "builtins.object"


class ValueType(str, Enum):
    """Tags of the column value types an entity field may hold."""

    TEXT = "text"
    DECIMAL = "decimal"
    INT64 = "int64"
    INT32 = "int32"
    BOOLEAN = "bool"
    DATE = "date"
    FLOAT64 = "float64"
    FLOAT32 = "float32"
    TIME = "time"
    DATETIME = "datetime"


ALLOWED_VALUE_TYPES: frozenset[str] = frozenset(v.value for v in ValueType)


class Visibility(str, Enum):
    PUBLIC = "public"
    PROTECTED = "protected"
    INTERNAL = "internal"
    PRIVATE = "private"


class IdPosition(str, Enum):
    """Which end of the declared field sequence holds the identifier candidate."""

    LAST = "last"
    FIRST = "first"


class _StrictBaseModel(BaseModel):
    """
    @brief
    Base model enforcing strict defaults for configuration contracts.

    @details
    Forbids unknown fields and preserves exact naming rules.
    """

    model_config = {
        "extra": "forbid",  # Reject unknown fields
        "populate_by_name": True,  # Allow population by field name
        "use_enum_values": True,  # Export raw enum values
    }


class _FrozenModel(BaseModel):
    """
    @brief
    Base model for descriptor snapshots.

    @details
    Same strictness as _StrictBaseModel, plus immutability and hashing.
    Enum members are kept as members so descriptors compare cleanly.
    """

    model_config = {
        "extra": "forbid",
        "populate_by_name": True,
        "frozen": True,
    }


# ------------------------------------------------------------
# Type descriptors
# ------------------------------------------------------------
class TypeRef(_FrozenModel):
    """
    @brief
    Reference to the declared type of a field or constructor parameter.

    @details
    Two references are equal only if name, nullability, entity flag and
    generic arguments are all equal. Value types use a ValueType tag as name;
    any other type uses its qualified name.

    @params
        name : str
            ValueType tag or qualified type name.
        nullable : bool
            True if the declaration admits a null value.
        is_entity : bool
            True if the referenced type is a subtype of the entity marker.
        arguments : tuple[TypeRef, ...]
            Generic type arguments in declaration order.
    """

    name: str = Field(..., min_length=1, description="ValueType tag or qualified type name")
    nullable: bool = Field(False, description="Declaration admits null")
    is_entity: bool = Field(False, description="Referenced type subtypes the entity marker")
    arguments: tuple[TypeRef, ...] = Field((), description="Generic type arguments")

    def __str__(self) -> str:
        text = self.name
        if self.arguments:
            text += "[" + ", ".join(str(a) for a in self.arguments) + "]"
        if self.nullable:
            text += "?"
        return text


class ConstructorDescriptor(_FrozenModel):
    """
    @brief
    Primary constructor signature and modifiers.

    @details
    Parameter names are deliberately absent: only parameter types and their
    order take part in validation.
    """

    parameters: tuple[TypeRef, ...] = Field((), description="Parameter types in order")
    is_external: bool = False
    is_infix: bool = False
    is_inline: bool = False
    is_abstract: bool = False
    is_open: bool = False
    visibility: Visibility = Visibility.PUBLIC
    type_parameters: tuple[str, ...] = ()


class FieldDescriptor(_FrozenModel):
    name: str = Field(..., min_length=1, description="Declared field name")
    type: TypeRef = Field(..., description="Declared value type")
    is_abstract: bool = False
    is_open: bool = False
    is_lateinit: bool = False
    visibility: Visibility = Visibility.PUBLIC


class TypeDescriptor(_FrozenModel):
    """
    @brief
    Read-only snapshot of a candidate entity type.

    @details
    Holds class modifiers, declared supertypes, the primary constructor (if
    any) and the declared fields in declaration order. `qualified_name` is
    None for anonymous or local types.
    """

    qualified_name: str | None = Field(None, description="Qualified name, None if anonymous")
    is_data: bool = Field(False, description="Value-record (data) type")
    is_open: bool = False
    is_abstract: bool = False
    is_inner: bool = False
    is_companion: bool = False
    is_sealed: bool = False
    visibility: Visibility = Visibility.PUBLIC
    type_parameters: tuple[str, ...] = ()
    supertypes: frozenset[str] = Field(frozenset(), description="Declared supertype names")
    constructor: ConstructorDescriptor | None = None
    fields: tuple[FieldDescriptor, ...] = ()


# ------------------------------------------------------------
# Runtime configuration
# ------------------------------------------------------------
class ValidationConfig(BaseModel):
    """
    @brief
    Controls behavior of the validation run.

    @details
    `fail_on_first` stops a batch run at the first rejected entity; the
    validation of a single entity is always fail-fast.

    `marker` and `root` name the two supertypes every entity must declare.
    Descriptor files produced by another runtime use that runtime's names,
    e.g. `org.example.orm.Dao` and `kotlin.Any`.
    """

    model_config = {"extra": "forbid"}

    id_position: IdPosition = IdPosition.LAST
    write_report: bool = True
    fail_on_first: bool = False
    marker: str = Field(MARKER_TYPE_NAME, min_length=1, description="Entity marker supertype")
    root: str = Field(ROOT_TYPE_NAME, min_length=1, description="Universal root supertype")


class LoggingConfig(BaseModel):
    model_config = {"extra": "forbid"}

    level: str = Field(
        "INFO",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Root logging level",
    )


class Config(_StrictBaseModel):
    """
    @brief
    Represents the full runtime configuration loaded from config.yaml.

    @details
    Lists the entity classes (`module:Class`) and descriptor files to check,
    plus validation, logging and output settings.
    """

    output_dir: str | None = "data/output"
    entities: list[str] = Field(default_factory=list, description="Entity class paths")
    descriptor_files: list[str] = Field(default_factory=list, description="Descriptor files")
    validation: ValidationConfig = Field(default_factory=ValidationConfig.model_construct)
    logging: LoggingConfig = Field(default_factory=LoggingConfig.model_construct)


__all__ = [
    "ALLOWED_VALUE_TYPES",
    "Config",
    "ConstructorDescriptor",
    "FieldDescriptor",
    "ID_FIELD_NAME",
    "IdPosition",
    "MARKER_TYPE_NAME",
    "ROOT_TYPE_NAME",
    "TypeDescriptor",
    "TypeRef",
    "ValueType",
    "Visibility",
]
