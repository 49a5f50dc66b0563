# src/entityguard/introspection/describe.py
"""
@brief
Adapter turning Python classes into TypeDescriptor snapshots.

@details
This is the only place where entityguard reflects over live objects. The
validator itself works purely on the descriptors produced here.

Python has no direct counterpart for some modifiers, so they are mapped as
follows:
    - open class     : not decorated with typing.final
    - inner class    : declared inside another class
    - anonymous      : declared inside a function (<locals>)
    - open field     : the dataclass is not frozen, or metadata {"open": True}
    - lateinit field : dataclass field with init=False
    - abstract field : metadata {"abstract": True}
    - private        : name starts with an underscore
Companion objects and sealed hierarchies do not exist in Python and are
always reported as absent.
"""

from __future__ import annotations

import dataclasses
import importlib
import inspect
import logging
import types
import typing
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any

from entityguard.errors import IntrospectionError
from entityguard.introspection.entity import Entity, Float32, Int32
from entityguard.schemas.models import (
    ROOT_TYPE_NAME,
    ConstructorDescriptor,
    FieldDescriptor,
    TypeDescriptor,
    TypeRef,
    ValueType,
    Visibility,
)

logger = logging.getLogger(__name__)

_VALUE_TYPES: dict[Any, ValueType] = {
    str: ValueType.TEXT,
    Decimal: ValueType.DECIMAL,
    int: ValueType.INT64,
    Int32: ValueType.INT32,
    bool: ValueType.BOOLEAN,
    date: ValueType.DATE,
    float: ValueType.FLOAT64,
    Float32: ValueType.FLOAT32,
    time: ValueType.TIME,
    datetime: ValueType.DATETIME,
}


# ----------------------------
# AUXILIARY FUNCTIONS
# ----------------------------
def _qualified_name(obj: Any) -> str:
    module = getattr(obj, "__module__", None) or "builtins"
    qualname = getattr(obj, "__qualname__", None) or getattr(obj, "__name__", None)
    if qualname is None:
        return str(obj)
    return f"{module}.{qualname}"


def _visibility(name: str) -> Visibility:
    return Visibility.PRIVATE if name.startswith("_") else Visibility.PUBLIC


def type_ref(tp: Any) -> TypeRef:
    """
    @brief
    Map a resolved Python annotation to a TypeRef.

    @details
    `X | None` and `Optional[X]` become nullable refs of X. Entity subclasses
    become entity refs. Generic aliases keep their arguments, so `list[str]`
    is never mistaken for `str`. Unknown annotations are kept as opaque refs
    named after the annotation.

    @params
        tp : Any
            Annotation as returned by typing.get_type_hints().

    @returns
        TypeRef describing the annotation.
    """
    # (1) Optional / union
    origin = typing.get_origin(tp)
    if origin is typing.Union or origin is types.UnionType:
        args = typing.get_args(tp)
        non_null = [a for a in args if a is not type(None)]
        if len(non_null) == 1 and len(non_null) < len(args):
            return type_ref(non_null[0]).model_copy(update={"nullable": True})
        return TypeRef(
            name="typing.Union",
            nullable=len(non_null) < len(args),
            arguments=tuple(type_ref(a) for a in non_null),
        )

    # (2) Fixed column value types
    try:
        tag = _VALUE_TYPES.get(tp)
    except TypeError:  # unhashable annotation objects
        tag = None
    if tag is not None:
        return TypeRef(name=tag.value)

    # (3) Parameterized generics
    if origin is not None:
        return TypeRef(
            name=_qualified_name(origin),
            arguments=tuple(type_ref(a) for a in typing.get_args(tp)),
        )

    # (4) Plain classes, entity references included
    if inspect.isclass(tp):
        return TypeRef(name=_qualified_name(tp), is_entity=issubclass(tp, Entity))

    # (5) TypeVar, Any, Ellipsis and other annotation objects
    return TypeRef(name=str(tp) or repr(tp))


def _resolve_hints(obj: Any, owner: str) -> dict[str, Any]:
    try:
        return typing.get_type_hints(obj)
    except Exception as e:
        raise IntrospectionError(
            message=f"Cannot resolve type annotations of {owner}: {e}",
            source="introspection.describe",
            suggested_action="Make every annotation importable from the defining module.",
        ) from e


def _type_parameters(obj: Any) -> tuple[str, ...]:
    params = getattr(obj, "__type_params__", ()) or getattr(obj, "__parameters__", ())
    return tuple(getattr(p, "__name__", str(p)) for p in params)


def _describe_constructor(cls: type, hints: dict[str, Any]) -> ConstructorDescriptor | None:
    """
    @brief
    Describe the primary constructor of a class.

    @details
    The primary constructor is the `__init__` declared by the class itself
    (generated or hand-written). A dataclass with init=False, or a class
    inheriting its `__init__`, has none.
    """
    if dataclasses.is_dataclass(cls) and not cls.__dataclass_params__.init:
        return None
    init = cls.__dict__.get("__init__")
    if init is None:
        return None

    # (1) Parameters, skipping self and variadic parameters
    parameters = [
        p
        for p in list(inspect.signature(init).parameters.values())[1:]
        if p.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
    ]

    # (2) Generated dataclass __init__ shares the field hints; a hand-written
    #     one with extra parameters needs its own
    init_hints = dict(hints)
    if any(p.name not in hints for p in parameters):
        init_hints.update(_resolve_hints(init, f"{cls.__qualname__}.__init__"))

    params = [type_ref(init_hints.get(p.name, Any)) for p in parameters]

    return ConstructorDescriptor(
        parameters=tuple(params),
        is_abstract=bool(getattr(init, "__isabstractmethod__", False)),
        visibility=Visibility.PUBLIC,
        type_parameters=_type_parameters(init),
    )


def _describe_fields(cls: type, hints: dict[str, Any]) -> tuple[FieldDescriptor, ...]:
    """Describe declared fields in declaration order."""
    if not dataclasses.is_dataclass(cls):
        own = inspect.get_annotations(cls)
        return tuple(
            FieldDescriptor(
                name=name,
                type=type_ref(hints.get(name, Any)),
                is_open=True,
                visibility=_visibility(name),
            )
            for name in own
        )

    frozen = cls.__dataclass_params__.frozen
    return tuple(
        FieldDescriptor(
            name=f.name,
            type=type_ref(hints.get(f.name, f.type)),
            is_abstract=bool(f.metadata.get("abstract", False)),
            is_open=not frozen or bool(f.metadata.get("open", False)),
            is_lateinit=not f.init,
            visibility=_visibility(f.name),
        )
        for f in dataclasses.fields(cls)
    )


# ----------------------------
# PUBLIC API
# ----------------------------
def describe(cls: type) -> TypeDescriptor:
    """
    @brief
    Build the TypeDescriptor of a Python class.

    @details
    The resulting descriptor is a frozen snapshot: later changes to the
    class are not reflected in it.

    @params
        cls : type
            Candidate entity class.

    @returns
        TypeDescriptor of the class.

    @raises
        IntrospectionError
            If cls is not a class or its annotations cannot be resolved.
    """
    if not inspect.isclass(cls):
        raise IntrospectionError(
            message=f"Expected a class, got {type(cls).__name__}",
            source="introspection.describe",
            suggested_action="Pass the entity class itself, not an instance.",
        )

    qualname = cls.__qualname__
    anonymous = "<locals>" in qualname
    hints = _resolve_hints(cls, qualname)

    supertypes = {_qualified_name(b) for b in cls.__bases__}
    supertypes.add(ROOT_TYPE_NAME)

    descriptor = TypeDescriptor(
        qualified_name=None if anonymous else f"{cls.__module__}.{qualname}",
        is_data=dataclasses.is_dataclass(cls),
        is_open=not getattr(cls, "__final__", False),
        is_abstract=inspect.isabstract(cls),
        is_inner=not anonymous and "." in qualname,
        is_companion=False,
        is_sealed=False,
        visibility=_visibility(cls.__name__),
        type_parameters=_type_parameters(cls),
        supertypes=frozenset(supertypes),
        constructor=_describe_constructor(cls, hints),
        fields=_describe_fields(cls, hints),
    )
    logger.debug("Described %s: %d field(s)", qualname, len(descriptor.fields))
    return descriptor


def describe_path(path: str) -> TypeDescriptor:
    """
    @brief
    Import a class from a `module:QualName` path and describe it.

    @raises
        IntrospectionError
            If the path is malformed, the module cannot be imported or the
            attribute does not exist.
    """
    module_name, sep, attr_path = path.partition(":")
    if not sep or not module_name or not attr_path:
        raise IntrospectionError(
            message=f"Invalid entity path: {path!r}",
            source="introspection.describe_path",
            suggested_action="Use the form 'package.module:ClassName'.",
        )

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise IntrospectionError(
            message=f"Cannot import module {module_name!r}: {e}",
            source="introspection.describe_path",
            suggested_action="Check that the module is installed and on sys.path.",
        ) from e

    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise IntrospectionError(
                message=f"{module_name!r} has no attribute {attr_path!r}",
                source="introspection.describe_path",
                suggested_action="Check the class name in the entity path.",
            ) from e

    return describe(obj)


__all__ = ["describe", "describe_path", "type_ref"]
