# src/entityguard/validator/validator.py
from __future__ import annotations

import logging

from entityguard.errors import DescriptorError, EntityValidationError
from entityguard.schemas.models import (
    MARKER_TYPE_NAME,
    ROOT_TYPE_NAME,
    FieldDescriptor,
    IdPosition,
    TypeDescriptor,
)
from entityguard.validator.checks import (
    check_class,
    check_constructor,
    check_field,
    check_id_field,
    reject,
    resolve_name,
)
from entityguard.validator.violations import ValidationResult, ViolationKind

logger = logging.getLogger(__name__)


# ---------------------------
# VALIDATOR CLASS (instance core)
# ----------------------------
class EntityValidator:
    """
    @brief
    Shape validator for one entity type descriptor.

    @details
    Runs the class-level, constructor, identifier-field and per-field checks
    in fixed order and stops at the first violation. The descriptor is only
    read, so the same instance may be run any number of times.

    `run_all_checks()` raises EntityValidationError; `result()` converts the
    outcome into a ValidationResult instead.
    """

    # ---------- Constructor ----------
    def __init__(
        self,
        descriptor: TypeDescriptor,
        id_position: IdPosition | str = IdPosition.LAST,
        marker: str = MARKER_TYPE_NAME,
        root: str = ROOT_TYPE_NAME,
    ) -> None:
        """
        @brief
        Initialize validation context.

        @params
            descriptor : TypeDescriptor
                Snapshot of the candidate entity type.
            id_position : IdPosition | str
                End of the field sequence holding the identifier candidate.
            marker : str
                Qualified name of the entity marker supertype.
            root : str
                Qualified name of the universal root supertype.

        @raises
            DescriptorError
                If descriptor is not a TypeDescriptor or id_position is unknown.
        """
        if not isinstance(descriptor, TypeDescriptor):
            raise DescriptorError(
                message=f"Expected TypeDescriptor, got {type(descriptor).__name__}",
                source="EntityValidator.__init__",
                suggested_action="Build the descriptor with introspection.describe() "
                "or DescriptorLoader.",
            )
        try:
            self.id_position = IdPosition(id_position)
        except ValueError as e:
            raise DescriptorError(
                message=f"Unknown id_position: {id_position!r}",
                source="EntityValidator.__init__",
                suggested_action="Use 'last' or 'first'.",
            ) from e

        self.descriptor = descriptor
        self.marker = marker
        self.root = root

    # ---------- Public lifecycle API ----------
    def run_all_checks(self) -> None:
        """
        @brief
        Execute the full validation sequence.

        @details
        Name resolution runs first because every later message embeds the
        qualified name. The primary constructor and at least one field must
        exist before constructor and identifier checks can run.

        @raises
            EntityValidationError
                On the first violation found.
        """
        d = self.descriptor

        # (1) Name and class-level modifiers
        name = resolve_name(d)
        logger.debug("Checking class modifiers of %s", name)
        check_class(d, name, marker=self.marker, root=self.root)

        # (2) Structure required by the remaining checks
        constructor = d.constructor
        if constructor is None:
            raise reject(
                ViolationKind.NO_PRIMARY_CONSTRUCTOR,
                name,
                f"{name} does not have a primary constructor",
                source="EntityValidator.run_all_checks",
            )

        if not d.fields:
            raise reject(
                ViolationKind.NO_PROPERTIES,
                name,
                f"{name} does not declare any properties. It must have at least an ID column",
                source="EntityValidator.run_all_checks",
            )

        id_field, other_fields = self._split_fields(d.fields)

        # (3) Constructor against declared fields
        logger.debug("Checking primary constructor of %s", name)
        check_constructor(constructor, id_field, other_fields, name)

        # (4) Identifier candidate
        logger.debug("Checking identifier field '%s' of %s", id_field.name, name)
        check_id_field(id_field, name)

        # (5) Every declared field, identifier included
        for field in d.fields:
            check_field(field, name)

    def result(self) -> ValidationResult:
        """
        @brief
        Run all checks and report the outcome as a ValidationResult.

        @details
        Shape violations are converted into a failed result; any other
        exception propagates unchanged.
        """
        try:
            self.run_all_checks()
        except EntityValidationError as e:
            logger.warning("Entity rejected: %s", e.violation.message)
            return ValidationResult.failure(e.violation)

        logger.info("Entity accepted: %s", self.descriptor.qualified_name)
        return ValidationResult.success(self.descriptor.qualified_name)

    # ---------- Helpers ----------
    def _split_fields(
        self, fields: tuple[FieldDescriptor, ...]
    ) -> tuple[FieldDescriptor, list[FieldDescriptor]]:
        """Pick the identifier candidate and the remaining fields in order."""
        if self.id_position == IdPosition.FIRST:
            return fields[0], list(fields[1:])
        return fields[-1], list(fields[:-1])


def validate(
    descriptor: TypeDescriptor,
    *,
    id_position: IdPosition | str = IdPosition.LAST,
    marker: str = MARKER_TYPE_NAME,
    root: str = ROOT_TYPE_NAME,
) -> ValidationResult:
    """
    @brief
    Validate one entity type descriptor and return a tagged result.

    @details
    Pure function of the descriptor: no caching, no side effects beyond
    logging. Calling it twice on the same descriptor yields equal results.

    @returns
        ValidationResult with ok=True, or ok=False and the first Violation.

    @raises
        DescriptorError
            If descriptor is not a TypeDescriptor.
    """
    validator = EntityValidator(descriptor, id_position=id_position, marker=marker, root=root)
    return validator.result()


def verify(
    descriptor: TypeDescriptor,
    *,
    id_position: IdPosition | str = IdPosition.LAST,
    marker: str = MARKER_TYPE_NAME,
    root: str = ROOT_TYPE_NAME,
) -> None:
    """
    @brief
    Validate one entity type descriptor, raising on the first violation.

    @raises
        EntityValidationError
            Carrying the Violation (see `.kind`).
        DescriptorError
            If descriptor is not a TypeDescriptor.
    """
    EntityValidator(descriptor, id_position=id_position, marker=marker, root=root).run_all_checks()
