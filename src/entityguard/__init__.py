"""Shape validation of entity types for a persistence mapping layer."""

from entityguard.errors import EntityValidationError
from entityguard.introspection import Entity, Float32, Int32, describe
from entityguard.registry import EntityRegistry
from entityguard.validator import ValidationResult, Violation, ViolationKind, validate, verify

__version__ = "0.1.0"

__all__ = [
    "Entity",
    "EntityRegistry",
    "EntityValidationError",
    "Float32",
    "Int32",
    "ValidationResult",
    "Violation",
    "ViolationKind",
    "describe",
    "validate",
    "verify",
]
