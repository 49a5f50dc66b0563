from entityguard.validator.validator import EntityValidator, validate, verify
from entityguard.validator.violations import ValidationResult, Violation, ViolationKind

__all__ = [
    "EntityValidator",
    "ValidationResult",
    "Violation",
    "ViolationKind",
    "validate",
    "verify",
]
