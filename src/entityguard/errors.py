# src/entityguard/errors.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from entityguard.validator.violations import Violation, ViolationKind


class EntityGuardError(Exception):
    """Base class for all structured entityguard exceptions."""

    def __init__(
        self, message: str, source: str | None = None, suggested_action: str | None = None
    ):
        super().__init__(message)
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.error_type = self.__class__.__name__
        self.source = source or "unknown"
        self.suggested_action = suggested_action

    def __str__(self) -> str:
        base = f"[{self.error_type}] {self.args[0]}"
        if self.source:
            base += f" (source={self.source})"
        if self.suggested_action:
            base += f" | action: {self.suggested_action}"
        return base


class ConfigError(EntityGuardError):
    """Invalid or missing configuration (config.yaml)"""


class DescriptorError(EntityGuardError):
    """Malformed type descriptor or descriptor file"""


class IntrospectionError(EntityGuardError):
    """A Python class could not be turned into a type descriptor"""


class RegistrationError(EntityGuardError):
    """Entity registry misuse (duplicate or unknown entity)"""


class ReportError(EntityGuardError):
    """Validation report could not be persisted"""


class EntityValidationError(EntityGuardError):
    """
    @brief
    An entity type failed shape validation.

    @details
    Carries the structured Violation so callers can branch on
    `error.kind` instead of parsing the message.
    """

    def __init__(
        self,
        violation: Violation,
        source: str | None = None,
        suggested_action: str | None = None,
    ):
        super().__init__(violation.message, source=source, suggested_action=suggested_action)
        self.violation = violation

    @property
    def kind(self) -> ViolationKind:
        return self.violation.kind
