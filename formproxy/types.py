"""Core type definitions for the formproxy validation engine.

This module defines the enumerations shared by the form model, the engine and
the event stream:
- FieldStatus: Runtime status of a field, resolved per validation pass
- ButtonStatus: Whether a submit control is enabled
- FieldErrorCode: Which declared constraint a field violated
- EventType: Audit event types emitted by the runtime

Enum values use the protobuf names of the form wire schema so that serialized
forms stay readable by clients speaking that schema.
"""

from enum import Enum


class FieldStatus(str, Enum):
    """Runtime status of a field.

    Only ACTIVE and REQUIRED fields have their values checked. An ACTIVE field
    tolerates an empty value; a REQUIRED one does not.
    """
    UNSPECIFIED = "FIELD_STATUS_UNSPECIFIED"
    ACTIVE = "FIELD_STATUS_ACTIVE"
    REQUIRED = "FIELD_STATUS_REQUIRED"
    DISABLED = "FIELD_STATUS_DISABLED"
    HIDDEN = "FIELD_STATUS_HIDDEN"

    @property
    def is_checked(self) -> bool:
        """Whether values of a field in this status are checked."""
        return self in (FieldStatus.ACTIVE, FieldStatus.REQUIRED)


class ButtonStatus(str, Enum):
    """Submit control status. Flipped to ACTIVE only on a valid form."""
    INACTIVE = "BUTTON_INACTIVE"
    ACTIVE = "BUTTON_ACTIVE"


class FieldErrorCode(str, Enum):
    """Validation error codes for individual field failures."""
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"
    PATTERN_MISMATCH = "pattern_mismatch"
    BELOW_MINIMUM = "below_minimum"
    ABOVE_MAXIMUM = "above_maximum"
    INVALID_OPTION = "invalid_option"


class EventType(str, Enum):
    """Audit event types emitted by the runtime."""
    FORM_REJECTED = "form.rejected"
    VALIDATION_PASSED = "validation.passed"
    VALIDATION_FAILED = "validation.failed"
    FORM_SENT = "form.sent"


__all__ = [
    "FieldStatus",
    "ButtonStatus",
    "FieldErrorCode",
    "EventType",
]
