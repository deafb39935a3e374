"""Field validation for the formproxy engine.

validate_field copies a submitted value onto the schema's field and checks it
against the constraints the schema declares for that field. Checks only run
for fields whose resolved status is ACTIVE or REQUIRED, and an ACTIVE field
with an empty (zero) value is accepted as "not filled in yet".

Checks stop at the first violated constraint of a field:
- Text: min length, then max length, then regex
- Numeric: min, then max (on the integer part of the value)
- Select: the selected key must match a declared option

The violated constraint's declared message is written to the field's error.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from formproxy.errors import FieldError
from formproxy.form import Field, NumericField, SelectField, TextField
from formproxy.types import FieldErrorCode, FieldStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FieldValidationResult:
    """Outcome of validating one field.

    Attributes:
        value: The accepted value now held by the output field
        error: The violated constraint, None if the field passed or was skipped

    Examples:
        >>> FieldValidationResult(value="abc").ok
        True
    """
    value: Union[str, float, int]
    error: Optional[FieldError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {"value": self.value, "ok": self.ok}
        if self.error is not None:
            result["error"] = self.error.to_dict()
        return result


def _pattern_matches(pattern: str, value: str) -> bool:
    try:
        return re.search(pattern, value) is not None
    except re.error:
        logger.warning("Invalid field pattern %r treated as a mismatch", pattern)
        return False


def _check_text(text: TextField, index: int) -> Optional[FieldError]:
    length = len(text.value)
    if length < text.min:
        return FieldError(index=index, code=FieldErrorCode.TOO_SHORT, message=text.min_error)
    if length > text.max:
        return FieldError(index=index, code=FieldErrorCode.TOO_LONG, message=text.max_error)
    if not _pattern_matches(text.regex, text.value):
        return FieldError(index=index, code=FieldErrorCode.PATTERN_MISMATCH, message=text.regex_error)
    return None


def _check_numeric(numeric: NumericField, index: int) -> Optional[FieldError]:
    if not math.isfinite(numeric.value):
        # NaN and -inf sit below any minimum, +inf above any maximum
        if numeric.value > 0:
            return FieldError(index=index, code=FieldErrorCode.ABOVE_MAXIMUM, message=numeric.max_error)
        return FieldError(index=index, code=FieldErrorCode.BELOW_MINIMUM, message=numeric.min_error)
    value = int(numeric.value)
    if value < numeric.min:
        return FieldError(index=index, code=FieldErrorCode.BELOW_MINIMUM, message=numeric.min_error)
    if value > numeric.max:
        return FieldError(index=index, code=FieldErrorCode.ABOVE_MAXIMUM, message=numeric.max_error)
    return None


def _check_select(select: SelectField, index: int) -> Optional[FieldError]:
    if select.get_option() is None:
        return FieldError(index=index, code=FieldErrorCode.INVALID_OPTION, message=select.error)
    return None


def validate_field(
    out_field: Field,
    in_field: Field,
    status: FieldStatus,
    form_valid: bool = True,
    index: int = 0,
) -> FieldValidationResult:
    """Accept a submitted value into a schema field and check it.

    The submitted value is always copied onto out_field, whatever the status,
    so disabled and hidden values survive the round trip. Checks are skipped
    when the form already failed on an earlier field, when the status is not
    ACTIVE or REQUIRED, or when an ACTIVE field holds the zero value.

    On failure out_field.error is set to the declared message.

    Args:
        out_field: Field built from the schema; mutated in place
        in_field: The submitted field at the same position
        status: The field's resolved status for this pass
        form_valid: Whether every earlier field passed
        index: Position of the field, recorded on the error

    Returns:
        FieldValidationResult with the accepted value and the error, if any

    Raises:
        TypeError: If the two fields do not carry the same payload kind

    Examples:
        >>> out = Field(kind=TextField(min=3, max=10, min_error="Too short"))
        >>> result = validate_field(out, Field(kind=TextField(value="ab")), FieldStatus.REQUIRED)
        >>> result.error.message, out.error
        ('Too short', 'Too short')
    """
    out_kind, in_kind = out_field.kind, in_field.kind
    if type(out_kind) is not type(in_kind) or out_kind is None:
        raise TypeError(
            f"Field {index}: cannot validate a {type(in_kind).__name__} "
            f"against a {type(out_kind).__name__} schema"
        )

    error: Optional[FieldError] = None
    if isinstance(out_kind, TextField):
        out_kind.value = in_kind.value
        value: Union[str, float, int] = out_kind.value
        if form_valid and status.is_checked and not (status == FieldStatus.ACTIVE and value == ""):
            error = _check_text(out_kind, index)
    elif isinstance(out_kind, NumericField):
        out_kind.value = in_kind.value
        value = out_kind.value
        if form_valid and status.is_checked and not (status == FieldStatus.ACTIVE and value == 0):
            error = _check_numeric(out_kind, index)
    elif isinstance(out_kind, SelectField):
        out_kind.index = in_kind.index
        value = out_kind.index
        if form_valid and status.is_checked and not (status == FieldStatus.ACTIVE and value == 0):
            error = _check_select(out_kind, index)
    else:
        raise TypeError(f"Field {index}: unknown payload kind {type(out_kind).__name__}")

    if error is not None:
        out_field.error = error.message
        logger.debug("Field %d failed %s check: %r", index, error.code.value, error.message)
    return FieldValidationResult(value=value, error=error)


__all__ = [
    "FieldValidationResult",
    "validate_field",
]
