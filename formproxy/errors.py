"""Error types for the formproxy validation engine.

Three kinds of failure exist and each is surfaced differently:
- A violated field constraint is data, not an exception. It is reported as a
  FieldError and its message is written onto the field.
- A malformed payload dictionary raises FormPayloadError from Form.from_dict.
- A schema that references fields it does not have raises FormSchemaError
  when it is registered.

Requests that do not match a registered schema are never exceptions either;
the runtime answers them with an empty, invalid form.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from formproxy.types import FieldErrorCode


@dataclass(frozen=True)
class FieldError:
    """Per-field validation error details.

    Attributes:
        index: Position of the field in the form's field sequence
        code: Which constraint was violated
        message: The error string declared on the field for this violation

    Examples:
        >>> err = FieldError(index=0, code=FieldErrorCode.TOO_SHORT, message="Too short")
        >>> err.to_dict()
        {'index': 0, 'code': 'too_short', 'message': 'Too short'}
    """
    index: int
    code: FieldErrorCode
    message: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "index": self.index,
            "code": self.code.value if isinstance(self.code, FieldErrorCode) else self.code,
            "message": self.message,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldError":
        """Create FieldError from dict."""
        code = data["code"]
        if isinstance(code, str):
            code = FieldErrorCode(code)
        return cls(index=data["index"], code=code, message=data["message"])


class FormPayloadError(ValueError):
    """Raised when a dictionary does not describe a form.

    Attributes:
        errors: One human-readable line per structural problem found
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(
            "Invalid form payload: " + "; ".join(self.errors)
            if self.errors
            else "Invalid form payload"
        )


class FormSchemaError(ValueError):
    """Raised when a form schema cannot be registered.

    Attributes:
        form_name: Name returned by the schema supplier (may be empty)
    """

    def __init__(self, message: str, form_name: Optional[str] = None):
        self.form_name = form_name
        super().__init__(message)


__all__ = [
    "FieldError",
    "FormPayloadError",
    "FormSchemaError",
]
