"""Form model shared by schemas and submissions.

The same shapes describe both a registered form schema (constraints,
conditions, options) and a caller's submission (the values). A submission is
aligned with its schema by position: field i of the submission is field i of
the schema, whatever the fields are named.

Two distinct lookup keys exist and must not be confused:
- Fields are identified by their position in Form.fields. Validator.index
  refers to that position.
- Options are identified by their declared Option.index, not by their
  position in SelectField.options. SelectField.index refers to that key.

Serialization uses camelCase keys following the protobuf JSON mapping of the
form wire schema; missing keys take the zero value.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from typing_extensions import TypeAlias

from formproxy.schema import check_form_payload
from formproxy.types import ButtonStatus, FieldStatus


@dataclass(frozen=True)
class Option:
    """One choice of a select field.

    Attributes:
        index: Logical key of the option, matched against SelectField.index
        value: Display value, also used by regex conditions
    """
    index: int = 0
    value: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {"index": self.index, "value": self.value}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Option":
        """Create Option from dict."""
        return cls(index=data.get("index", 0), value=data.get("value", ""))


@dataclass
class TextField:
    """Free text input with length bounds and a must-match pattern."""
    value: str = ""
    min: int = 0
    max: int = 0
    regex: str = ""
    min_error: str = ""
    max_error: str = ""
    regex_error: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "value": self.value,
            "min": self.min,
            "max": self.max,
            "regex": self.regex,
            "minError": self.min_error,
            "maxError": self.max_error,
            "regexError": self.regex_error,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TextField":
        """Create TextField from dict."""
        return cls(
            value=data.get("value", ""),
            min=data.get("min", 0),
            max=data.get("max", 0),
            regex=data.get("regex", ""),
            min_error=data.get("minError", ""),
            max_error=data.get("maxError", ""),
            regex_error=data.get("regexError", ""),
        )


@dataclass
class NumericField:
    """Numeric input with inclusive bounds.

    Bounds are compared against the integer part of the value.
    """
    value: float = 0
    min: int = 0
    max: int = 0
    min_error: str = ""
    max_error: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "value": self.value,
            "min": self.min,
            "max": self.max,
            "minError": self.min_error,
            "maxError": self.max_error,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NumericField":
        """Create NumericField from dict."""
        return cls(
            value=data.get("value", 0),
            min=data.get("min", 0),
            max=data.get("max", 0),
            min_error=data.get("minError", ""),
            max_error=data.get("maxError", ""),
        )


@dataclass
class SelectField:
    """Single choice among declared options.

    Attributes:
        index: Key of the selected option (0 means nothing selected)
        options: Declared options, in display order
        error: Message used when the selected key matches no option
    """
    index: int = 0
    options: List[Option] = field(default_factory=list)
    error: str = ""

    def get_option(self, index: Optional[int] = None) -> Optional[Option]:
        """Look up an option by its declared key.

        Args:
            index: Option key to find; defaults to the selected key

        Returns:
            The first option declaring that key, or None

        Examples:
            >>> select = SelectField(index=7, options=[Option(7, "seven")])
            >>> select.get_option().value
            'seven'
            >>> select.get_option(0) is None
            True
        """
        wanted = self.index if index is None else index
        for option in self.options:
            if option.index == wanted:
                return option
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "index": self.index,
            "options": [o.to_dict() for o in self.options],
            "error": self.error,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SelectField":
        """Create SelectField from dict."""
        return cls(
            index=data.get("index", 0),
            options=[Option.from_dict(o) for o in data.get("options", [])],
            error=data.get("error", ""),
        )


FieldKind: TypeAlias = Union[TextField, SelectField, NumericField]
"""Closed set of field payloads. A field carries exactly one of them."""

_KIND_KEYS: Tuple[Tuple[str, type], ...] = (
    ("textField", TextField),
    ("selectField", SelectField),
    ("numericField", NumericField),
)


@dataclass(frozen=True)
class Validator:
    """A comparison against another field's submitted value.

    A predicate left at its zero value ("" or 0) is not set and never
    matches. Several predicates may be set; any one of them matching makes
    the validator match.

    Attributes:
        index: Position of the referenced field in the same form
    """
    index: int = 0
    text_is_equal: str = ""
    length_smaller_than: int = 0
    length_greater_than: int = 0
    number_is_equal: float = 0
    number_smaller_than: float = 0
    number_greater_than: float = 0
    match_regex_pattern: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization, omitting unset predicates."""
        result: Dict[str, Any] = {"index": self.index}
        if self.text_is_equal:
            result["textIsEqual"] = self.text_is_equal
        if self.length_smaller_than:
            result["lengthSmallerThan"] = self.length_smaller_than
        if self.length_greater_than:
            result["lengthGreaterThan"] = self.length_greater_than
        if self.number_is_equal:
            result["numberIsEqual"] = self.number_is_equal
        if self.number_smaller_than:
            result["numberSmallerThan"] = self.number_smaller_than
        if self.number_greater_than:
            result["numberGreaterThan"] = self.number_greater_than
        if self.match_regex_pattern:
            result["matchRegexPattern"] = self.match_regex_pattern
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Validator":
        """Create Validator from dict."""
        return cls(
            index=data.get("index", 0),
            text_is_equal=data.get("textIsEqual", ""),
            length_smaller_than=data.get("lengthSmallerThan", 0),
            length_greater_than=data.get("lengthGreaterThan", 0),
            number_is_equal=data.get("numberIsEqual", 0),
            number_smaller_than=data.get("numberSmallerThan", 0),
            number_greater_than=data.get("numberGreaterThan", 0),
            match_regex_pattern=data.get("matchRegexPattern", ""),
        )


@dataclass(frozen=True)
class Condition:
    """A status rule: triggers when any of its validators matches."""
    validators: Tuple[Validator, ...] = ()

    def __post_init__(self):
        if not isinstance(self.validators, tuple):
            object.__setattr__(self, "validators", tuple(self.validators))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {"validators": [v.to_dict() for v in self.validators]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Condition":
        """Create Condition from dict."""
        return cls(validators=tuple(Validator.from_dict(v) for v in data.get("validators", [])))


_CONDITION_KEYS = (
    ("activeIf", "active_if"),
    ("requiredIf", "required_if"),
    ("disabledIf", "disabled_if"),
    ("hiddenIf", "hidden_if"),
)


@dataclass
class Field:
    """A single form field.

    Attributes:
        kind: The field payload (text, select or numeric), None if absent
        status: Declared status in a schema, resolved status after validation
        error: Validation error message, empty when the field is valid
        name: Display name; never used to align fields
        active_if: Sets status ACTIVE when it triggers
        required_if: Sets status REQUIRED when it triggers
        disabled_if: Sets status DISABLED when it triggers
        hidden_if: Sets status HIDDEN when it triggers
    """
    kind: Optional[FieldKind] = None
    status: FieldStatus = FieldStatus.UNSPECIFIED
    error: str = ""
    name: str = ""
    active_if: Optional[Condition] = None
    required_if: Optional[Condition] = None
    disabled_if: Optional[Condition] = None
    hidden_if: Optional[Condition] = None

    def __post_init__(self):
        if isinstance(self.status, str):
            self.status = FieldStatus(self.status)

    @property
    def text_field(self) -> Optional[TextField]:
        return self.kind if isinstance(self.kind, TextField) else None

    @property
    def numeric_field(self) -> Optional[NumericField]:
        return self.kind if isinstance(self.kind, NumericField) else None

    @property
    def select_field(self) -> Optional[SelectField]:
        return self.kind if isinstance(self.kind, SelectField) else None

    def conditions(self) -> List[Condition]:
        """All conditions declared on this field."""
        return [
            c
            for c in (self.active_if, self.required_if, self.disabled_if, self.hidden_if)
            if c is not None
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "status": self.status.value if isinstance(self.status, FieldStatus) else self.status,
        }
        if self.name:
            result["name"] = self.name
        if self.error:
            result["error"] = self.error
        for key, kind_type in _KIND_KEYS:
            if isinstance(self.kind, kind_type):
                result[key] = self.kind.to_dict()
        for key, attr in _CONDITION_KEYS:
            condition = getattr(self, attr)
            if condition is not None:
                result[key] = condition.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Field":
        """Create Field from dict."""
        kind: Optional[FieldKind] = None
        for key, kind_type in _KIND_KEYS:
            if key in data:
                kind = kind_type.from_dict(data[key])
        conditions = {
            attr: Condition.from_dict(data[key])
            for key, attr in _CONDITION_KEYS
            if key in data
        }
        return cls(
            kind=kind,
            status=FieldStatus(data.get("status", FieldStatus.UNSPECIFIED.value)),
            error=data.get("error", ""),
            name=data.get("name", ""),
            **conditions,
        )


@dataclass
class Button:
    """A submit control. Has no conditions of its own."""
    name: str = ""
    status: ButtonStatus = ButtonStatus.INACTIVE

    def __post_init__(self):
        if isinstance(self.status, str):
            self.status = ButtonStatus(self.status)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "name": self.name,
            "status": self.status.value if isinstance(self.status, ButtonStatus) else self.status,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Button":
        """Create Button from dict."""
        return cls(
            name=data.get("name", ""),
            status=ButtonStatus(data.get("status", ButtonStatus.INACTIVE.value)),
        )


@dataclass
class Form:
    """A named, ordered collection of fields and buttons.

    Attributes:
        name: Registry key of the form
        fields: Fields in declaration order
        buttons: Submit controls
        valid: Outcome of the last validation pass; never carried between requests

    Examples:
        >>> form = Form(name="signup", fields=[Field(kind=TextField(value="abc"))])
        >>> form.fields[0].text_field.value
        'abc'
        >>> Form.empty().valid
        False
    """
    name: str = ""
    fields: List[Field] = field(default_factory=list)
    buttons: List[Button] = field(default_factory=list)
    valid: bool = False

    @classmethod
    def empty(cls) -> "Form":
        """The empty, invalid form returned for requests that match no schema."""
        return cls()

    def is_empty(self) -> bool:
        return not self.name and not self.fields and not self.buttons

    def field_errors(self) -> Dict[int, str]:
        """Map of field position to error message, for fields in error."""
        return {i: f.error for i, f in enumerate(self.fields) if f.error}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "name": self.name,
            "fields": [f.to_dict() for f in self.fields],
            "buttons": [b.to_dict() for b in self.buttons],
            "valid": self.valid,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Form":
        """Create Form from dict.

        Raises:
            FormPayloadError: If the dict does not describe a form
        """
        check_form_payload(data)
        return cls(
            name=data.get("name", ""),
            fields=[Field.from_dict(f) for f in data.get("fields", [])],
            buttons=[Button.from_dict(b) for b in data.get("buttons", [])],
            valid=data.get("valid", False),
        )


@dataclass
class SendFormResponse:
    """Result of a send request.

    When validation fails the runtime returns the annotated form and no
    payload. Send handlers build their own responses; the runtime passes them
    through untouched.

    Attributes:
        form: The validated form
        payload: Handler-defined success data
    """
    form: Form
    payload: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.form.valid

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {"ok": self.ok, "form": self.form.to_dict()}
        if self.payload is not None:
            result["payload"] = self.payload
        return result


__all__ = [
    "Option",
    "TextField",
    "NumericField",
    "SelectField",
    "FieldKind",
    "Validator",
    "Condition",
    "Field",
    "Button",
    "Form",
    "SendFormResponse",
]
