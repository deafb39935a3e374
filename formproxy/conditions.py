"""Cross-field conditions: resolving a field's runtime status.

A field may declare up to four conditions (activeIf, requiredIf, disabledIf,
hiddenIf). Each condition holds validators that compare another field's
submitted value. Conditions are evaluated in the fixed order of STATUS_RULES
and every condition that triggers overwrites the status, so the last
triggering condition decides it.

Validator predicates use the zero value to mean "not set": a predicate of 0
or "" is skipped, which makes comparisons against a literal zero or empty
string impossible to express.
"""

import logging
import math
import re
from typing import Callable, Optional, Sequence, Tuple

from formproxy.form import Condition, Field, NumericField, SelectField, TextField, Validator
from formproxy.types import FieldStatus

logger = logging.getLogger(__name__)


ConditionGetter = Callable[[Field], Optional[Condition]]

# Evaluation order; a later rule that triggers overrides an earlier one.
STATUS_RULES: Tuple[Tuple[ConditionGetter, FieldStatus], ...] = (
    (lambda f: f.active_if, FieldStatus.ACTIVE),
    (lambda f: f.required_if, FieldStatus.REQUIRED),
    (lambda f: f.disabled_if, FieldStatus.DISABLED),
    (lambda f: f.hidden_if, FieldStatus.HIDDEN),
)


def _search(pattern: str, value: str) -> bool:
    try:
        return re.search(pattern, value) is not None
    except re.error:
        logger.debug("Ignoring invalid condition pattern %r", pattern)
        return False


def _matches_text(text: TextField, validator: Validator) -> bool:
    length = len(text.value)
    if validator.text_is_equal and text.value == validator.text_is_equal:
        return True
    if validator.length_smaller_than and length < validator.length_smaller_than:
        return True
    if validator.length_greater_than and length > validator.length_greater_than:
        return True
    if validator.match_regex_pattern and _search(validator.match_regex_pattern, text.value):
        return True
    return False


def _matches_numeric(numeric: NumericField, validator: Validator) -> bool:
    value = numeric.value
    if validator.number_is_equal and value == validator.number_is_equal:
        return True
    if validator.number_smaller_than and value < validator.number_smaller_than:
        return True
    if validator.number_greater_than and value > validator.number_greater_than:
        return True
    if (
        validator.match_regex_pattern
        and math.isfinite(value)
        and _search(validator.match_regex_pattern, str(int(value)))
    ):
        return True
    return False


def _matches_select(select: SelectField, validator: Validator) -> bool:
    option = select.get_option()
    # The compared string itself is ignored: any existing selection matches.
    if validator.text_is_equal and option is not None:
        return True
    if validator.number_is_equal and select.index == validator.number_is_equal:
        return True
    if validator.number_smaller_than and select.index < validator.number_smaller_than:
        return True
    if validator.number_greater_than and select.index > validator.number_greater_than:
        return True
    if validator.match_regex_pattern:
        display = option.value if option is not None else ""
        if _search(validator.match_regex_pattern, display):
            return True
    return False


def matches(field: Field, validator: Validator) -> bool:
    """Check one validator against the submitted field it references.

    Args:
        field: The referenced submitted field
        validator: The comparison to apply

    Returns:
        True if any set predicate matches the field's value
    """
    kind = field.kind
    if isinstance(kind, TextField):
        return _matches_text(kind, validator)
    if isinstance(kind, NumericField):
        return _matches_numeric(kind, validator)
    if isinstance(kind, SelectField):
        return _matches_select(kind, validator)
    return False


def evaluate(submitted_fields: Sequence[Field], validators: Sequence[Validator]) -> bool:
    """Decide whether a list of validators is satisfied.

    Validators are OR-ed: the first one that matches short-circuits the
    rest. An empty list is never satisfied.

    Args:
        submitted_fields: The submitted form's fields, as received
        validators: Validators of one condition

    Returns:
        True if any validator matches

    Raises:
        IndexError: If a validator references a position outside the form

    Examples:
        >>> fields = [Field(kind=TextField(value="abcd"))]
        >>> evaluate(fields, [Validator(index=0, length_greater_than=3)])
        True
        >>> evaluate(fields, [])
        False
    """
    for validator in validators:
        if not 0 <= validator.index < len(submitted_fields):
            raise IndexError(
                f"Validator references field {validator.index}, "
                f"form has {len(submitted_fields)} fields"
            )
        if matches(submitted_fields[validator.index], validator):
            return True
    return False


def resolve_status(field: Field, submitted_fields: Sequence[Field]) -> FieldStatus:
    """Resolve a field's runtime status for one validation pass.

    Starts from the field's declared status and applies every triggering
    condition in STATUS_RULES order.

    Args:
        field: The schema field whose conditions are evaluated
        submitted_fields: The submitted form's fields, as received

    Returns:
        The resolved status
    """
    status = field.status
    for get_condition, target in STATUS_RULES:
        condition = get_condition(field)
        if condition is not None and evaluate(submitted_fields, condition.validators):
            status = target
    return status


__all__ = [
    "STATUS_RULES",
    "matches",
    "evaluate",
    "resolve_status",
]
