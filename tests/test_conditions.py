"""Unit tests for cross-field condition evaluation.

Tests cover:
- Text, numeric and select predicates
- Zero-valued predicates being treated as not set
- OR semantics and short-circuiting across a validator list
- Regex predicates hitting on a successful match
- Out-of-range validator indices
- Status resolution order (last triggering condition wins)
"""

import pytest

from formproxy.conditions import STATUS_RULES, evaluate, matches, resolve_status
from formproxy.form import (
    Condition,
    Field,
    NumericField,
    Option,
    SelectField,
    TextField,
    Validator,
)
from formproxy.types import FieldStatus


def text(value):
    return Field(kind=TextField(value=value))


def numeric(value):
    return Field(kind=NumericField(value=value))


def select(index, options=((1, "red"), (2, "green"), (5, "blue"))):
    return Field(kind=SelectField(index=index, options=[Option(i, v) for i, v in options]))


class TestTextPredicates:
    """Test validators referencing a text field."""

    def test_text_is_equal(self):
        """Should match when the value equals the compared string."""
        assert matches(text("yes"), Validator(text_is_equal="yes")) is True
        assert matches(text("no"), Validator(text_is_equal="yes")) is False

    def test_length_smaller_than(self):
        """Should match when the length is strictly smaller."""
        assert matches(text("ab"), Validator(length_smaller_than=3)) is True
        assert matches(text("abc"), Validator(length_smaller_than=3)) is False

    def test_length_greater_than(self):
        """Should match when the length is strictly greater."""
        assert matches(text("abcd"), Validator(length_greater_than=3)) is True
        assert matches(text("abc"), Validator(length_greater_than=3)) is False

    def test_length_counts_characters(self):
        """Should count characters, not encoded bytes."""
        assert matches(text("äöü"), Validator(length_greater_than=3)) is False

    def test_empty_string_predicate_is_not_set(self):
        """An empty text_is_equal never matches, even against an empty value."""
        assert matches(text(""), Validator(text_is_equal="")) is False

    def test_zero_length_predicate_is_not_set(self):
        """A zero length predicate never matches."""
        assert matches(text(""), Validator(length_greater_than=0)) is False
        assert matches(text(""), Validator(length_smaller_than=0)) is False

    def test_any_set_predicate_matches(self):
        """Should match if any one of several predicates matches."""
        validator = Validator(text_is_equal="x", length_greater_than=2)
        assert matches(text("abc"), validator) is True


class TestRegexPredicates:
    """Test regex predicates: a successful match is a hit."""

    def test_text_regex_match_is_a_hit(self):
        """Should match when the pattern is found in the text value."""
        assert matches(text("abc123"), Validator(match_regex_pattern=r"\d+")) is True

    def test_text_regex_no_match(self):
        """Should not match when the pattern is not found."""
        assert matches(text("abc"), Validator(match_regex_pattern=r"^\d+$")) is False

    def test_invalid_pattern_is_never_a_hit(self):
        """An invalid pattern should not match and should not raise."""
        assert matches(text("abc"), Validator(match_regex_pattern="[")) is False

    def test_numeric_regex_uses_integer_rendering(self):
        """Should match the pattern against the integer part of the value."""
        assert matches(numeric(42.7), Validator(match_regex_pattern="^42$")) is True
        assert matches(numeric(7), Validator(match_regex_pattern="^42$")) is False

    def test_select_regex_uses_option_display_value(self):
        """Should match the pattern against the selected option's value."""
        assert matches(select(2), Validator(match_regex_pattern="^gr")) is True
        assert matches(select(1), Validator(match_regex_pattern="^gr")) is False

    def test_select_regex_without_selection_sees_empty_string(self):
        """A selection matching no option is compared as an empty string."""
        assert matches(select(9), Validator(match_regex_pattern="^$")) is True
        assert matches(select(9), Validator(match_regex_pattern="red")) is False


class TestNumericPredicates:
    """Test validators referencing a numeric field."""

    def test_number_is_equal(self):
        assert matches(numeric(3), Validator(number_is_equal=3)) is True
        assert matches(numeric(4), Validator(number_is_equal=3)) is False

    def test_number_smaller_than(self):
        assert matches(numeric(2), Validator(number_smaller_than=3)) is True
        assert matches(numeric(3), Validator(number_smaller_than=3)) is False

    def test_number_greater_than(self):
        assert matches(numeric(4), Validator(number_greater_than=3)) is True
        assert matches(numeric(3), Validator(number_greater_than=3)) is False

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_value_never_matches_regex(self, value):
        """Non-finite values have no integer rendering to match against."""
        assert matches(numeric(value), Validator(match_regex_pattern=".*")) is False

    def test_non_finite_value_still_compares(self):
        assert matches(numeric(float("inf")), Validator(number_greater_than=3)) is True
        assert matches(numeric(float("nan")), Validator(number_smaller_than=3)) is False

    def test_zero_predicates_are_not_set(self):
        """Comparisons against zero cannot be expressed."""
        assert matches(numeric(0), Validator(number_is_equal=0)) is False
        assert matches(numeric(-5), Validator(number_smaller_than=0)) is False
        assert matches(numeric(5), Validator(number_greater_than=0)) is False


class TestSelectPredicates:
    """Test validators referencing a select field."""

    def test_text_is_equal_matches_any_existing_selection(self):
        """The compared string is ignored; an existing selection is enough."""
        assert matches(select(1), Validator(text_is_equal="something else")) is True

    def test_text_is_equal_without_existing_selection(self):
        """Should not match when the selected key has no option."""
        assert matches(select(3), Validator(text_is_equal="red")) is False

    def test_options_are_looked_up_by_key(self):
        """Key 5 exists although only three options are declared."""
        assert matches(select(5), Validator(text_is_equal="x")) is True

    def test_number_predicates_compare_selected_key(self):
        assert matches(select(2), Validator(number_is_equal=2)) is True
        assert matches(select(1), Validator(number_smaller_than=2)) is True
        assert matches(select(5), Validator(number_greater_than=2)) is True
        assert matches(select(2), Validator(number_greater_than=2)) is False


class TestEvaluate:
    """Test evaluation of a validator list against submitted fields."""

    def test_empty_list_is_never_satisfied(self):
        assert evaluate([text("abc")], []) is False

    def test_any_validator_satisfies(self):
        """Validators are OR-ed."""
        fields = [text("abc"), numeric(7)]
        validators = [
            Validator(index=0, text_is_equal="nope"),
            Validator(index=1, number_greater_than=5),
        ]
        assert evaluate(fields, validators) is True

    def test_short_circuits_on_first_match(self):
        """Validators after the first match are not evaluated."""
        fields = [text("abc")]
        validators = [Validator(index=0, text_is_equal="abc"), Validator(index=4, text_is_equal="x")]
        assert evaluate(fields, validators) is True

    def test_out_of_range_index_raises(self):
        with pytest.raises(IndexError):
            evaluate([text("abc")], [Validator(index=1, text_is_equal="abc")])

    def test_negative_index_raises(self):
        """Negative indices do not wrap around."""
        with pytest.raises(IndexError):
            evaluate([text("abc")], [Validator(index=-1, text_is_equal="abc")])

    def test_field_without_payload_never_matches(self):
        assert evaluate([Field()], [Validator(index=0, text_is_equal="abc")]) is False


class TestResolveStatus:
    """Test status resolution across the four condition blocks."""

    def always(self):
        return Condition(validators=[Validator(index=0, text_is_equal="on")])

    def never(self):
        return Condition(validators=[Validator(index=0, text_is_equal="off")])

    def test_rule_order(self):
        """Rules are evaluated active, required, disabled, hidden."""
        assert [status for _, status in STATUS_RULES] == [
            FieldStatus.ACTIVE,
            FieldStatus.REQUIRED,
            FieldStatus.DISABLED,
            FieldStatus.HIDDEN,
        ]

    def test_declared_status_kept_without_conditions(self):
        field = Field(kind=TextField(), status=FieldStatus.REQUIRED)
        assert resolve_status(field, [text("on")]) == FieldStatus.REQUIRED

    def test_declared_status_kept_when_no_condition_triggers(self):
        field = Field(kind=TextField(), status=FieldStatus.ACTIVE, hidden_if=self.never())
        assert resolve_status(field, [text("on")]) == FieldStatus.ACTIVE

    def test_single_condition_sets_status(self):
        field = Field(kind=TextField(), required_if=self.always())
        assert resolve_status(field, [text("on")]) == FieldStatus.REQUIRED

    def test_last_triggering_condition_wins(self):
        field = Field(
            kind=TextField(),
            active_if=self.always(),
            required_if=self.always(),
            disabled_if=self.always(),
        )
        assert resolve_status(field, [text("on")]) == FieldStatus.DISABLED

    def test_hidden_overrides_everything(self):
        field = Field(
            kind=TextField(),
            active_if=self.always(),
            required_if=self.always(),
            disabled_if=self.always(),
            hidden_if=self.always(),
        )
        assert resolve_status(field, [text("on")]) == FieldStatus.HIDDEN

    def test_non_triggering_later_condition_does_not_reset(self):
        field = Field(kind=TextField(), required_if=self.always(), hidden_if=self.never())
        assert resolve_status(field, [text("on")]) == FieldStatus.REQUIRED

    def test_condition_without_validators_never_triggers(self):
        field = Field(kind=TextField(), status=FieldStatus.ACTIVE, hidden_if=Condition())
        assert resolve_status(field, [text("on")]) == FieldStatus.ACTIVE
