"""JSON Schema describing serialized forms.

Form.from_dict checks incoming dictionaries against FORM_JSON_SCHEMA before it
builds any objects, so a malformed payload fails with every problem listed at
once instead of with the first KeyError.

Keys follow the protobuf JSON mapping of the form wire schema. As in that
mapping, every key is optional and a missing key means the zero value.
"""

from typing import Any, Dict, List

from jsonschema import Draft7Validator, ValidationError

from formproxy.errors import FormPayloadError
from formproxy.types import ButtonStatus, FieldStatus


_STRING = {"type": "string"}
_INTEGER = {"type": "integer"}
_NUMBER = {"type": "number"}

FORM_JSON_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Form",
    "type": "object",
    "definitions": {
        "option": {
            "type": "object",
            "properties": {"index": _INTEGER, "value": _STRING},
            "additionalProperties": False,
        },
        "validator": {
            "type": "object",
            "properties": {
                "index": {"type": "integer", "minimum": 0},
                "textIsEqual": _STRING,
                "lengthSmallerThan": _INTEGER,
                "lengthGreaterThan": _INTEGER,
                "numberIsEqual": _NUMBER,
                "numberSmallerThan": _NUMBER,
                "numberGreaterThan": _NUMBER,
                "matchRegexPattern": _STRING,
            },
            "additionalProperties": False,
        },
        "condition": {
            "type": "object",
            "properties": {
                "validators": {
                    "type": "array",
                    "items": {"$ref": "#/definitions/validator"},
                },
            },
            "additionalProperties": False,
        },
        "textField": {
            "type": "object",
            "properties": {
                "value": _STRING,
                "min": _INTEGER,
                "max": _INTEGER,
                "regex": _STRING,
                "minError": _STRING,
                "maxError": _STRING,
                "regexError": _STRING,
            },
            "additionalProperties": False,
        },
        "numericField": {
            "type": "object",
            "properties": {
                "value": _NUMBER,
                "min": _INTEGER,
                "max": _INTEGER,
                "minError": _STRING,
                "maxError": _STRING,
            },
            "additionalProperties": False,
        },
        "selectField": {
            "type": "object",
            "properties": {
                "index": _INTEGER,
                "options": {
                    "type": "array",
                    "items": {"$ref": "#/definitions/option"},
                },
                "error": _STRING,
            },
            "additionalProperties": False,
        },
        "field": {
            "type": "object",
            "properties": {
                "name": _STRING,
                "status": {"enum": [s.value for s in FieldStatus]},
                "error": _STRING,
                "textField": {"$ref": "#/definitions/textField"},
                "numericField": {"$ref": "#/definitions/numericField"},
                "selectField": {"$ref": "#/definitions/selectField"},
                "activeIf": {"$ref": "#/definitions/condition"},
                "requiredIf": {"$ref": "#/definitions/condition"},
                "disabledIf": {"$ref": "#/definitions/condition"},
                "hiddenIf": {"$ref": "#/definitions/condition"},
            },
            "additionalProperties": False,
            # Payload kinds are mutually exclusive
            "not": {
                "anyOf": [
                    {"required": ["textField", "numericField"]},
                    {"required": ["textField", "selectField"]},
                    {"required": ["numericField", "selectField"]},
                ]
            },
        },
        "button": {
            "type": "object",
            "properties": {
                "name": _STRING,
                "status": {"enum": [s.value for s in ButtonStatus]},
            },
            "additionalProperties": False,
        },
    },
    "properties": {
        "name": _STRING,
        "fields": {"type": "array", "items": {"$ref": "#/definitions/field"}},
        "buttons": {"type": "array", "items": {"$ref": "#/definitions/button"}},
        "valid": {"type": "boolean"},
    },
    "additionalProperties": False,
}

Draft7Validator.check_schema(FORM_JSON_SCHEMA)
_validator = Draft7Validator(FORM_JSON_SCHEMA)


def _describe(error: ValidationError) -> str:
    path = "/".join(str(p) for p in error.absolute_path)
    if error.validator == "not":
        return f"{path}: a field carries more than one payload kind"
    return f"{path or '<root>'}: {error.message}"


def check_form_payload(data: Any) -> None:
    """Check that a dictionary describes a form.

    Args:
        data: A decoded JSON document

    Raises:
        FormPayloadError: Listing every structural problem found

    Examples:
        >>> check_form_payload({"name": "signup", "fields": []})
        >>> check_form_payload({"name": 3})
        Traceback (most recent call last):
        ...
        formproxy.errors.FormPayloadError: Invalid form payload: name: 3 is not of type 'string'
    """
    problems: List[str] = [
        _describe(error)
        for error in sorted(_validator.iter_errors(data), key=lambda e: [str(p) for p in e.absolute_path])
    ]
    if problems:
        raise FormPayloadError(problems)


__all__ = [
    "FORM_JSON_SCHEMA",
    "check_form_payload",
]
