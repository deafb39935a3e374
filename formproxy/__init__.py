"""formproxy: validation engine for declarative, condition-driven forms.

A registered form schema declares its fields, the constraints on their values
and cross-field conditions that decide whether each field is active,
required, disabled or hidden. formproxy takes a caller's submission of that
form and returns the schema annotated with:
- each field's resolved status
- each field's error message, if a declared constraint is violated
- the overall validity, with submit buttons activated when the form is valid

Valid forms can then be handed to the send handler registered with the form.

Basic usage:
    >>> from formproxy import Field, Form, FormRegistry, FormRuntime, TextField
    >>> from formproxy.types import FieldStatus
    >>> registry = FormRegistry()
    >>> registry.add(
    ...     lambda: Form(name="signup", fields=[
    ...         Field(kind=TextField(min=3, max=10, min_error="Too short"),
    ...               status=FieldStatus.REQUIRED)]),
    ...     lambda ctx, form: {"sent": True},
    ... )
    >>> runtime = FormRuntime(registry)
    >>> submission = runtime.get_form("signup")
    >>> submission.fields[0].text_field.value = "ab"
    >>> result = runtime.validate_form(submission)
    >>> result.valid, result.fields[0].error
    (False, 'Too short')
"""

__version__ = "0.1.0"
__author__ = "formproxy developers"

# Version info
VERSION = (0, 1, 0)

# Core exports
from formproxy.form import (
    Button,
    Condition,
    Field,
    Form,
    NumericField,
    Option,
    SelectField,
    SendFormResponse,
    TextField,
    Validator,
)
from formproxy.registry import FormRegistry
from formproxy.runtime import FormRuntime

# Package metadata
__all__ = [
    "__version__",
    "VERSION",
    "Button",
    "Condition",
    "Field",
    "Form",
    "NumericField",
    "Option",
    "SelectField",
    "SendFormResponse",
    "TextField",
    "Validator",
    "FormRegistry",
    "FormRuntime",
]
