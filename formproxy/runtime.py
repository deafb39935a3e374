"""FormRuntime orchestrator for the formproxy engine.

This module provides the FormRuntime class that coordinates the registry,
the condition evaluator and the field validator to serve three operations:

- get_form: a fresh copy of a registered form schema
- validate_form: a schema annotated with the submission's values, each
  field's resolved status and error, and the overall validity
- send_form: validation followed, for valid forms only, by the form's send
  handler

Requests that match no registered schema are answered with an empty, invalid
form rather than an exception.

Usage:
    >>> from formproxy.form import Button, Field, Form, TextField
    >>> from formproxy.registry import FormRegistry
    >>> from formproxy.types import FieldStatus
    >>> def signup():
    ...     return Form(
    ...         name="signup",
    ...         fields=[Field(kind=TextField(min=3, max=10, regex="^[a-z]+$"),
    ...                       status=FieldStatus.REQUIRED)],
    ...         buttons=[Button(name="submit")],
    ...     )
    >>> registry = FormRegistry()
    >>> registry.add(signup, lambda ctx, form: {"ok": True})
    >>> runtime = FormRuntime(registry)
    >>> submission = runtime.get_form("signup")
    >>> submission.fields[0].text_field.value = "abcdef"
    >>> runtime.validate_form(submission).valid
    True
"""

import logging
from typing import Any, Dict, Optional, Tuple

from formproxy.conditions import resolve_status
from formproxy.events import EventEmitter, FormEvent
from formproxy.form import Form, SendFormResponse
from formproxy.registry import FormRegistry, RegistryEntry
from formproxy.types import ButtonStatus, EventType
from formproxy.validation import validate_field

logger = logging.getLogger(__name__)


class FormRuntime:
    """Validation and dispatch of submitted forms.

    Attributes:
        registry: Registered forms, looked up by name on every request
        emitter: Optional event emitter receiving one event per operation

    Examples:
        >>> runtime = FormRuntime(FormRegistry())
        >>> runtime.get_form("unknown").is_empty()
        True
        >>> runtime.validate_form(Form(name="unknown")).valid
        False
    """

    def __init__(self, registry: FormRegistry, emitter: Optional[EventEmitter] = None):
        """Initialize the FormRuntime.

        Args:
            registry: Registry holding schema suppliers and send handlers
            emitter: Optional event emitter for the audit stream
        """
        self.registry = registry
        self.emitter = emitter

    def get_form(self, name: str) -> Form:
        """Return a fresh schema for a registered form.

        Args:
            name: Registered form name

        Returns:
            A new Form from the schema supplier, or an empty Form if the name is unknown
        """
        entry = self.registry.get(name)
        if entry is None:
            logger.debug("No form registered as '%s'", name)
            return Form.empty()
        return entry.model()

    def validate_form(self, form: Optional[Form]) -> Form:
        """Validate a submitted form against its registered schema.

        Conditions always read the submission as received, never values
        written earlier in the same pass. The submitted form is not modified.

        Args:
            form: The submission

        Returns:
            The schema with values, statuses, errors and validity filled in;
            an empty, invalid form if the submission matches no schema
        """
        out, _ = self._validate(form)
        return out

    def send_form(self, form: Optional[Form], context: Any = None) -> Any:
        """Validate a form and, if it is valid, hand it to its send handler.

        Args:
            form: The submission
            context: Caller context passed through to the send handler

        Returns:
            SendFormResponse carrying the annotated form if validation fails,
            otherwise the send handler's result, unmodified

        Raises:
            Exception: Whatever the send handler raises, unmodified
        """
        out, entry = self._validate(form)
        if not out.valid or entry is None:
            return SendFormResponse(form=out)

        logger.info("Sending form '%s'", out.name)
        result = entry.send(context, out)
        self._emit(EventType.FORM_SENT, out.name)
        return result

    def _validate(self, form: Optional[Form]) -> Tuple[Form, Optional[RegistryEntry]]:
        if form is None:
            return self._reject("", "missing submission"), None

        entry = self.registry.get(form.name)
        if entry is None:
            return self._reject(form.name, "unknown form"), None

        out = entry.model()
        if len(out.fields) != len(form.fields):
            return self._reject(
                form.name,
                f"field count mismatch: expected {len(out.fields)}, got {len(form.fields)}",
            ), None
        for index, (schema_field, submitted_field) in enumerate(zip(out.fields, form.fields)):
            if submitted_field.kind is None or type(schema_field.kind) is not type(submitted_field.kind):
                return self._reject(form.name, f"field {index} kind mismatch"), None

        out.valid = True
        for index, (out_field, in_field) in enumerate(zip(out.fields, form.fields)):
            status = resolve_status(out_field, form.fields)
            logger.debug("Form '%s' field %d resolved to %s", out.name, index, status.value)
            out_field.status = status
            out_field.error = ""
            result = validate_field(out_field, in_field, status, form_valid=out.valid, index=index)
            if not result.ok:
                out.valid = False

        if out.valid:
            for button in out.buttons:
                button.status = ButtonStatus.ACTIVE
            logger.info("Form '%s' is valid", out.name)
            self._emit(EventType.VALIDATION_PASSED, out.name)
        else:
            errors = out.field_errors()
            logger.info("Form '%s' is invalid: %d field error(s)", out.name, len(errors))
            self._emit(EventType.VALIDATION_FAILED, out.name, {"errors": errors})
        return out, entry

    def _reject(self, name: str, reason: str) -> Form:
        logger.warning("Rejected form '%s': %s", name, reason)
        self._emit(EventType.FORM_REJECTED, name, {"reason": reason})
        return Form.empty()

    def _emit(self, event_type: EventType, form_name: str, payload: Optional[Dict[str, Any]] = None) -> None:
        if self.emitter is not None:
            self.emitter.emit(FormEvent.create(event_type, form_name, payload))


__all__ = [
    "FormRuntime",
]
