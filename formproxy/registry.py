"""Registry of named forms.

Each entry pairs a schema supplier (a zero-argument factory returning a fresh
Form) with the send handler invoked once that form validates. The registry is
an ordinary object owned by whoever builds the runtime; its lock is held only
for the duration of a single read or insert.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from formproxy.errors import FormSchemaError
from formproxy.form import Form

logger = logging.getLogger(__name__)


ModelFunc = Callable[[], Form]
"""Schema supplier. Must be side-effect free and return a new Form per call."""

SendFunc = Callable[[Any, Form], Any]
"""Send handler. Receives the caller's context and the validated form."""


@dataclass(frozen=True)
class RegistryEntry:
    """A registered form: its schema supplier and its send handler."""
    name: str
    model: ModelFunc
    send: SendFunc


def check_schema(form: Form) -> None:
    """Check that a schema only references fields it declares.

    Raises:
        FormSchemaError: If the schema has no name or a validator index is out of range
    """
    if not form.name:
        raise FormSchemaError("Form schema has no name")
    count = len(form.fields)
    for position, field in enumerate(form.fields):
        for condition in field.conditions():
            for validator in condition.validators:
                if not 0 <= validator.index < count:
                    raise FormSchemaError(
                        f"Form '{form.name}': field {position} has a validator "
                        f"referencing field {validator.index}, form has {count} fields",
                        form_name=form.name,
                    )


class FormRegistry:
    """Thread-safe map of form names to registry entries.

    Examples:
        >>> registry = FormRegistry()
        >>> registry.add(lambda: Form(name="signup"), lambda ctx, form: None)
        >>> "signup" in registry
        True
        >>> registry.get("missing") is None
        True
    """

    def __init__(self) -> None:
        self._entries: Dict[str, RegistryEntry] = {}
        self._lock = threading.Lock()

    def add(self, model: ModelFunc, send: SendFunc) -> None:
        """Register a form under the name its schema supplier returns.

        Registering a name twice replaces the earlier entry.

        Args:
            model: Schema supplier
            send: Send handler

        Raises:
            FormSchemaError: If the supplied schema is unusable
        """
        schema = model()
        check_schema(schema)
        entry = RegistryEntry(name=schema.name, model=model, send=send)
        with self._lock:
            replaced = schema.name in self._entries
            self._entries[schema.name] = entry
        if replaced:
            logger.warning("Form '%s' re-registered, previous entry replaced", schema.name)
        else:
            logger.info("Registered form '%s' (%d fields)", schema.name, len(schema.fields))

    def get(self, name: str) -> Optional[RegistryEntry]:
        """Look up a registered form by name."""
        with self._lock:
            return self._entries.get(name)

    def names(self) -> List[str]:
        """Registered form names, sorted."""
        with self._lock:
            return sorted(self._entries)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


__all__ = [
    "ModelFunc",
    "SendFunc",
    "RegistryEntry",
    "FormRegistry",
    "check_schema",
]
