"""Form field state for formbinder.

FormState owns a form's field values, an immutable snapshot of the values it
was created with, its error store and its lifecycle flags. Fields are kept in
their own mapping, separate from bookkeeping attributes, and are exposed both
as attributes and as items:

    >>> form = FormState({"email": "", "remember": False})
    >>> form.email = "ada@example.com"
    >>> form["remember"] = True
    >>> form.data()
    {'email': 'ada@example.com', 'remember': True}
    >>> form.reset()
    >>> form.data()
    {'email': '', 'remember': False}

Fields whose name clashes with a method (``keys``, ``data``...) are only
reachable through item access.
"""

import logging
from copy import deepcopy
from typing import Any, Dict, Iterator, List, Mapping, Optional

from formbinder.config import DEFAULT_CONFIG, FormConfig
from formbinder.errors import ErrorStore, UnknownFieldError
from formbinder.types import SubmissionState

logger = logging.getLogger(__name__)


class FormState:
    """Field values, original snapshot, errors and lifecycle flags of a form.

    Attributes:
        busy: True exactly while a submission is in flight
        successful: True after the most recent submission settled cleanly
        errors: Server-reported errors keyed by field name
        config: Configuration shared with the submission coordinator
    """

    def __init__(
        self,
        data: Optional[Mapping[str, Any]] = None,
        config: Optional[FormConfig] = None,
    ):
        """Initialize the form.

        Args:
            data: Initial field values; reserved bookkeeping names are skipped
            config: Form configuration (defaults to DEFAULT_CONFIG)
        """
        config = config or DEFAULT_CONFIG
        object.__setattr__(self, "_config", config)
        object.__setattr__(self, "_fields", {})

        initial: Dict[str, Any] = {}
        for key, value in (data or {}).items():
            if key in config.reserved_fields:
                logger.warning("Ignoring reserved name %r in form data", key)
                continue
            initial[key] = value

        object.__setattr__(self, "_snapshot", deepcopy(initial))

        self.busy = False
        self.successful = False
        self.errors = ErrorStore()
        self._fields.update(initial)

    @property
    def config(self) -> FormConfig:
        return self._config

    @property
    def original_data(self) -> Dict[str, Any]:
        """Deep copy of the values the form was created with."""
        return deepcopy(self._snapshot)

    @property
    def state(self) -> SubmissionState:
        """Lifecycle state derived from the busy/successful flags."""
        if self.busy:
            return SubmissionState.PROCESSING
        if self.successful:
            return SubmissionState.SUCCEEDED
        return SubmissionState.IDLE

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal attribute lookup fails
        fields = self.__dict__.get("_fields")
        if fields is not None and name in fields:
            return fields[name]
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        fields = self.__dict__.get("_fields")
        if fields is not None and name in fields:
            fields[name] = value
        elif name.startswith("_") or name in self._config.reserved_fields:
            object.__setattr__(self, name, value)
        else:
            raise UnknownFieldError(name)

    def __getitem__(self, key: str) -> Any:
        return self._fields[key]

    def __setitem__(self, key: str, value: Any) -> None:
        if key not in self._fields:
            raise UnknownFieldError(key)
        self._fields[key] = value

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self._fields!r}, busy={self.busy}, "
            f"successful={self.successful})"
        )

    def keys(self) -> List[str]:
        """Get the field names, in the order they were declared."""
        return list(self._fields)

    def data(self) -> Dict[str, Any]:
        """Get a new dict of the current field values."""
        return {key: self._fields[key] for key in self.keys()}

    def fill(self, values: Mapping[str, Any]) -> None:
        """Overwrite every field from ``values``.

        Fields absent from ``values`` become None; keys of ``values`` that
        are not fields of this form are ignored.
        """
        for key in self.keys():
            self._fields[key] = values.get(key)

    def reset(self) -> None:
        """Restore every field to a deep copy of its original value."""
        for key in self.keys():
            self._fields[key] = deepcopy(self._snapshot.get(key))

    def clear(self) -> None:
        """Clear all errors and the successful flag."""
        self.errors.clear()
        self.successful = False

    def clear_error(self, field: Optional[str]) -> None:
        """Clear a single field's errors, e.g. when the user edits that field."""
        if field:
            self.errors.clear(field)

    def start_processing(self) -> None:
        """Enter the processing state: clear errors, set busy."""
        self.errors.clear()
        self.busy = True
        self.successful = False

    def finish_processing(self) -> None:
        """Leave the processing state after a successful submission."""
        self.busy = False
        self.successful = True

    def fail_processing(self) -> None:
        """Leave the processing state after a failed submission."""
        self.busy = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return {
            "fields": self.data(),
            "originalData": self.original_data,
            "busy": self.busy,
            "successful": self.successful,
            "errors": self.errors.to_dict(),
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        config: Optional[FormConfig] = None,
    ) -> "FormState":
        """Create a FormState from dict.

        The original values become the snapshot; current values, flags and
        errors are restored on top.
        """
        form = cls(data.get("originalData", data.get("fields", {})), config=config)
        form.fill(data.get("fields", form.original_data))
        form.busy = data.get("busy", False)
        form.successful = data.get("successful", False)
        form.errors.set(data.get("errors", {}))
        return form


__all__ = [
    "FormState",
]
