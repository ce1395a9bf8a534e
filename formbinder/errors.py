"""Field error storage and exception types for formbinder.

``ErrorStore`` holds the validation errors a server reported for a form,
keyed by field name. A field's entry is either a single message or a list of
messages, depending on the shape of the server payload; the accessors below
treat both uniformly.

The exception hierarchy is rooted at ``FormBinderError``. Transport failures
are defined next to the transport in ``formbinder.transport``.
"""

from typing import Any, Dict, List, Mapping, Optional


class FormBinderError(Exception):
    """Base class for all formbinder errors."""


class UnknownFieldError(FormBinderError, AttributeError):
    """Raised when assigning a field that was not declared at construction.

    Attributes:
        field: The undeclared field name
    """

    def __init__(self, field: str):
        self.field = field
        super().__init__(
            f"Unknown form field '{field}'. Fields must be declared when the form is created."
        )


class SubmissionInProgressError(FormBinderError):
    """Raised by a REJECT-policy coordinator when submit is called while busy."""

    def __init__(self, message: str = "A submission is already in progress"):
        super().__init__(message)


def _as_list(messages: Any) -> List[Any]:
    if isinstance(messages, (list, tuple)):
        return list(messages)
    return [messages]


class ErrorStore:
    """Container for field-scoped error messages.

    Examples:
        >>> errors = ErrorStore()
        >>> errors.any()
        False
        >>> errors.set({"email": ["Invalid email", "Already taken"], "name": "Required"})
        >>> errors.get("email")
        'Invalid email'
        >>> errors.get("name")
        'Required'
        >>> errors.clear("email")
        >>> errors.has("email")
        False
    """

    def __init__(self, errors: Optional[Mapping[str, Any]] = None):
        self._errors: Dict[str, Any] = dict(errors or {})

    def has(self, field: str) -> bool:
        """Check whether a field has at least one error."""
        if field not in self._errors:
            return False
        return len(_as_list(self._errors[field])) > 0

    def get(self, field: str) -> Optional[Any]:
        """Get the first message for a field, or None if it has none."""
        if not self.has(field):
            return None
        return _as_list(self._errors[field])[0]

    def get_all(self, field: str) -> List[Any]:
        """Get every message for a field (empty list if none)."""
        if field not in self._errors:
            return []
        return _as_list(self._errors[field])

    def all(self) -> Dict[str, Any]:
        """Get a shallow copy of the whole error map."""
        return dict(self._errors)

    def any(self) -> bool:
        """Check whether any field has an error."""
        return any(self.has(field) for field in self._errors)

    def flatten(self) -> List[Any]:
        """Get every message of every field, in field order."""
        messages: List[Any] = []
        for field in self._errors:
            messages.extend(self.get_all(field))
        return messages

    def set(self, errors: Mapping[str, Any]) -> None:
        """Replace the whole error map (no merge)."""
        self._errors = dict(errors)

    def clear(self, field: Optional[str] = None) -> None:
        """Clear one field's errors, or every error when no field is given."""
        if field is None:
            self._errors = {}
            return
        self._errors.pop(field, None)

    def __contains__(self, field: object) -> bool:
        return isinstance(field, str) and self.has(field)

    def __len__(self) -> int:
        return len(self._errors)

    def __repr__(self) -> str:
        return f"ErrorStore({self._errors!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        return self.all()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ErrorStore":
        """Create ErrorStore from dict."""
        return cls(data)


__all__ = [
    "FormBinderError",
    "UnknownFieldError",
    "SubmissionInProgressError",
    "ErrorStore",
]
