"""Normalization of server error payloads into an error map.

A failed submission may carry a response payload of several shapes. The
payload is first classified into one of four variants, then each variant is
converted into the ``{field: message(s)}`` map installed into the form's
ErrorStore. Classification order (first match wins):

1. UnusablePayload: missing, or not a structured object (mapping or list)
2. FieldErrorsPayload: has a present ``errors`` entry
3. MessagePayload: has a present ``message`` entry
4. GenericPayload: anything else; every top-level key is a field

Usage:
    >>> extract_errors({"errors": {"email": ["Invalid"]}, "message": "Bad"})
    {'email': ['Invalid']}
    >>> extract_errors({"message": "Bad"})
    {'error': 'Bad'}
    >>> extract_errors("<html>502</html>")
    {'error': 'Something went wrong. Please try again.'}
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Union

import httpx

from formbinder.config import DEFAULT_ERROR_MESSAGE, GENERIC_ERROR_KEY
from formbinder.transport import decode_body


@dataclass(frozen=True)
class FieldErrorsPayload:
    """Payload carrying an explicit ``errors`` entry."""
    errors: Any


@dataclass(frozen=True)
class MessagePayload:
    """Payload carrying only a top-level ``message``."""
    message: Any


@dataclass(frozen=True)
class GenericPayload:
    """Structured payload whose top-level keys are field names."""
    fields: Union[Mapping[str, Any], List[Any]]


@dataclass(frozen=True)
class UnusablePayload:
    """Missing or unstructured payload (None, text, numbers...)."""
    raw: Any = None


ErrorPayload = Union[FieldErrorsPayload, MessagePayload, GenericPayload, UnusablePayload]


def _is_present(value: Any) -> bool:
    """Presence test for payload entries.

    None, False, empty strings and zero are absent; containers are present
    even when empty.
    """
    if value is None or value is False:
        return False
    if isinstance(value, (str, int, float)) and not value:
        return False
    return True


def _shallow_copy(value: Union[Mapping[str, Any], List[Any]]) -> Dict[str, Any]:
    if isinstance(value, Mapping):
        return dict(value)
    return {str(index): item for index, item in enumerate(value)}


def classify_payload(data: Any) -> ErrorPayload:
    """Classify a response payload into one of the four payload variants.

    Args:
        data: The decoded response body (any type)

    Returns:
        The matching payload variant
    """
    if not isinstance(data, (Mapping, list, tuple)):
        return UnusablePayload(raw=data)

    if isinstance(data, Mapping):
        if _is_present(data.get("errors")):
            return FieldErrorsPayload(errors=data["errors"])
        if _is_present(data.get("message")):
            return MessagePayload(message=data["message"])
        return GenericPayload(fields=data)

    return GenericPayload(fields=list(data))


def to_error_map(
    payload: ErrorPayload,
    default_message: str = DEFAULT_ERROR_MESSAGE,
) -> Dict[str, Any]:
    """Convert a classified payload into an error map.

    Raises:
        TypeError: If ``payload`` is not one of the payload variants
    """
    if isinstance(payload, UnusablePayload):
        return {GENERIC_ERROR_KEY: default_message}

    if isinstance(payload, FieldErrorsPayload):
        if isinstance(payload.errors, (Mapping, list, tuple)):
            return _shallow_copy(payload.errors)
        # Scalar "errors" is kept whole as one generic error, not spread per character
        return {GENERIC_ERROR_KEY: payload.errors}

    if isinstance(payload, MessagePayload):
        return {GENERIC_ERROR_KEY: payload.message}

    if isinstance(payload, GenericPayload):
        return _shallow_copy(payload.fields)

    raise TypeError(f"Unsupported error payload: {payload!r}")


def extract_errors(data: Any, default_message: str = DEFAULT_ERROR_MESSAGE) -> Dict[str, Any]:
    """Classify a response payload and convert it into an error map."""
    return to_error_map(classify_payload(data), default_message)


def response_payload(response: Any) -> Any:
    """Get the decoded payload of a failure's response object.

    Understands objects exposing a ``data`` attribute (TransportResponse and
    compatible transports), plain mappings with a ``"data"`` key, and raw
    ``httpx.Response`` objects, whose JSON body is decoded (falling back to
    text).
    """
    if isinstance(response, httpx.Response):
        return decode_body(response)
    if isinstance(response, Mapping):
        return response.get("data")
    return getattr(response, "data", None)


__all__ = [
    "FieldErrorsPayload",
    "MessagePayload",
    "GenericPayload",
    "UnusablePayload",
    "ErrorPayload",
    "classify_payload",
    "to_error_map",
    "extract_errors",
    "response_payload",
]
