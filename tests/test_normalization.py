"""Unit tests for error payload normalization.

Tests cover:
- Classification of payloads into the four variants
- Priority order (errors > message > generic)
- Degradation of unusable payloads to the default message
- Decoding of response objects
"""

import httpx
import pytest

from formbinder.config import DEFAULT_ERROR_MESSAGE
from formbinder.normalization import (
    FieldErrorsPayload,
    GenericPayload,
    MessagePayload,
    UnusablePayload,
    classify_payload,
    extract_errors,
    response_payload,
    to_error_map,
)
from formbinder.transport import TransportResponse


class TestClassifyPayload:
    """Test payload classification."""

    def test_none_is_unusable(self):
        assert classify_payload(None) == UnusablePayload(raw=None)

    def test_text_is_unusable(self):
        assert isinstance(classify_payload("Bad Gateway"), UnusablePayload)

    def test_number_is_unusable(self):
        assert isinstance(classify_payload(500), UnusablePayload)

    def test_errors_entry(self):
        payload = classify_payload({"errors": {"a": "x"}})
        assert payload == FieldErrorsPayload(errors={"a": "x"})

    def test_message_entry(self):
        assert classify_payload({"message": "bad"}) == MessagePayload(message="bad")

    def test_generic_mapping(self):
        payload = classify_payload({"a": "1", "b": "2"})
        assert isinstance(payload, GenericPayload)

    def test_list_is_generic(self):
        assert isinstance(classify_payload(["x", "y"]), GenericPayload)

    def test_empty_message_falls_through(self):
        """Should treat an empty message as absent."""
        payload = classify_payload({"message": "", "a": "x"})
        assert isinstance(payload, GenericPayload)

    def test_null_errors_falls_through_to_message(self):
        """Should treat errors=None as absent."""
        payload = classify_payload({"errors": None, "message": "bad"})
        assert payload == MessagePayload(message="bad")

    def test_empty_errors_mapping_is_present(self):
        """Should treat an empty errors object as present."""
        payload = classify_payload({"errors": {}, "message": "bad"})
        assert payload == FieldErrorsPayload(errors={})


class TestExtractErrors:
    """Test conversion of payloads into error maps."""

    def test_errors_wins_over_message(self):
        """Should prefer the errors entry when message is also present."""
        assert extract_errors({"errors": {"a": "x"}, "message": "bad"}) == {"a": "x"}

    def test_message_becomes_generic_error(self):
        assert extract_errors({"message": "bad"}) == {"error": "bad"}

    def test_unusable_payload_uses_default_message(self):
        assert extract_errors("oops") == {"error": DEFAULT_ERROR_MESSAGE}
        assert extract_errors(None) == {"error": DEFAULT_ERROR_MESSAGE}

    def test_custom_default_message(self):
        assert extract_errors(None, "Try later") == {"error": "Try later"}

    def test_generic_payload_copied(self):
        payload = {"a": "1", "b": "2"}
        result = extract_errors(payload)
        assert result == {"a": "1", "b": "2"}
        assert result is not payload

    def test_errors_entry_is_shallow_copied(self):
        inner = {"email": ["Invalid"]}
        result = extract_errors({"errors": inner})
        assert result == inner
        assert result is not inner
        assert result["email"] is inner["email"]

    def test_list_errors_are_index_keyed(self):
        assert extract_errors({"errors": ["x", "y"]}) == {"0": "x", "1": "y"}

    def test_scalar_errors_become_generic_error(self):
        assert extract_errors({"errors": "Nope"}) == {"error": "Nope"}

    def test_unknown_variant_rejected(self):
        with pytest.raises(TypeError):
            to_error_map({"a": "x"})  # type: ignore[arg-type]


class TestResponsePayload:
    """Test payload extraction from response objects."""

    def test_transport_response_data(self):
        response = TransportResponse(status_code=422, data={"errors": {"a": "x"}})
        assert response_payload(response) == {"errors": {"a": "x"}}

    def test_object_without_data(self):
        assert response_payload(object()) is None

    def test_httpx_response_json(self):
        response = httpx.Response(422, json={"message": "bad"})
        assert response_payload(response) == {"message": "bad"}

    def test_httpx_response_text(self):
        response = httpx.Response(502, text="Bad Gateway")
        assert response_payload(response) == "Bad Gateway"

    def test_httpx_response_empty(self):
        assert response_payload(httpx.Response(500)) is None

    def test_mapping_response_data(self):
        """Should read the "data" key of a dict-shaped response."""
        assert response_payload({"data": {"message": "bad"}}) == {"message": "bad"}
