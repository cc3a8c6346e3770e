"""Unit tests for rpcdispatch.rpc.protocol validation functions."""

import pytest

from rpcdispatch.core.errors import InvalidEnvelopeError, MalformedPayloadError
from rpcdispatch.rpc.protocol import (
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    is_batch,
    is_positional,
    make_error_response,
    make_success_response,
    parse_request,
    validate_envelope,
    validate_json_shape,
)


class TestValidateJsonShape:
    """Tests for validate_json_shape."""

    @pytest.mark.parametrize("payload", [{}, [], {"a": 1}, [1, 2]])
    def test_containers_pass(self, payload):
        """Objects and arrays are structured containers."""
        validate_json_shape(payload)

    @pytest.mark.parametrize("payload", [None, 1, 1.5, "text", True])
    def test_scalars_rejected(self, payload):
        """Scalars, strings and null are malformed payloads."""
        with pytest.raises(MalformedPayloadError):
            validate_json_shape(payload)


class TestValidateEnvelope:
    """Tests for validate_envelope."""

    def test_minimal_request_is_valid(self):
        validate_envelope({"jsonrpc": "2.0", "method": "ping"})

    def test_missing_jsonrpc(self):
        with pytest.raises(InvalidEnvelopeError, match="jsonrpc"):
            validate_envelope({"method": "ping", "id": 5})

    @pytest.mark.parametrize("version", ["1.0", 2.0, "2", None])
    def test_wrong_version(self, version):
        """jsonrpc must be exactly the string "2.0"."""
        with pytest.raises(InvalidEnvelopeError):
            validate_envelope({"jsonrpc": version, "method": "ping"})

    def test_missing_method(self):
        with pytest.raises(InvalidEnvelopeError, match="method"):
            validate_envelope({"jsonrpc": "2.0", "id": 1})

    def test_non_string_method(self):
        with pytest.raises(InvalidEnvelopeError, match="method must be a string"):
            validate_envelope({"jsonrpc": "2.0", "method": 42})

    @pytest.mark.parametrize("params", [1, "a", True, None])
    def test_scalar_params_rejected(self, params):
        with pytest.raises(InvalidEnvelopeError, match="params"):
            validate_envelope({"jsonrpc": "2.0", "method": "m", "params": params})

    def test_array_not_an_envelope(self):
        with pytest.raises(InvalidEnvelopeError):
            validate_envelope([{"jsonrpc": "2.0", "method": "m"}])

    def test_id_is_not_inspected(self):
        """Any id value passes envelope validation."""
        validate_envelope({"jsonrpc": "2.0", "method": "m", "id": {"nested": True}})


class TestIsBatch:
    """Tests for batch detection."""

    def test_list_is_batch(self):
        assert is_batch([{"jsonrpc": "2.0", "method": "m"}]) is True

    def test_object_is_not_batch(self):
        assert is_batch({"jsonrpc": "2.0", "method": "m"}) is False

    def test_empty_list_is_not_batch(self):
        assert is_batch([]) is False


class TestIsPositional:
    """Tests for calling convention detection."""

    def test_list_is_positional(self):
        assert is_positional([1, 2]) is True

    def test_empty_list_is_positional(self):
        assert is_positional([]) is True

    def test_string_keys_are_named(self):
        assert is_positional({"a": 1}) is False

    def test_contiguous_int_keys_are_positional(self):
        assert is_positional({0: "a", 1: "b"}) is True

    def test_gapped_int_keys_are_named(self):
        assert is_positional({0: "a", 2: "b"}) is False

    def test_numeric_string_keys_are_named(self):
        assert is_positional({"0": "a"}) is False


class TestParseRequest:
    """Tests for parse_request."""

    def test_absent_params_become_empty_list(self):
        request = parse_request({"jsonrpc": "2.0", "method": "m", "id": 1})
        assert request.params == []

    def test_empty_named_params_become_empty_list(self):
        request = parse_request({"jsonrpc": "2.0", "method": "m", "params": {}, "id": 1})
        assert request.params == []

    def test_notification_has_no_id_key(self):
        request = parse_request({"jsonrpc": "2.0", "method": "m"})
        assert request.is_notification is True

    def test_null_id_is_not_notification(self):
        request = parse_request({"jsonrpc": "2.0", "method": "m", "id": None})
        assert request.is_notification is False
        assert request.id is None


class TestResponseConstructors:
    """Tests for make_error_response and make_success_response."""

    def test_default_message_for_known_code(self):
        response = make_error_response(3, METHOD_NOT_FOUND)
        assert response.error == {"code": -32601, "message": "Method not found"}
        assert response.id == 3

    def test_data_included_when_given(self):
        response = make_error_response(3, INVALID_PARAMS, data="too many arguments")
        assert response.error["data"] == "too many arguments"

    def test_success_response(self):
        response = make_success_response("abc", [1, 2])
        assert response.result == [1, 2]
        assert response.error is None
        assert response.data() == {"result": [1, 2]}
