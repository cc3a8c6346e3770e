"""Unit tests for rpcdispatch.core.errors module."""

from rpcdispatch.core.errors import (
    AccessForbiddenError,
    ApplicationError,
    ArityError,
    AuthenticationFailedError,
    AuthError,
    ConfigError,
    EncodingFailure,
    InvalidParamsError,
    MissingNamedArgumentError,
    ProcedureNotFoundError,
    RpcDispatchError,
)
from rpcdispatch.rpc.codec import EncodingFailureReason


class TestRpcDispatchError:
    """Tests for the RpcDispatchError base class."""

    def test_accepts_message(self):
        err = RpcDispatchError("Something went wrong")
        assert err.message == "Something went wrong"
        assert str(err) == "Something went wrong"

    def test_is_exception(self):
        assert issubclass(RpcDispatchError, Exception)

    def test_config_error_caught_as_base(self):
        try:
            raise ConfigError("Config problem")
        except RpcDispatchError as e:
            assert e.message == "Config problem"


class TestBindingErrors:
    """Tests for resolution and binding errors."""

    def test_procedure_not_found_keeps_name(self):
        err = ProcedureNotFoundError("ghost")
        assert err.name == "ghost"
        assert "ghost" in err.message

    def test_invalid_params_family(self):
        assert issubclass(ArityError, InvalidParamsError)
        assert issubclass(MissingNamedArgumentError, InvalidParamsError)
        assert MissingNamedArgumentError("x").message == "missing argument 'x'"


class TestAuthSignals:
    """Tests for out-of-band auth signals."""

    def test_status_codes(self):
        assert AuthenticationFailedError.status == 401
        assert AccessForbiddenError.status == 403

    def test_default_messages(self):
        assert AuthenticationFailedError().message == "Authentication failed"
        assert AccessForbiddenError().message == "Access forbidden"

    def test_share_base(self):
        assert issubclass(AuthenticationFailedError, AuthError)
        assert issubclass(AccessForbiddenError, AuthError)


class TestApplicationError:
    """Tests for ApplicationError."""

    def test_default_code(self):
        err = ApplicationError("nope")
        assert err.code == -32000
        assert err.data is None

    def test_explicit_code_and_data(self):
        err = ApplicationError("nope", code=42, data=[1])
        assert err.code == 42
        assert err.data == [1]

    def test_subclass_code(self):
        class Conflict(ApplicationError):
            code = 409

        assert Conflict("taken").code == 409


class TestCodecErrors:
    """Tests for codec error messages."""

    def test_message_from_reason(self):
        err = EncodingFailure(EncodingFailureReason.DEPTH)
        assert err.message == "Maximum stack depth exceeded"

    def test_message_with_detail(self):
        err = EncodingFailure(EncodingFailureReason.SYNTAX, "line 1")
        assert err.message == "Syntax error, malformed JSON: line 1"
        assert err.reason is EncodingFailureReason.SYNTAX
