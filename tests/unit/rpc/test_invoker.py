"""Unit tests for rpcdispatch.rpc.invoker."""

import pytest

from rpcdispatch.core.errors import AccessForbiddenError
from rpcdispatch.rpc.binder import BoundArguments
from rpcdispatch.rpc.invoker import Invoker
from rpcdispatch.rpc.registry import ProcedureRegistry
from rpcdispatch.rpc.types import Credentials


class Accounts:
    def __init__(self):
        self.checked = []

    def balance(self, account):
        return {"account": account, "balance": 10}

    def authorize(self, username, password, class_name, method_name):
        self.checked.append((username, password, class_name, method_name))
        if username != "admin":
            raise AccessForbiddenError(f"{username} may not call {method_name}")


@pytest.fixture
def registry():
    r = ProcedureRegistry()
    r.register("echo", lambda value: value)
    r.attach(Accounts())
    return r


class TestInvoke:
    """Tests for Invoker.invoke."""

    def test_callback_invoked_with_args(self, registry):
        invoker = Invoker()
        assert invoker.invoke(registry.resolve("echo"), BoundArguments(args=(7,))) == 7

    def test_kwargs_passed(self, registry):
        invoker = Invoker()
        result = invoker.invoke(registry.resolve("echo"), BoundArguments(kwargs={"value": 1}))
        assert result == 1

    def test_same_arguments_same_result(self, registry):
        invoker = Invoker()
        target = registry.resolve("echo")
        bound = BoundArguments(args=("x",))
        assert invoker.invoke(target, bound) == invoker.invoke(target, bound)

    def test_procedure_exceptions_propagate(self):
        def boom():
            raise RuntimeError("boom")

        r = ProcedureRegistry()
        r.register("boom", boom)
        with pytest.raises(RuntimeError, match="boom"):
            Invoker().invoke(r.resolve("boom"), BoundArguments())


class TestBeforeHook:
    """Tests for the pre-invocation hook."""

    def test_callable_hook_receives_credentials_and_target(self, registry):
        seen = []
        invoker = Invoker(lambda *args: seen.append(args))
        invoker.invoke(
            registry.resolve("balance"),
            BoundArguments(args=("A1",)),
            Credentials("admin", "secret"),
        )
        assert seen == [("admin", "secret", "Accounts", "balance")]

    def test_hook_not_run_for_callbacks(self, registry):
        seen = []
        invoker = Invoker(lambda *args: seen.append(args))
        invoker.invoke(registry.resolve("echo"), BoundArguments(args=(1,)))
        assert seen == []

    def test_hook_by_method_name_on_target(self, registry):
        invoker = Invoker("authorize")
        target = registry.resolve("balance")
        result = invoker.invoke(target, BoundArguments(args=("A1",)), Credentials("admin", "pw"))
        assert result["balance"] == 10
        assert target.instance.checked == [("admin", "pw", "Accounts", "balance")]

    def test_hook_failure_propagates_and_skips_call(self, registry):
        invoker = Invoker("authorize")
        with pytest.raises(AccessForbiddenError, match="guest"):
            invoker.invoke(
                registry.resolve("balance"),
                BoundArguments(args=("A1",)),
                Credentials("guest", "pw"),
            )

    def test_missing_credentials_passed_as_none(self, registry):
        seen = []
        invoker = Invoker(lambda *args: seen.append(args))
        invoker.invoke(registry.resolve("balance"), BoundArguments(args=("A1",)))
        assert seen == [(None, None, "Accounts", "balance")]

    def test_missing_hook_method_skipped(self, registry):
        invoker = Invoker("no_such_hook")
        result = invoker.invoke(registry.resolve("balance"), BoundArguments(args=("A1",)))
        assert result == {"account": "A1", "balance": 10}

    def test_hook_by_name_only_runs_where_defined(self):
        class Plain:
            def ping(self):
                return "pong"

        accounts = Accounts()
        r = ProcedureRegistry()
        r.attach(accounts)
        r.attach(Plain())
        invoker = Invoker("authorize")
        credentials = Credentials("admin", "pw")
        assert invoker.invoke(r.resolve("ping"), BoundArguments(), credentials) == "pong"
        invoker.invoke(r.resolve("balance"), BoundArguments(args=("A1",)), credentials)
        assert accounts.checked == [("admin", "pw", "Accounts", "balance")]
