"""Shared pytest fixtures."""

from typing import Any

import pytest

from rpcdispatch.rpc.dispatcher import Dispatcher


@pytest.fixture
def calls() -> list[Any]:
    """Records messages received by the 'notify' procedure."""
    return []


@pytest.fixture
def dispatcher(calls: list[Any]) -> Dispatcher:
    """Dispatcher with 'sum' and 'notify' callbacks registered."""
    d = Dispatcher()

    def sum(a, b):
        return a + b

    def notify(message):
        calls.append(message)

    d.register("sum", sum)
    d.register("notify", notify)
    return d
