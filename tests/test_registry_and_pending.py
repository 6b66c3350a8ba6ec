from __future__ import annotations

import asyncio

import pytest

from ipcall.exceptions import RemoteError
from ipcall.message import ErrorInfo
from ipcall.pending import Err, Ok, PendingCalls
from ipcall.receivers import ReceiverRegistry


def test_register_replaces_existing_handler() -> None:
    reg = ReceiverRegistry()
    first = lambda: 1
    second = lambda: 2
    reg.register("n", first)
    reg.register("n", second)
    assert reg.lookup("n") is second
    assert len(reg) == 1


def test_unregister_is_noop_when_absent() -> None:
    reg = ReceiverRegistry()
    reg.unregister("missing")
    reg.register("a", print)
    reg.unregister("a")
    assert reg.lookup("a") is None
    assert "a" not in reg


def test_register_rejects_non_callable() -> None:
    with pytest.raises(TypeError):
        ReceiverRegistry().register("a", 42)


def test_names_are_sorted() -> None:
    reg = ReceiverRegistry()
    for n in ("b", "a", "c"):
        reg.register(n, print)
    assert reg.names() == ["a", "b", "c"]


def test_create_allocates_distinct_ids() -> None:
    async def scenario() -> None:
        table = PendingCalls()
        ids = {table.create()[0] for _ in range(100)}
        assert len(ids) == 100
        assert len(table) == 100
        assert table.issued == 100

    asyncio.run(scenario())


def test_settle_ok_resolves_and_removes() -> None:
    async def scenario() -> None:
        table = PendingCalls()
        call_id, fut = table.create()
        assert table.settle(call_id, Ok(5))
        assert await fut == 5
        assert call_id not in table

    asyncio.run(scenario())


def test_settle_err_rejects_with_remote_error() -> None:
    async def scenario() -> None:
        table = PendingCalls()
        call_id, fut = table.create()
        table.settle(call_id, Err(ErrorInfo("nope", "KeyError")))
        with pytest.raises(RemoteError, match="nope") as info:
            await fut
        assert info.value.remote_type == "KeyError"

    asyncio.run(scenario())


def test_second_settlement_and_unknown_ids_are_dropped() -> None:
    async def scenario() -> None:
        table = PendingCalls()
        call_id, fut = table.create()
        assert table.settle(call_id, Ok(1))
        assert not table.settle(call_id, Ok(2))
        assert not table.settle("never-issued", Err(ErrorInfo("x")))
        assert await fut == 1

    asyncio.run(scenario())


def test_settle_after_caller_cancelled() -> None:
    async def scenario() -> None:
        table = PendingCalls()
        call_id, fut = table.create()
        fut.cancel()
        assert not table.settle(call_id, Ok(1))
        assert len(table) == 0

    asyncio.run(scenario())
