"""Tests for the ambient capability: scoping, restoration and propagation.

Validates:
- Nested domain/data scoping and restoration
- Error and cancellation transparency
- Independence of concurrent branches (tasks, threads)
- Sessions and the default session
"""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from logscope import (
    CallbackSink,
    ContextThreadPool,
    LogLevel,
    MemorySink,
    alocal_domain,
    ambient,
    arun_log,
    configure_logging,
    data_scope,
    domain_scope,
    get_logger_env,
    local_data,
    local_domain,
    log_attention,
    log_info,
    log_info_,
    log_message,
    log_session,
    log_trace,
    run_log,
    to_thread,
)


# ═════════════════════════════════════════════════════════════════════════════
# Scoping
# ═════════════════════════════════════════════════════════════════════════════


def test_request_scenario(sink: MemorySink) -> None:
    """Data scoped around one message does not leak into the next."""
    def handler() -> None:
        local_data([("req", "42")], lambda: log_info_("start"))
        log_info_("end")

    run_log("main", sink, lambda: local_domain("svc", handler))

    start, end = sink.messages
    assert (start.qualified_domain, start.data, start.text) == ("svc", {"req": "42"}, "start")
    assert (end.qualified_domain, end.data, end.text) == ("svc", {}, "end")


def test_nested_domains_join_and_unwind(sink: MemorySink) -> None:
    names = ["d1", "d2", "d3", "d4"]

    def nest(remaining: list[str]) -> None:
        if not remaining:
            log_info_("inner")
            return
        local_domain(remaining[0], lambda: nest(remaining[1:]))

    def main() -> None:
        nest(names)
        log_info_("outer")

    run_log("main", sink, main)

    inner, outer = sink.messages
    assert inner.qualified_domain == "d1.d2.d3.d4"
    assert outer.qualified_domain == ""
    assert outer.domain == ()


def test_nested_data_merges_in_order(sink: MemorySink) -> None:
    def main() -> None:
        local_data({"a": 1, "k": "p1"}, lambda: local_data(
            {"b": 2, "k": "p2"}, lambda: log_info("inner", {"c": 3})))
        log_info("outer", {"c": 3})

    run_log("main", sink, main)

    inner, outer = sink.messages
    assert inner.data == {"a": 1, "k": "p2", "b": 2, "c": 3}
    assert outer.data == {"c": 3}


def test_call_site_data_wins_over_ambient(sink: MemorySink) -> None:
    run_log("main", sink, lambda: local_data({"k": "ambient"}, lambda: log_info("x", {"k": "call"})))
    assert sink.messages[0].data == {"k": "call"}


def test_get_logger_env_is_idempotent(sink: MemorySink) -> None:
    def main() -> None:
        first, second = get_logger_env(), get_logger_env()
        assert first == second
        assert (first.domain, first.data) == (("x",), (("a", 1),))

    run_log("main", sink, lambda: local_domain("x", lambda: local_data({"a": 1}, main)))


def test_local_returns_inner_result(sink: MemorySink) -> None:
    assert run_log("main", sink, lambda: local_domain("x", lambda: local_data({"a": 1}, lambda: 42))) == 42


def test_context_manager_scopes(sink: MemorySink) -> None:
    with log_session("main", sink):
        with domain_scope("http"), data_scope({"req": "1"}, user="bob"):
            log_info_("inside")
        log_info_("outside")

    inside, outside = sink.messages
    assert inside.qualified_domain == "http"
    assert inside.data == {"req": "1", "user": "bob"}
    assert outside.domain == ()
    assert outside.data == {}


def test_scope_instance_can_be_reentered(sink: MemorySink) -> None:
    scope = domain_scope("retry")
    with log_session("main", sink):
        with scope:
            with scope:
                log_info_("inner")
            log_info_("middle")
        log_info_("outer")

    assert [m.domain for m in sink.messages] == [("retry", "retry"), ("retry",), ()]


def test_emitted_data_is_not_shared_with_caller(sink: MemorySink) -> None:
    payload: dict[str, object] = {"a": 1}
    run_log("main", sink, lambda: log_message(LogLevel.INFO, "x", payload))
    payload["a"] = 999

    assert sink.messages[0].data == {"a": 1}


# ═════════════════════════════════════════════════════════════════════════════
# Error Transparency
# ═════════════════════════════════════════════════════════════════════════════


def test_error_propagates_unchanged_and_context_restored(sink: MemorySink) -> None:
    err = ValueError("boom")

    def fail() -> None:
        log_info_("before")
        raise err

    def main() -> None:
        with pytest.raises(ValueError) as info:
            local_data({"a": 1}, fail)
        assert info.value is err
        log_info_("after")

    run_log("main", sink, main)

    before, after = sink.messages
    assert before.data == {"a": 1}
    assert after.data == {}


def test_context_manager_restores_on_error(sink: MemorySink) -> None:
    with log_session("main", sink):
        with pytest.raises(KeyError):
            with domain_scope("job"):
                raise KeyError("missing")
        log_info_("after")

    assert sink.messages[0].domain == ()


def test_sink_failure_propagates() -> None:
    class SinkDown(Exception):
        pass

    def explode(_: object) -> None:
        raise SinkDown("unreachable")

    with pytest.raises(SinkDown):
        run_log("main", CallbackSink(explode), lambda: log_info_("x"))


@pytest.mark.asyncio
async def test_cancellation_restores_context(sink: MemorySink) -> None:
    started = asyncio.Event()

    async def body() -> None:
        log_info_("started")
        started.set()
        await asyncio.sleep(10)

    async def worker() -> None:
        try:
            await alocal_domain("job", body)
        except asyncio.CancelledError:
            log_info_("cancelled")
            raise

    async def main() -> None:
        task = asyncio.create_task(worker())
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    await arun_log("main", sink, main)

    started_msg, cancelled_msg = sink.messages
    assert started_msg.domain == ("job",)
    assert cancelled_msg.domain == ()


# ═════════════════════════════════════════════════════════════════════════════
# Concurrency
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_concurrent_branches_are_independent(sink: MemorySink) -> None:
    seen: list[tuple[str, tuple[str, ...]]] = []

    async def branch(name: str) -> None:
        async def body() -> None:
            for _ in range(5):
                await asyncio.sleep(0)
                seen.append((name, get_logger_env().domain))
                log_info_(name)

        await alocal_domain(name, body)

    await arun_log("main", sink, lambda: asyncio.gather(branch("a"), branch("b")))

    assert len(seen) == 10
    assert all(domain == (name,) for name, domain in seen)
    assert all(m.domain == (m.text,) for m in sink.messages)


@pytest.mark.asyncio
async def test_to_thread_carries_context(sink: MemorySink) -> None:
    def blocking() -> str:
        log_info_("in thread")
        return threading.current_thread().name

    async def main() -> str:
        return await ambient.alocal_domain("io", lambda: to_thread(blocking))

    thread_name = await arun_log("main", sink, main)

    assert thread_name != threading.current_thread().name
    assert sink.messages[0].domain == ("io",)


def test_thread_pool_carries_submitters_context(sink: MemorySink) -> None:
    def work(item: int) -> None:
        log_info("item", {"item": item})

    def main() -> None:
        with ContextThreadPool(2) as pool:
            local_domain("batch", lambda: local_data({"job": "j1"}, lambda: pool.map(work, [1, 2, 3])))

    run_log("main", sink, main)

    assert sorted(m.data["item"] for m in sink.messages) == [1, 2, 3]
    assert all(m.domain == ("batch",) and m.data["job"] == "j1" for m in sink.messages)


# ═════════════════════════════════════════════════════════════════════════════
# Sessions & Level Helpers
# ═════════════════════════════════════════════════════════════════════════════


def test_default_session_used_outside_run_log(sink: MemorySink) -> None:
    configure_logging(sink=sink, component="default")
    log_info_("hello")
    assert sink.messages[0].component == "default"


def test_log_session_can_close_sink(sink: MemorySink) -> None:
    with log_session("main", sink, close=True):
        log_info_("x")
    assert sink.closed


def test_level_helpers_set_level(sink: MemorySink) -> None:
    def main() -> None:
        log_trace("t", {})
        log_info("i", {})
        log_attention("a", {})
        ambient.log_trace_("t_")
        ambient.log_attention_("a_")

    run_log("main", sink, main)

    assert [m.level for m in sink.messages] == [
        LogLevel.TRACE, LogLevel.INFO, LogLevel.ATTENTION, LogLevel.TRACE, LogLevel.ATTENTION,
    ]
    assert all(m.data == {} for m in sink.messages)


def test_payloads_are_coerced_to_json(sink: MemorySink) -> None:
    class Point(BaseModel):
        x: int
        y: int

    @dataclass
    class Size:
        w: int
        h: int

    def main() -> None:
        log_info("model", Point(x=1, y=2))
        log_info("dataclass", Size(w=3, h=4))
        local_data({"a": 1}, lambda: log_info("scalar", 5))

    run_log("main", sink, main)

    model, dc, scalar = sink.messages
    assert model.data == {"x": 1, "y": 2}
    assert dc.data == {"w": 3, "h": 4}
    assert scalar.data == {"_data": 5, "a": 1}
