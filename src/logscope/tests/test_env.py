"""Tests for LoggerEnv: derivation, data merging and message construction."""

from __future__ import annotations

from datetime import UTC, datetime

from logscope import DataPrecedence, LoggerEnv, LogLevel, MemorySink
from logscope.core import normalize_pairs

T0 = datetime(2024, 1, 3, 10, 30, 45, tzinfo=UTC)


def _env(**kw: object) -> LoggerEnv:
    return LoggerEnv(sink=MemorySink(), **kw)  # type: ignore[arg-type]


def test_with_data_appends_without_mutating_parent() -> None:
    parent = _env(data=(("a", 1),))
    child = parent.with_data({"b": 2})
    assert parent.data == (("a", 1),)
    assert child.data == (("a", 1), ("b", 2))


def test_with_domain_pushes_segment() -> None:
    parent = _env(domain=("svc",))
    child = parent.with_domain("db")
    assert parent.qualified_domain == "svc"
    assert child.domain == ("svc", "db")
    assert child.qualified_domain == "svc.db"


def test_duplicate_keys_kept_last_wins_on_merge() -> None:
    env = _env().with_data([("k", 1)]).with_data([("k", 2)])
    assert env.data == (("k", 1), ("k", 2))
    assert env.merged_data({}) == {"k": 2}


def test_message_data_wins_by_default() -> None:
    env = _env().with_data({"k": "ambient", "other": 1})
    assert env.merged_data({"k": "call"}) == {"k": "call", "other": 1}


def test_ambient_precedence_is_configurable() -> None:
    env = _env(precedence=DataPrecedence.AMBIENT).with_data({"k": "ambient"})
    assert env.merged_data({"k": "call", "x": 1}) == {"k": "ambient", "x": 1}


def test_non_object_payload_without_ambient_data_is_unchanged() -> None:
    assert _env().merged_data([1, 2]) == [1, 2]
    assert _env().merged_data("text") == "text"


def test_non_object_payload_is_wrapped_when_ambient_data_exists() -> None:
    env = _env().with_data({"a": 1})
    assert env.merged_data([1, 2]) == {"_data": [1, 2], "a": 1}


def test_make_message_uses_env_context() -> None:
    env = _env(component="main").with_domain("a").with_domain("b").with_data({"a": 1})
    msg = env.make_message(T0, LogLevel.INFO, "hello", {"b": 2})
    assert msg.component == "main"
    assert msg.qualified_domain == "a.b"
    assert msg.time == T0
    assert msg.level is LogLevel.INFO
    assert msg.text == "hello"
    assert msg.data == {"a": 1, "b": 2}


def test_emit_reaches_sink() -> None:
    sink = MemorySink()
    LoggerEnv(sink=sink).emit(T0, LogLevel.TRACE, "x", {})
    assert sink.texts == ["x"]


def test_normalize_pairs_coerces_values() -> None:
    pairs = normalize_pairs({"when": T0, "n": 1})
    assert pairs[1] == ("n", 1)
    assert isinstance(pairs[0][1], str) and pairs[0][1].startswith("2024-01-03T10:30:45")
    assert normalize_pairs([("a", (1, 2))]) == (("a", [1, 2]),)


def test_envs_with_same_context_are_equal() -> None:
    sink = MemorySink()
    assert LoggerEnv(sink=sink).with_domain("a") == LoggerEnv(sink=sink).with_domain("a")
