from __future__ import annotations

import logging

from cri.sizing.diagnostics import DiagnosticsSink
from cri.sizing.instrumentation import Cat, InstrumentPolicy, LogMode, format_ctx, parse_log_mode


def test_signal_is_always_emitted(quiet_sink, caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="cri")

    quiet_sink.emit_signal(Cat.SETUP, "Section setup complete", sections=2)

    assert [r.getMessage() for r in caplog.records] == ["[SETUP] Section setup complete :: sections=2"]
    assert caplog.records[0].levelno == logging.INFO


def test_diag_record_renders_template_and_keeps_fields(sink) -> None:
    record = sink.emit_diag(Cat.STACK, "mismatched_end", "Section '{sec}' was ended, but {top} was the last section started.", sec="a", top="b")

    assert record is not None
    assert record.message == "Section 'a' was ended, but b was the last section started."
    assert record.as_payload() == {
        "cat": "STACK",
        "event": "mismatched_end",
        "message": "Section 'a' was ended, but b was the last section started.",
        "fields": {"sec": "a", "top": "b"},
    }


def test_braces_in_field_values_are_not_reformatted(sink) -> None:
    record = sink.emit_diag(Cat.REG, "duplicate_section", "Section '{sec}' was registered more than once.", sec="{odd}")

    assert record.message == "Section '{odd}' was registered more than once."


def test_history_is_bounded() -> None:
    sink = DiagnosticsSink(policy=InstrumentPolicy(mode=LogMode.DEBUG, history_limit=2))
    for i in range(3):
        sink.emit_diag(Cat.STACK, "unknown_section", "Section '{sec}' does not exist.", sec=str(i))

    assert sink.messages() == ["Section '1' does not exist.", "Section '2' does not exist."]


def test_set_debug_keeps_trace_mode() -> None:
    sink = DiagnosticsSink(policy=InstrumentPolicy(mode=LogMode.TRACE))

    sink.set_debug(True)
    assert sink.mode == LogMode.TRACE

    sink.set_debug(False)
    assert sink.mode == LogMode.LIVE
    assert not sink.debugging

    sink.set_debug(True)
    assert sink.mode == LogMode.DEBUG


def test_trace_only_in_trace_mode(sink, caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="cri")
    sink.emit_trace(Cat.STACK, "Section pushed", sec="a", depth=1)
    assert caplog.records == []

    sink.set_mode(LogMode.TRACE)
    sink.emit_trace(Cat.STACK, "Section pushed", sec="a", depth=1)
    assert [r.getMessage() for r in caplog.records] == ["[STACK] Section pushed :: sec=a depth=1"]


def test_format_ctx_orders_known_keys_first() -> None:
    assert format_ctx(zeta=1, sec="a", event="x", alpha=None, beta="b") == "event=x sec=a beta=b zeta=1"


def test_parse_log_mode_falls_back() -> None:
    assert parse_log_mode("TRACE") == LogMode.TRACE
    assert parse_log_mode("loud") == LogMode.LIVE
    assert parse_log_mode(None, LogMode.DEBUG) == LogMode.DEBUG
