# src/cri/sizing/diagnostics.py
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Any, Deque, List, Optional

from .instrumentation import Cat, Counters, InstrumentPolicy, LogMode, format_ctx
from .types import DiagEvent, DiagnosticPayload


@dataclass(frozen=True)
class DiagnosticRecord:
    """
    A structured diagnostic. `message` is rendered from the template and the
    fields when the record is created; `fields` keeps the raw values.
    """
    cat: Cat
    event: DiagEvent
    message: str
    fields: dict[str, Any] = field(default_factory=dict)

    def as_payload(self) -> DiagnosticPayload:
        return {
            "cat": self.cat.value,
            "event": self.event,
            "message": self.message,
            "fields": dict(self.fields),
        }


class DiagnosticsSink:
    """
    Conditional logging facade shared by the registry, the stack and the plugin.

    - emit_signal(): always emitted (startup/setup summaries).
    - emit_diag(): only when debugging (mode debug or trace); every record is
      also kept in `history`.
    - emit_trace(): only in trace mode (push/pop chatter).

    Counters are bumped by callers whatever the mode, so tests and dumps can
    see how often a misuse happened even with diagnostics off.
    """

    def __init__(self, logger: logging.Logger | None = None, policy: InstrumentPolicy | None = None):
        self.logger = logger or logging.getLogger("cri")
        self.policy = policy or InstrumentPolicy()
        self.counters = Counters()
        self.history: Deque[DiagnosticRecord] = deque(maxlen=max(1, self.policy.history_limit))

    # --- mode ---

    @property
    def mode(self) -> LogMode:
        return self.policy.mode

    @property
    def debugging(self) -> bool:
        return self.policy.mode != LogMode.LIVE

    def set_mode(self, mode: LogMode) -> None:
        self.policy = replace(self.policy, mode=mode)

    def set_debug(self, debug: bool) -> None:
        if not debug:
            self.set_mode(LogMode.LIVE)
        elif self.policy.mode == LogMode.LIVE:
            self.set_mode(LogMode.DEBUG)

    # --- emitters ---

    def _render(self, cat: Cat, msg: str, ctx: dict[str, Any]) -> str:
        prefix = f"[{cat.value}]"
        if self.policy.include_ctx:
            c = format_ctx(**ctx)
            if c:
                msg = f"{msg} :: {c}"
        return f"{prefix} {msg}"

    def _log(self, level: str | int, line: str) -> None:
        if isinstance(level, int):
            self.logger.log(level, line)
            return
        lvl = (level or "info").lower()
        if lvl in ("warn", "warning"):
            self.logger.warning(line)
        elif lvl in ("error", "err", "critical", "fatal"):
            self.logger.error(line)
        elif lvl in ("debug", "trace"):
            self.logger.debug(line)
        else:
            self.logger.info(line)

    def emit_signal(self, cat: Cat, msg: str, *, level: str | int = "info", **ctx: Any) -> None:
        # always allowed
        self._log(level, self._render(cat, msg, ctx))

    def emit_diag(
        self,
        cat: Cat,
        event: DiagEvent,
        template: str,
        *,
        level: str | int = "warning",
        **fields: Any,
    ) -> Optional[DiagnosticRecord]:
        if not self.debugging:
            return None

        record = DiagnosticRecord(
            cat=cat,
            event=event,
            message=template.format(**fields),
            fields=dict(fields),
        )
        self.history.append(record)
        self._log(level, self._render(cat, record.message, {"event": event, **fields}))
        return record

    def emit_trace(self, cat: Cat, msg: str, **ctx: Any) -> None:
        if self.policy.mode != LogMode.TRACE:
            return
        self.logger.debug(self._render(cat, msg, ctx))

    # --- inspection ---

    def messages(self, event: DiagEvent | None = None) -> List[str]:
        return [r.message for r in self.history if event is None or r.event == event]

    def clear_history(self) -> None:
        self.history.clear()
