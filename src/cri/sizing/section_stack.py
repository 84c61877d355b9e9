from __future__ import annotations

from typing import Any, List, Optional, Tuple

from .diagnostics import DiagnosticsSink
from .instrumentation import Cat
from .section_registry import SectionRegistry
from .section_types import ActivationEntry


class SectionStack:
    """
    The sections currently being rendered, innermost last.

    begin()/end() are expected to nest like the template regions they bracket.
    When they don't, end() repairs the stack instead of raising: unknown or
    unstarted ids are ignored, and an out-of-order end discards everything
    opened after the section being ended.
    """

    def __init__(self, registry: SectionRegistry, *, sink: DiagnosticsSink | None = None) -> None:
        self._registry = registry
        self._sink = sink or registry.sink
        self._entries: List[ActivationEntry] = []

    def _emit_diag(self, event: Any, template: str, **fields: Any) -> None:
        self._sink.emit_diag(Cat.STACK, event, template, **fields)

    def _inc_counter(self, key: str, n: int = 1) -> None:
        self._sink.counters.inc(key, n)

    def __len__(self) -> int:
        return len(self._entries)

    def is_empty(self) -> bool:
        return len(self._entries) == 0

    def top(self) -> Optional[ActivationEntry]:
        return self._entries[-1] if self._entries else None

    def section_ids(self) -> Tuple[str, ...]:
        """Bottom-to-top ids of the open sections."""
        return tuple(entry.section_id for entry in self._entries)

    def _is_top(self, section_id: str) -> bool:
        top = self.top()
        return top is not None and top.section_id == section_id

    def _pop(self) -> ActivationEntry:
        entry = self._entries.pop()
        self._sink.emit_trace(Cat.STACK, "Section popped", sec=entry.section_id, depth=len(self._entries))
        return entry

    # --- begin / end ---

    def begin(self, section_id: str, context: Any = None) -> bool:
        if not self._registry.is_registered(section_id):
            self._inc_counter("stack.unknown_section")
            self._emit_diag("unknown_section", "Section '{sec}' does not exist.", sec=section_id)
            return False

        self._entries.append(ActivationEntry(section_id=section_id, context=context))
        self._sink.emit_trace(Cat.STACK, "Section pushed", sec=section_id, depth=len(self._entries))
        return True

    def end(self, section_id: str) -> bool:
        """
        Close `section_id`. Returns True when the stack changed.
        """
        if self.is_empty():
            self._inc_counter("stack.unstarted_end")
            self._emit_diag("unstarted_end", "Section '{sec}' was ended without being started.", sec=section_id)
            return False

        # begin() never pushes unknown ids, so this only guards misspelled ends
        if not self._registry.is_registered(section_id):
            self._inc_counter("stack.unknown_section")
            self._emit_diag("unknown_section", "Section '{sec}' does not exist.", sec=section_id)
            return False

        if self._is_top(section_id):
            self._pop()
            return True

        top = self.top()
        self._inc_counter("stack.mismatched_end")
        self._emit_diag(
            "mismatched_end",
            "Section '{sec}' was ended, but {top} was the last section started.",
            sec=section_id,
            top=top.section_id if top else None,
        )

        if section_id not in self.section_ids():
            self._inc_counter("stack.unstarted_end")
            self._emit_diag("unstarted_end", "Section '{sec}' was ended without being started.", sec=section_id)
            return False

        self._pop()
        self._inc_counter("stack.discarded")
        while not self.is_empty() and not self._is_top(section_id):
            stale = self.top()
            self._emit_diag(
                "discarded_section",
                "Ending {top} section to find {sec}",
                sec=section_id,
                top=stale.section_id if stale else None,
            )
            self._pop()
            self._inc_counter("stack.discarded")

        # the loop stops on the target itself; close it too
        if self._is_top(section_id):
            self._pop()
        return True
