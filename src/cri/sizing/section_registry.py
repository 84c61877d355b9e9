from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from .diagnostics import DiagnosticsSink
from .errors import SectionDefinitionError
from .instrumentation import Cat
from .section_types import (
    MSG_BAD_SIZE_RULE,
    MSG_MISSING_ID,
    MSG_MISSING_SIZES,
    MSG_NO_BOUND,
    MSG_UPPER_BOUND,
    SectionDefinition,
    section_from_dict,
)
from .types import SectionDefDict


def validate_section_def(section_def: SectionDefinition) -> str | None:
    """
    Return the rejection message for the first rule the definition breaks,
    or None when it is valid.
    """
    if not isinstance(section_def.id, str) or len(section_def.id) == 0:
        return MSG_MISSING_ID

    if len(section_def.sizes) == 0:
        return MSG_MISSING_SIZES

    upper_bounds = sum(1 for rule in section_def.sizes if rule.is_upper_bound)
    if upper_bounds != 1:
        return MSG_UPPER_BOUND

    for rule in section_def.sizes:
        if not rule.container_max_width:
            return MSG_BAD_SIZE_RULE
        # generation ignores empty bounds, so one of them must carry a value
        if not rule.screen_min_width and not rule.screen_max_width:
            return MSG_NO_BOUND

    return None


class SectionRegistry:
    """
    Section definitions keyed by id, for the lifetime of the process.

    - Filled during setup; read-mostly afterwards.
    - Entries are added or overwritten, never removed.
    """

    def __init__(self, *, sink: DiagnosticsSink | None = None) -> None:
        # section_id -> SectionDefinition
        self._sections: Dict[str, SectionDefinition] = {}
        self._sink = sink or DiagnosticsSink()

    @property
    def sink(self) -> DiagnosticsSink:
        return self._sink

    def _emit_diag(self, event: Any, template: str, **fields: Any) -> None:
        self._sink.emit_diag(Cat.REG, event, template, **fields)

    def _inc_counter(self, key: str, n: int = 1) -> None:
        self._sink.counters.inc(key, n)

    def __len__(self) -> int:
        return len(self._sections)

    def __contains__(self, section_id: object) -> bool:
        return section_id in self._sections

    # --- sections ---

    def register_section(self, section_def: SectionDefinition | SectionDefDict | Any) -> bool:
        """
        Validate and store a section. Invalid definitions are reported through
        the diagnostics sink and dropped whole; nothing is raised.
        """
        try:
            definition = section_from_dict(section_def)
        except SectionDefinitionError as e:
            self._inc_counter("registry.rejected")
            self._emit_diag("invalid_definition", str(e))
            return False

        problem = validate_section_def(definition)
        if problem is not None:
            self._inc_counter("registry.rejected")
            self._emit_diag("invalid_definition", problem, sec=definition.id or None)
            return False

        if definition.id in self._sections:
            self._inc_counter("registry.duplicates")
            self._emit_diag(
                "duplicate_section",
                "Section '{sec}' was registered more than once.",
                sec=definition.id,
            )

        self._sections[definition.id] = definition
        self._inc_counter("registry.registered")
        return True

    def is_registered(self, section_id: str) -> bool:
        return section_id in self._sections

    def get(self, section_id: str) -> Optional[SectionDefinition]:
        return self._sections.get(section_id)

    def all_sections(self) -> Iterable[SectionDefinition]:
        return iter(self._sections.values())

    # --- debug helpers ---

    def snapshot(self) -> dict[str, dict[str, Any]]:
        """
        Return a plain dict of every registered section, suitable for JSON/YAML dumping.
        """
        return {
            section_id: definition.to_dict()
            for section_id, definition in self._sections.items()
        }
