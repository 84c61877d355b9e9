from __future__ import annotations
from typing import TypedDict, NotRequired, Any, Literal

# --- Section definition literal format ---
class SizeRuleDict(TypedDict):
    screen_min_width: NotRequired[str]
    screen_max_width: NotRequired[str]
    container_max_width: str

class SectionDefDict(TypedDict):
    id: str
    sizes: list[SizeRuleDict]

# --- Diagnostics ---
DiagEvent = Literal[
    "invalid_definition",
    "duplicate_section",
    "unknown_section",
    "unstarted_end",
    "mismatched_end",
    "discarded_section",
]

class DiagnosticPayload(TypedDict):
    cat: str
    event: DiagEvent
    message: str
    fields: dict[str, Any]

# --- Snapshots ---
class RegistrySnapshot(TypedDict):
    sections: dict[str, dict[str, Any]]
    stack: list[str]
