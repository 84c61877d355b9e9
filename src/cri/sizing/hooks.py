# src/cri/sizing/hooks.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, List, Mapping, Optional, Protocol, runtime_checkable

from .section_types import RequestedSize, SectionDefinition
from .. import config


# ---------------------------------------------------------------------------
# Collaborator interfaces
# ---------------------------------------------------------------------------

class SectionRegistrar(Protocol):
    def register_section(self, section_def: Any) -> bool: ...


@runtime_checkable
class SectionSource(Protocol):
    """
    Something that registers sections during setup (code, files, a CMS...).
    """
    def register_sections(self, registrar: SectionRegistrar) -> None: ...


class SizesPostProcessor(Protocol):
    """
    Last word on a generated sizes string. Receives the section and the
    context passed to begin_section so callers can special-case them.
    """
    def __call__(
        self,
        sizes: str,
        size: RequestedSize,
        image_src: Optional[str],
        image_meta: Optional[Mapping[str, Any]],
        attachment_id: int,
        section: SectionDefinition,
        additional_args: Any,
    ) -> str: ...


# Host-side sizes callback: (sizes, size, image_src, image_meta, attachment_id) -> sizes
SizesFilter = Callable[[str, RequestedSize, Optional[str], Optional[Mapping[str, Any]], int], str]


class SizesHost(Protocol):
    def add_sizes_filter(self, callback: SizesFilter, priority: int = ...) -> None: ...


# ---------------------------------------------------------------------------
# Default implementations
# ---------------------------------------------------------------------------

def identity_post_processor(
    sizes: str,
    size: RequestedSize,
    image_src: Optional[str],
    image_meta: Optional[Mapping[str, Any]],
    attachment_id: int,
    section: SectionDefinition,
    additional_args: Any,
) -> str:
    return sizes


class CallbackSectionSource:
    """
    Adapts a plain `fn(registrar)` into a SectionSource.
    """

    def __init__(self, fn: Callable[[SectionRegistrar], None]) -> None:
        self._fn = fn

    def register_sections(self, registrar: SectionRegistrar) -> None:
        self._fn(registrar)


@dataclass
class _FilterEntry:
    priority: int
    order: int
    callback: SizesFilter


@dataclass
class SizesFilterChain:
    """
    In-process SizesHost: runs every subscribed filter over the host's default
    sizes string, lowest priority first, subscription order within a priority.
    """
    _filters: List[_FilterEntry] = field(default_factory=list)

    def add_sizes_filter(self, callback: SizesFilter, priority: int = config.DEFAULT_FILTER_PRIORITY) -> None:
        self._filters.append(_FilterEntry(priority=priority, order=len(self._filters), callback=callback))

    def __len__(self) -> int:
        return len(self._filters)

    def calculate(
        self,
        sizes: str,
        size: RequestedSize,
        image_src: Optional[str] = None,
        image_meta: Optional[Mapping[str, Any]] = None,
        attachment_id: int = 0,
    ) -> str:
        for entry in sorted(self._filters, key=lambda e: (e.priority, e.order)):
            sizes = entry.callback(sizes, size, image_src, image_meta, attachment_id)
        return sizes
