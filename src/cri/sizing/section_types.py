# src/cri/sizing/section_types.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

from .errors import SectionDefinitionError


# ---------------------------------------------------------------------------
# Rejection messages (shared by literal coercion and registry validation)
# ---------------------------------------------------------------------------

MSG_NOT_A_MAPPING = "Section definition must be a mapping."
MSG_MISSING_ID = "Section definition must have an id."
MSG_MISSING_SIZES = "Section definition must have at least one size."
MSG_BAD_SIZE_RULE = "Section definition sizes must be mappings with a container_max_width."
MSG_UPPER_BOUND = (
    "Section definition must have one size that has screen_min_width but not screen_max_width."
)
MSG_NO_BOUND = "Section definition sizes must have a screen_min_width or a screen_max_width."

# Literal keys -> dataclass attribute. section_max_width is the older name
# for container_max_width; camelCase keys come from JSON written by JS tooling.
_RULE_KEY_ALIASES: dict[str, str] = {
    "screen_min_width": "screen_min_width",
    "screenMinWidth": "screen_min_width",
    "screen_max_width": "screen_max_width",
    "screenMaxWidth": "screen_max_width",
    "container_max_width": "container_max_width",
    "containerMaxWidth": "container_max_width",
    "section_max_width": "container_max_width",
}

# A requested image size: a registered size name or (width, height) in pixels
RequestedSize = Union[str, Sequence[int]]


@dataclass(frozen=True)
class SizeRule:
    """
    One breakpoint: the widest the image container gets while the viewport
    matches the min/max condition. None means the bound is absent.
    """
    container_max_width: str
    screen_min_width: Optional[str] = None
    screen_max_width: Optional[str] = None

    @property
    def is_upper_bound(self) -> bool:
        return self.screen_min_width is not None and self.screen_max_width is None

    def to_dict(self) -> dict[str, str]:
        out: dict[str, str] = {}
        if self.screen_min_width is not None:
            out["screen_min_width"] = self.screen_min_width
        if self.screen_max_width is not None:
            out["screen_max_width"] = self.screen_max_width
        out["container_max_width"] = self.container_max_width
        return out


@dataclass(frozen=True)
class SectionDefinition:
    """
    A named layout context and its breakpoint table.
    """
    id: str
    sizes: Tuple[SizeRule, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "sizes": [rule.to_dict() for rule in self.sizes]}


@dataclass(frozen=True)
class ActivationEntry:
    """
    One live begin/end region. `context` is caller data, forwarded untouched.
    """
    section_id: str
    context: Any = None


def _css_length(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def size_rule_from_dict(raw: Any) -> SizeRule:
    if not isinstance(raw, Mapping):
        raise SectionDefinitionError(MSG_BAD_SIZE_RULE)

    kwargs: dict[str, Optional[str]] = {}
    for key, value in raw.items():
        attr = _RULE_KEY_ALIASES.get(key)
        # first spelling wins when a literal carries both aliases
        if attr is None or attr in kwargs:
            continue
        kwargs[attr] = _css_length(value)

    # a missing container is reported by the registry, after the upper bound count
    container = kwargs.pop("container_max_width", None) or ""
    return SizeRule(container_max_width=container, **kwargs)


def section_from_dict(raw: Any) -> SectionDefinition:
    """
    Coerce a section literal ({"id": ..., "sizes": [...]}) into a SectionDefinition.

    Checks run in the same order as registry validation so the first failing
    rule produces the same message whichever form the caller used. Only the
    shape is checked here; the rules themselves are left to the registry.
    """
    if isinstance(raw, SectionDefinition):
        return raw
    if not isinstance(raw, Mapping):
        raise SectionDefinitionError(MSG_NOT_A_MAPPING)

    section_id = raw.get("id")
    if not isinstance(section_id, str) or not section_id:
        raise SectionDefinitionError(MSG_MISSING_ID)

    sizes = raw.get("sizes")
    if not isinstance(sizes, (list, tuple)) or len(sizes) == 0:
        raise SectionDefinitionError(MSG_MISSING_SIZES)

    return SectionDefinition(
        id=section_id,
        sizes=tuple(size_rule_from_dict(rule) for rule in sizes),
    )
