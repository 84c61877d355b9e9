# src/cri/sizing/sizes_generator.py

from __future__ import annotations

import re
from typing import List, Optional

from .errors import SizesParseError
from .section_types import SectionDefinition, SizeRule

# Host sizes strings end with the image's own width: "..., 300px"
_TRAILING_WIDTH_RE = re.compile(r",\s*(\d+)px\s*$")
_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def css_length_value(length: Optional[str]) -> int:
    """
    Leading integer of a CSS length ("1200px" -> 1200). Units are ignored;
    absent, empty or non-numeric lengths count as 0.
    """
    if not length:
        return 0
    m = _LEADING_INT_RE.match(length)
    return int(m.group(1)) if m else 0


def parse_image_width(sizes: str) -> int:
    """
    Pull the trailing pixel width out of the host's default sizes string.

    Raises SizesParseError when the string does not end in ", <digits>px".
    """
    m = _TRAILING_WIDTH_RE.search(sizes)
    if not m:
        raise SizesParseError(f"Could not parse image size '{sizes}'.")
    return int(m.group(1), 10)


def _rule_clause(rule: SizeRule) -> str:
    min_w = rule.screen_min_width
    max_w = rule.screen_max_width
    if min_w and max_w:
        return f"(min-width: {min_w}) and (max-width: {max_w}) {rule.container_max_width}"
    if min_w:
        return f"(min-width: {min_w}) {rule.container_max_width}"
    if max_w:
        return f"(max-width: {max_w}) {rule.container_max_width}"
    # no usable bound: the container width applies unconditionally
    return rule.container_max_width


def generate_sizes(image_width: int, section: SectionDefinition) -> str:
    """
    Build the `sizes` attribute for an image rendered inside `section`.

    Rules are ordered by their min-width (sorted() is stable, so ties keep
    definition order) and the image's own width closes the list as the
    unconditional fallback.
    """
    rules = sorted(section.sizes, key=lambda rule: css_length_value(rule.screen_min_width))
    clauses: List[str] = [_rule_clause(rule) for rule in rules]
    clauses.append(f"{image_width}px")
    return ", ".join(clauses)
