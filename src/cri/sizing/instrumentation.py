from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from collections import defaultdict
from typing import Any


class LogMode(str, Enum):
    LIVE = "live"
    DEBUG = "debug"
    TRACE = "trace"


class Cat(str, Enum):
    STARTUP = "STARTUP"
    SETUP = "SETUP"
    REG = "REG"
    STACK = "STACK"
    SIZES = "SIZES"
    DUMP = "DUMP"


@dataclass(frozen=True)
class InstrumentPolicy:
    mode: LogMode = LogMode.LIVE

    # If True, include ctx keys in all emitted lines.
    include_ctx: bool = True

    # Diagnostic records kept in memory (oldest dropped first).
    history_limit: int = 200


@dataclass
class Counters:
    _c: dict[str, int] = field(default_factory=lambda: defaultdict(int))

    def inc(self, key: str, n: int = 1) -> None:
        self._c[key] += n

    def get(self, key: str) -> int:
        return self._c.get(key, 0)

    def snapshot(self) -> dict[str, int]:
        return dict(self._c)


def parse_log_mode(value: str | None, default: LogMode = LogMode.LIVE) -> LogMode:
    if value and value.lower() in ("live", "debug", "trace"):
        return LogMode(value.lower())
    return default


def format_ctx(**ctx: Any) -> str:
    # Stable ordering makes grep life easier
    order = ["event", "sec", "requested", "top", "depth"]
    parts = []
    for k in order:
        v = ctx.get(k)
        if v is None:
            continue
        parts.append(f"{k}={v}")
    # include any extras in alpha order
    extras = sorted((k, v) for k, v in ctx.items() if k not in order and v is not None)
    parts.extend([f"{k}={v}" for k, v in extras])
    return " ".join(parts)
