"""Pytest configuration.

Adds src/ to sys.path so the tests run without installing the package, and
provides a debugging plugin wired to a fresh sink for every test.
"""

from __future__ import annotations

import logging
import os
import sys

import pytest


SRC = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from cri.sizing.diagnostics import DiagnosticsSink  # noqa: E402
from cri.sizing.instrumentation import InstrumentPolicy, LogMode  # noqa: E402
from cri.sizing.plugin import ResponsiveImagesPlugin  # noqa: E402
from cri.sizing.section_registry import SectionRegistry  # noqa: E402
from cri.sizing.section_stack import SectionStack  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_cri_logger():
    # cri.main.setup_logging() detaches the logger from root; undo it so caplog sees records
    yield
    logger = logging.getLogger("cri")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def sink() -> DiagnosticsSink:
    return DiagnosticsSink(policy=InstrumentPolicy(mode=LogMode.DEBUG))


@pytest.fixture
def quiet_sink() -> DiagnosticsSink:
    return DiagnosticsSink(policy=InstrumentPolicy(mode=LogMode.LIVE))


@pytest.fixture
def hero_def() -> dict:
    return {
        "id": "hero",
        "sizes": [
            {"screen_min_width": "1200px", "container_max_width": "800px"},
            {"screen_max_width": "600px", "container_max_width": "400px"},
        ],
    }


@pytest.fixture
def registry(sink, hero_def) -> SectionRegistry:
    reg = SectionRegistry(sink=sink)
    reg.register_section(hero_def)
    for section_id in ("a", "b", "c"):
        reg.register_section(
            {"id": section_id, "sizes": [{"screen_min_width": "0px", "container_max_width": "100vw"}]}
        )
    sink.clear_history()
    return reg


@pytest.fixture
def stack(registry, sink) -> SectionStack:
    return SectionStack(registry, sink=sink)


@pytest.fixture
def plugin(sink) -> ResponsiveImagesPlugin:
    return ResponsiveImagesPlugin(sink=sink)
