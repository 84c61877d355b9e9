# src/cri/sizing/plugin.py

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional, Union

from .diagnostics import DiagnosticsSink
from .hooks import (
    CallbackSectionSource,
    SectionSource,
    SizesHost,
    SizesPostProcessor,
    identity_post_processor,
)
from .instrumentation import Cat, InstrumentPolicy, parse_log_mode
from .section_registry import SectionRegistry
from .section_stack import SectionStack
from .section_types import RequestedSize, SectionDefinition
from .sizes_generator import generate_sizes, parse_image_width
from .. import config


def default_sink() -> DiagnosticsSink:
    return DiagnosticsSink(
        policy=InstrumentPolicy(
            mode=parse_log_mode(config.LOG_MODE),
            include_ctx=config.INCLUDE_LOG_CTX,
            history_limit=config.DIAG_HISTORY_LIMIT,
        )
    )


class ResponsiveImagesPlugin:
    """
    Ties the registry, the section stack and the sizes generator together.

    Typical lifecycle:
      1. setup(sources, host): every source registers its sections; the sizes
         filter is subscribed on the host only if at least one section exists.
      2. While rendering, templates bracket regions with begin_section()/
         end_section() (or the section() context manager).
      3. The host calls filter_sizes() for each image, which hands it to the
         current render's compute_sizes_for_image(); images outside any
         section keep the host's sizes untouched.

    One stack per render. for_render() returns a facade with a fresh stack that
    shares this instance's registry; the host filter subscribed by setup()
    routes each image to the render that most recently opened a section and
    still has one open.
    """

    def __init__(
        self,
        *,
        registry: SectionRegistry | None = None,
        stack: SectionStack | None = None,
        sink: DiagnosticsSink | None = None,
        post_processor: SizesPostProcessor | None = None,
    ) -> None:
        if sink is None:
            sink = registry.sink if registry is not None else default_sink()
        self.sink = sink
        self.registry = registry if registry is not None else SectionRegistry(sink=sink)
        self.stack = stack if stack is not None else SectionStack(self.registry, sink=sink)
        self.post_processor: SizesPostProcessor = post_processor or identity_post_processor

        self._setup_done = False
        self.sizes_filter_active = False
        # facades with open sections, most recently begun last; shared by for_render() children
        self._open_renders: list[ResponsiveImagesPlugin] = []

    # --- public entry points ---

    def register_section(self, section_def: Any) -> bool:
        return self.registry.register_section(section_def)

    def begin_section(self, section_id: str, context: Any = None) -> bool:
        started = self.stack.begin(section_id, context)
        if started:
            self._mark_open()
        return started

    def end_section(self, section_id: str) -> bool:
        ended = self.stack.end(section_id)
        if self.stack.is_empty():
            self._mark_closed()
        return ended

    def set_debug(self, debug: bool) -> None:
        """Enable/disable diagnostic messages."""
        self.sink.set_debug(debug)

    @contextmanager
    def section(self, section_id: str, context: Any = None) -> Iterator["ResponsiveImagesPlugin"]:
        """
        with plugin.section("single-content"):
            render_content()
        """
        started = self.begin_section(section_id, context)
        try:
            yield self
        finally:
            if started:
                self.end_section(section_id)

    # --- setup ---

    def setup(
        self,
        sources: Iterable[Union[SectionSource, Callable[[Any], None]]] = (),
        host: SizesHost | None = None,
    ) -> bool:
        """
        Collect sections from every source, then subscribe to the host's sizes
        filter if any were registered. Decided once: later calls return the
        first outcome without re-running sources.
        """
        if self._setup_done:
            return self.sizes_filter_active
        self._setup_done = True

        for source in sources:
            if not isinstance(source, SectionSource):
                source = CallbackSectionSource(source)
            source.register_sections(self)

        count = len(self.registry)
        if count > 0 and host is not None:
            host.add_sizes_filter(self.filter_sizes)
            self.sizes_filter_active = True

        self.sink.emit_signal(
            Cat.SETUP,
            "Section setup complete",
            sections=count,
            sizes_filter=self.sizes_filter_active,
        )
        return self.sizes_filter_active

    def for_render(self) -> "ResponsiveImagesPlugin":
        child = ResponsiveImagesPlugin(
            registry=self.registry,
            sink=self.sink,
            post_processor=self.post_processor,
        )
        child._setup_done = True
        child.sizes_filter_active = self.sizes_filter_active
        child._open_renders = self._open_renders
        return child

    def _mark_open(self) -> None:
        if self in self._open_renders:
            self._open_renders.remove(self)
        self._open_renders.append(self)

    def _mark_closed(self) -> None:
        if self in self._open_renders:
            self._open_renders.remove(self)

    def current_render(self) -> "ResponsiveImagesPlugin":
        return self._open_renders[-1] if self._open_renders else self

    # --- sizes ---

    def filter_sizes(
        self,
        sizes: str,
        size: RequestedSize,
        image_src: Optional[str] = None,
        image_meta: Optional[Mapping[str, Any]] = None,
        attachment_id: int = 0,
    ) -> str:
        """Host filter callback: computes sizes against the current render's stack."""
        render = self.current_render()
        top = render.stack.top()
        self.sink.emit_trace(
            Cat.SIZES,
            "Filter routed",
            sec=top.section_id if top else None,
            depth=len(self._open_renders),
        )
        return render.compute_sizes_for_image(sizes, size, image_src, image_meta, attachment_id)

    def active_section(self) -> Optional[SectionDefinition]:
        top = self.stack.top()
        return self.registry.get(top.section_id) if top else None

    def compute_sizes_for_image(
        self,
        sizes: str,
        size: RequestedSize,
        image_src: Optional[str] = None,
        image_meta: Optional[Mapping[str, Any]] = None,
        attachment_id: int = 0,
    ) -> str:
        """
        Sizes for an image rendered through this facade. Outside any section
        the host's string is returned as is; inside one, the section's rules replace it. SizesParseError from
        an unexpected host format is not caught here.
        """
        top = self.stack.top()
        if top is None:
            return sizes

        section = self.registry.get(top.section_id)
        if section is None:
            # unreachable while begin() only pushes registered ids
            return sizes

        image_width = parse_image_width(sizes)
        updated = generate_sizes(image_width, section)
        self.sink.emit_trace(Cat.SIZES, "Sizes generated", sec=section.id, width=image_width)

        return self.post_processor(
            updated,
            size,
            image_src,
            image_meta,
            attachment_id,
            section,
            top.context,
        )
