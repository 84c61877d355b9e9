import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml

from . import config
from .sizing.context import AppContext
from .sizing.diagnostics import DiagnosticsSink
from .sizing.errors import SizesParseError
from .sizing.hooks import SizesFilterChain
from .sizing.instrumentation import Cat, InstrumentPolicy, LogMode, parse_log_mode
from .sizing.plugin import ResponsiveImagesPlugin
from .sizing.section_reader import SectionFileSource, SectionReader
from .sizing.snapshot_dump import dump_sections_json


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cri",
        description="Compute image `sizes` attributes from section breakpoint definitions.",
    )
    parser.add_argument(
        "--sections",
        default=config.SECTIONS_PATH,
        help="YAML/JSON file or directory of section definitions (default: $CRI_SECTIONS_PATH)",
    )
    parser.add_argument("--section", required=True, help="id of the section the images render in")
    parser.add_argument("--context", default=None, help="JSON payload attached to the section")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--debug", action="store_true", help="emit section diagnostics")
    mode.add_argument("--trace", action="store_true", help="diagnostics plus stack tracing")
    parser.add_argument("--verbose", action="store_true", help="show debug output on the console")
    parser.add_argument("--dump", type=Path, default=None, help="write registry/stack JSON here")
    parser.add_argument("sizes", nargs="+", help="host default sizes strings, e.g. '(max-width: 300px) 100vw, 300px'")
    return parser


def build_context(logger: logging.Logger, log_mode: LogMode) -> AppContext:
    sink = DiagnosticsSink(
        logger,
        InstrumentPolicy(
            mode=log_mode,
            include_ctx=config.INCLUDE_LOG_CTX,
            history_limit=config.DIAG_HISTORY_LIMIT,
        ),
    )
    return AppContext(
        logger=logger,
        sink=sink,
        plugin=ResponsiveImagesPlugin(sink=sink),
        reader=SectionReader(logger),
        host=SizesFilterChain(),
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logger = setup_logging(verbose_console=args.verbose)

    if args.trace:
        log_mode = LogMode.TRACE
    elif args.debug:
        log_mode = LogMode.DEBUG
    else:
        log_mode = parse_log_mode(config.LOG_MODE)
    ctx = build_context(logger, log_mode)
    ctx.sink.emit_signal(
        Cat.STARTUP,
        "Plugin initialized",
        log_mode=log_mode.value,
        sections_path=args.sections,
    )

    if not args.sections:
        logger.error("No sections path given (use --sections or set CRI_SECTIONS_PATH).")
        return 2

    try:
        context = json.loads(args.context) if args.context is not None else None
    except json.JSONDecodeError as e:
        logger.error("Could not parse --context as JSON: %s", e)
        return 2

    try:
        ctx.plugin.setup([SectionFileSource(args.sections, ctx.reader)], host=ctx.host)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error("Could not load sections from %s: %r", args.sections, e)
        return 2

    if not ctx.plugin.sizes_filter_active:
        logger.error("No valid sections were registered from %s.", args.sections)
        return 1

    if not ctx.plugin.begin_section(args.section, context):
        logger.error("Section %r is not registered.", args.section)
        return 1

    try:
        for sizes in args.sizes:
            print(ctx.host.calculate(sizes, "full"))
    except SizesParseError as e:
        logger.error(str(e))
        return 2
    finally:
        if args.dump is not None:
            dump_sections_json(ctx.plugin, args.dump)
        ctx.plugin.end_section(args.section)

    return 0


def setup_logging(verbose_console: bool = False):
    logger = logging.getLogger("cri")
    logger.setLevel(logging.DEBUG)  # emit everything; handlers will filter

    # Clear existing handlers if this is called multiple times
    logger.handlers.clear()
    logger.propagate = False  # don't double-log via root

    fmt = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    formatter = logging.Formatter(fmt)

    # --- Console: WARNING (or DEBUG if verbose_console=True) ---
    console_handler = logging.StreamHandler(sys.stderr)
    console_level = logging.DEBUG if verbose_console else logging.WARNING
    console_handler.setLevel(console_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # --- File: DEBUG, truncated each run ---
    if config.LOG_FILE:
        file_handler = logging.FileHandler(config.LOG_FILE, mode="w", encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        file_handler.name = "default_file"
        logger.addHandler(file_handler)

    return logger


if __name__ == "__main__":
    raise SystemExit(main())
