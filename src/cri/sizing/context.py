# src/cri/sizing/context.py
from dataclasses import dataclass
import logging

from .diagnostics import DiagnosticsSink
from .hooks import SizesFilterChain
from .plugin import ResponsiveImagesPlugin
from .section_reader import SectionReader

@dataclass
class AppContext:
    logger: logging.Logger
    sink: DiagnosticsSink
    plugin: ResponsiveImagesPlugin
    reader: SectionReader
    host: SizesFilterChain
