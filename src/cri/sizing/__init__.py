from .diagnostics import DiagnosticRecord, DiagnosticsSink
from .errors import SectionDefinitionError, SizesParseError
from .hooks import CallbackSectionSource, SizesFilterChain, identity_post_processor
from .instrumentation import Cat, LogMode
from .plugin import ResponsiveImagesPlugin
from .section_reader import SectionFileSource, SectionReader
from .section_registry import SectionRegistry, validate_section_def
from .section_stack import SectionStack
from .section_types import ActivationEntry, SectionDefinition, SizeRule
from .sizes_generator import css_length_value, generate_sizes, parse_image_width

__all__ = [
    "ActivationEntry",
    "CallbackSectionSource",
    "Cat",
    "DiagnosticRecord",
    "DiagnosticsSink",
    "LogMode",
    "ResponsiveImagesPlugin",
    "SectionDefinition",
    "SectionDefinitionError",
    "SectionFileSource",
    "SectionReader",
    "SectionRegistry",
    "SectionStack",
    "SizeRule",
    "SizesFilterChain",
    "SizesParseError",
    "css_length_value",
    "generate_sizes",
    "identity_post_processor",
    "parse_image_width",
    "validate_section_def",
]
