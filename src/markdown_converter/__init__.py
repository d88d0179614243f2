"""Markdown converter turning markdown resources into generated Python page modules."""

from .converter import ConversionConfig, MarkdownConverter
from .errors import MarkdownConversionError, OutputCollision, ParseFailure, RenderFailure, RootViolation
from .handlers import MarkdownHandlers
from .naming import ConversionUnit
from .node_cache import DocumentCache
from .parser import DocumentTree, MarkdownFeatures, MarkdownParser
from .renderer import PageRenderer
from .reporter import LoggingReporter, Reporter
from .resolver import CrossReferenceResolver
from .roots import RootResolver, resolve_roots
from .scanner import DirectoryScanner, ScannerConfig

__all__ = [
    "ConversionConfig",
    "ConversionUnit",
    "CrossReferenceResolver",
    "DirectoryScanner",
    "DocumentCache",
    "DocumentTree",
    "LoggingReporter",
    "MarkdownConversionError",
    "MarkdownConverter",
    "MarkdownFeatures",
    "MarkdownHandlers",
    "MarkdownParser",
    "OutputCollision",
    "PageRenderer",
    "ParseFailure",
    "RenderFailure",
    "Reporter",
    "RootResolver",
    "RootViolation",
    "ScannerConfig",
    "resolve_roots",
]
