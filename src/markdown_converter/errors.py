"""Errors raised while converting markdown files into page modules."""

from pathlib import Path
from typing import Optional, Sequence, Union


class MarkdownConversionError(Exception):
    """Base class for all conversion failures."""


class RootViolation(MarkdownConversionError):
    """A requested file lies outside every configured markdown root."""

    def __init__(self, path: Union[str, Path], roots: Sequence[Path]):
        self.path = Path(path)
        self.roots = list(roots)
        root_list = ", ".join(str(root) for root in self.roots) or "<none>"
        super().__init__(
            f"File {self.path} is not under any of the specified Markdown roots: {root_list}"
        )


class ParseFailure(MarkdownConversionError):
    """Markdown content could not be parsed."""

    def __init__(self, detail: str, path: Optional[Union[str, Path]] = None):
        self.detail = detail
        self.path = Path(path) if path is not None else None
        location = f" in {self.path}" if self.path is not None else ""
        super().__init__(f"Failed to parse markdown{location}: {detail}")


class RenderFailure(MarkdownConversionError):
    """The renderer rejected a parsed document."""

    def __init__(self, detail: str, source_path: Optional[str] = None):
        self.detail = detail
        self.source_path = source_path
        location = f" {source_path}" if source_path else ""
        super().__init__(f"Failed to render markdown{location}: {detail}")


class OutputCollision(MarkdownConversionError):
    """Two markdown files would be written to the same page module."""

    def __init__(self, output_file: Union[str, Path], first: Union[str, Path], second: Union[str, Path]):
        self.output_file = Path(output_file)
        self.sources = [Path(first), Path(second)]
        super().__init__(
            f"{first} and {second} would both be generated as {self.output_file}"
        )
