"""Main orchestration for converting markdown resources into page modules."""

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

from .errors import MarkdownConversionError, OutputCollision
from .handlers import MarkdownHandlers
from .naming import ConversionUnit, prefix_qualified_package
from .node_cache import DocumentCache
from .parser import MarkdownFeatures
from .renderer import PageRenderer
from .reporter import LoggingReporter, Reporter
from .resolver import CrossReferenceResolver
from .roots import RootResolver, is_under
from .scanner import DirectoryScanner, ScannerConfig

logger = logging.getLogger(__name__)


@dataclass
class ConversionConfig:
    """Settings for one markdown conversion run."""

    resource_dirs: List[Path]
    gen_src_root: Path
    pages_package: str = "pages"
    project_package: str = ""
    generated_markdown_dirs: List[Path] = field(default_factory=list)
    file_extensions: List[str] = field(default_factory=lambda: [".md", ".markdown"])
    artifact_extension: str = ".py"
    skip_hidden_files: bool = True
    default_root: Optional[str] = None
    imports: List[str] = field(default_factory=list)
    features: MarkdownFeatures = field(default_factory=MarkdownFeatures)
    handlers: MarkdownHandlers = field(default_factory=MarkdownHandlers)
    clean_output: bool = False

    @property
    def qualified_package(self) -> str:
        return prefix_qualified_package(self.pages_package, self.project_package)

    @property
    def gen_dir(self) -> Path:
        """Directory generated page modules are written under."""
        package = self.qualified_package
        return Path(self.gen_src_root).joinpath(*package.split(".")) if package else Path(self.gen_src_root)


class MarkdownConverter:
    """Converts every discovered markdown file into exactly one generated page module."""

    def __init__(self, config: ConversionConfig, reporter: Reporter = None):
        self.config = config
        self.reporter = reporter or LoggingReporter(logger)
        self.scanner = DirectoryScanner(
            ScannerConfig(
                skip_hidden_files=config.skip_hidden_files,
                supported_extensions=list(config.file_extensions),
            )
        )

    def resolve_roots(self) -> Tuple[Path, ...]:
        return RootResolver(self.config.resource_dirs, self.config.generated_markdown_dirs).resolve()

    def discover_units(self, roots: Sequence[Path] = None) -> Iterator[ConversionUnit]:
        """
        Walk every markdown root and yield one conversion unit per file.

        A file reachable through more than one root (nested roots) is only
        yielded for the first root, with its path relative to that root.
        Distinct files that map to the same page module are rejected.

        Args:
            roots: Canonical roots to walk; resolved from the config if omitted

        Yields:
            ConversionUnit for each markdown file

        Raises:
            OutputCollision: If two files would produce the same output file
        """
        if roots is None:
            roots = self.resolve_roots()

        seen = set()
        claimed = {}
        for root in roots:
            for relative_path in self.scanner.scan_for_markdown_files(str(root)):
                source_file = (root / relative_path).resolve()
                if source_file in seen:
                    continue
                seen.add(source_file)
                unit = ConversionUnit.create(
                    source_file,
                    relative_path,
                    base_package=self.config.qualified_package,
                    gen_dir=self.config.gen_dir,
                    extension=self.config.artifact_extension,
                )
                if unit.output_file in claimed:
                    raise OutputCollision(unit.output_file, claimed[unit.output_file], source_file)
                claimed[unit.output_file] = source_file
                yield unit

    def convert(self) -> List[ConversionUnit]:
        """
        Main entry point - converts all markdown resources.

        Any failure aborts the whole run: a half-generated set of pages is worse
        than a failed build.

        Returns:
            The conversion units that were written, in processing order
        """
        roots = self.resolve_roots()
        logger.info(f"Converting markdown from {len(roots)} roots into {self.config.gen_dir}")

        # Collisions must surface before anything is removed or written
        units = list(self.discover_units(roots))

        if self.config.clean_output and self.config.gen_dir.exists():
            self._clean_output(roots)

        # Fresh for every run so edited markdown is always re-read
        cache = DocumentCache(self.config.features.create_parser(), roots)
        resolver = CrossReferenceResolver(cache)

        converted = []
        for unit in units:
            self.convert_unit(unit, cache, resolver)
            converted.append(unit)

        logger.info(
            f"Conversion complete: {len(converted)} pages generated, "
            f"{len(cache)} documents parsed"
        )
        return converted

    def convert_unit(
        self, unit: ConversionUnit, cache: DocumentCache, resolver: CrossReferenceResolver
    ) -> Path:
        """
        Render a single markdown file and write its page module.

        Args:
            unit: The file to convert
            cache: Run-scoped document cache
            resolver: Cross-reference resolver bound to the same cache

        Returns:
            Path of the written module
        """
        logger.debug(f"Converting {unit.relative_path} -> {unit.output_file}")

        tree = cache.get(unit.source_file)
        renderer = PageRenderer(
            resolver,
            self.config.default_root,
            self.config.imports,
            unit.relative_path,
            self.config.handlers,
            unit.package,
            unit.function_name,
            self.reporter,
            markdown_extensions=self.config.file_extensions,
        )
        source = renderer.render(tree)

        unit.output_file.parent.mkdir(parents=True, exist_ok=True)
        _write_atomically(unit.output_file, source)
        return unit.output_file

    def _clean_output(self, roots: Sequence[Path]) -> None:
        gen_dir = self.config.gen_dir.resolve()
        for root in roots:
            if is_under(root, gen_dir):
                raise MarkdownConversionError(
                    f"Refusing to clean {gen_dir}: it contains the markdown root {root}"
                )
        logger.info(f"Removing previously generated pages in {gen_dir}")
        shutil.rmtree(gen_dir)


def _write_atomically(path: Path, text: str) -> None:
    """Write text through a temporary sibling file so readers never see a partial module."""
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.remove(tmp_name)
        raise
