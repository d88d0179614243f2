"""Run-scoped cache of parsed markdown documents."""

import logging
import threading
from pathlib import Path
from typing import Dict, Sequence, Tuple, Union

from .errors import ParseFailure, RootViolation
from .parser import DocumentTree, MarkdownParser
from .roots import is_under_any

logger = logging.getLogger(__name__)


class DocumentCache:
    """
    Maintains parsed markdown content keyed by the canonical path of its source file.

    Markdown files can link to other markdown files, so while processing a
    collection of them the same file is often requested several times (a shared
    navigation fragment, for example). Each file is read and parsed only once,
    and every request for it returns the very same DocumentTree object.

    The cache must not outlive a single conversion run: users edit markdown
    between runs and those edits have to be picked up.
    """

    def __init__(self, parser: MarkdownParser, roots: Sequence[Path]):
        """
        Initialize the cache.

        Args:
            parser: Parser used on cache misses
            roots: Canonical root folders; files outside them are rejected
        """
        self._parser = parser
        self._roots: Tuple[Path, ...] = tuple(roots)
        self._documents: Dict[str, DocumentTree] = {}
        self._lock = threading.Lock()

    @property
    def roots(self) -> Tuple[Path, ...]:
        return self._roots

    def __contains__(self, file: Union[str, Path]) -> bool:
        return Path(file).resolve().as_posix() in self._documents

    def __len__(self) -> int:
        return len(self._documents)

    def get(self, file: Union[str, Path]) -> DocumentTree:
        """
        Return the parsed document for a markdown file, parsing it on first request.

        Args:
            file: Path to a markdown file under one of the roots

        Returns:
            The cached DocumentTree for the file

        Raises:
            RootViolation: If the file is not under any configured root
            ParseFailure: If the file content cannot be parsed
            OSError: If the file cannot be read
        """
        canonical_file = Path(file).resolve()
        if not is_under_any(canonical_file, self._roots):
            raise RootViolation(canonical_file, self._roots)

        key = canonical_file.as_posix()
        with self._lock:
            document = self._documents.get(key)
            if document is None:
                document = self._load(canonical_file)
                self._documents[key] = document
        return document

    def _load(self, canonical_file: Path) -> DocumentTree:
        logger.debug(f"Parsing markdown file: {canonical_file}")
        try:
            text = canonical_file.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise ParseFailure(f"Unable to read file as UTF-8: {e}", canonical_file) from e
        return self._parser.parse(text, source=canonical_file)
