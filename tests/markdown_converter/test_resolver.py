"""Tests for cross-reference resolution between markdown documents."""

import xml.etree.ElementTree as etree
from pathlib import Path
from unittest.mock import patch

from src.markdown_converter.node_cache import DocumentCache
from src.markdown_converter.parser import DocumentTree
from src.markdown_converter.resolver import CrossReferenceResolver


class CountingParser:
    """Stub parser recording every parse request."""

    def __init__(self):
        self.calls = []

    def parse(self, text, source=None):
        self.calls.append(source)
        return DocumentTree(root=etree.Element("div"), source=source)


def write(path, text="# Page"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)
    return path


def make_resolver(*roots):
    parser = CountingParser()
    canonical = [root.resolve() for root in roots]
    for root in canonical:
        root.mkdir(parents=True, exist_ok=True)
    resolver = CrossReferenceResolver(DocumentCache(parser, canonical))
    return resolver, parser


class TestCrossReferenceResolver:
    """Test the CrossReferenceResolver component."""

    def test_resolves_relative_path(self, tmp_path):
        """A path relative to a root returns that file's parsed document."""
        root = tmp_path / "markdown"
        page = write(root / "guides" / "intro.md")
        resolver, _ = make_resolver(root)

        document = resolver.get_relative("guides/intro.md")

        assert document is not None
        assert document.source == page.resolve()

    def test_first_root_wins(self, tmp_path):
        """When several roots hold the path, the first configured root is used."""
        first = tmp_path / "first"
        second = tmp_path / "second"
        write(first / "shared.md")
        write(second / "shared.md")
        resolver, parser = make_resolver(first, second)

        document = resolver.get_relative("shared.md")

        assert document.source == (first / "shared.md").resolve()
        assert parser.calls == [(first / "shared.md").resolve()]

    def test_falls_back_to_later_root(self, tmp_path):
        """Roots are tried in order until one matches."""
        first = tmp_path / "first"
        second = tmp_path / "second"
        write(second / "only-here.md")
        resolver, _ = make_resolver(first, second)

        assert resolver.get_relative("only-here.md").source == (second / "only-here.md").resolve()

    def test_escaping_all_roots_is_not_found(self, tmp_path):
        """A reference landing outside every root is unresolved, not an error."""
        root = tmp_path / "site" / "markdown"
        write(tmp_path / "outside.md")
        resolver, parser = make_resolver(root)

        assert resolver.get_relative("../../outside.md") is None
        assert parser.calls == []

    def test_escape_checked_against_resolving_root(self, tmp_path):
        """Escaping one root skips it, but a later root can still accept the same path."""
        docs = tmp_path / "docs"
        extra = tmp_path / "extra"
        target = write(extra / "page.md")
        resolver, _ = make_resolver(docs, extra)

        # Under docs this lands on extra/page.md (outside docs); under extra it
        # resolves to extra/page.md, which is inside extra.
        document = resolver.get_relative("../extra/page.md")

        assert document is not None
        assert document.source == target.resolve()

    def test_nested_roots(self, tmp_path):
        """A file reachable through nested roots resolves through the first of them."""
        outer = tmp_path / "outer"
        inner = outer / "inner"
        page = write(inner / "page.md")
        resolver, _ = make_resolver(inner, outer)

        assert resolver.get_relative("page.md").source == page.resolve()
        assert resolver.get_relative("inner/page.md") is resolver.get_relative("page.md")

    def test_absolute_path_outside_roots(self, tmp_path):
        """An absolute path replaces the root when joined, so one outside the roots never matches."""
        root = tmp_path / "markdown"
        write(tmp_path / "other.md")
        resolver, parser = make_resolver(root)

        assert resolver.get_relative(str(tmp_path / "other.md")) is None
        assert parser.calls == []

    def test_missing_file_and_directory(self, tmp_path):
        """Missing files and directories are not found."""
        root = tmp_path / "markdown"
        (root / "folder.md").mkdir(parents=True)
        resolver, _ = make_resolver(root)

        assert resolver.get_relative("missing.md") is None
        assert resolver.get_relative("folder.md") is None
        assert resolver.get_relative("") is None

    def test_io_error_skips_only_that_candidate(self, tmp_path):
        """An I/O error while checking one root moves on to the next root."""
        first = tmp_path / "first"
        second = tmp_path / "second"
        write(first / "page.md")
        write(second / "page.md")
        resolver, _ = make_resolver(first, second)

        with patch.object(Path, "is_file", side_effect=[OSError("stale handle"), True]):
            document = resolver.get_relative("page.md")

        assert document.source == (second / "page.md").resolve()

    def test_shares_cache_identity(self, tmp_path):
        """Resolved documents are the same objects the cache hands out."""
        root = tmp_path / "markdown"
        page = write(root / "page.md")
        resolver, parser = make_resolver(root)

        assert resolver("page.md") is resolver.cache.get(page)
        assert len(parser.calls) == 1
