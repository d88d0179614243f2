"""Markdown Parser producing document trees with optional YAML frontmatter."""

import re
import xml.etree.ElementTree as etree
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import frontmatter
import markdown
import yaml
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor
from markdown.util import AMP_SUBSTITUTE, BLOCK_LEVEL_ELEMENTS, HTML_PLACEHOLDER_RE

from .errors import ParseFailure

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")

# Block-level raw HTML is wrapped in a paragraph by Python-Markdown
_PARAGRAPH_PLACEHOLDER_RE = re.compile(f"<p>{HTML_PLACEHOLDER_RE.pattern}</p>")
_LEADING_TAG_RE = re.compile(r"^\<\/?([^ >]+)")


def _is_block_level(html: str) -> bool:
    match = _LEADING_TAG_RE.match(html)
    if match is None:
        return False
    tag = match.group(1)
    if tag[0] in ("!", "?", "@", "%"):
        return True
    return tag.lower().rstrip("/") in BLOCK_LEVEL_ELEMENTS


@dataclass(eq=False)
class DocumentTree:
    """Parsed representation of a single markdown document."""

    root: etree.Element
    front_matter: Dict[str, Any] = field(default_factory=dict)
    html_blocks: List[str] = field(default_factory=list)
    source: Optional[Path] = None

    @property
    def title(self) -> Optional[str]:
        """Frontmatter title, falling back to the text of the first heading."""
        title = self.front_matter.get("title")
        if title:
            return str(title)
        for element in self.root.iter():
            if element.tag in HEADING_TAGS:
                text = "".join(element.itertext()).strip()
                if text:
                    return self.restore_html(text)
        return None

    def restore_html(self, html: str) -> str:
        """Swap raw HTML placeholders left in the tree back for their original markup."""

        def block_for(match: "re.Match") -> Optional[str]:
            index = int(match.group(1))
            return self.html_blocks[index] if index < len(self.html_blocks) else None

        def replace_paragraph(match: "re.Match") -> str:
            block = block_for(match)
            if block is None or not _is_block_level(block):
                return match.group(0)
            return block

        def replace(match: "re.Match") -> str:
            block = block_for(match)
            return match.group(0) if block is None else block

        html = _PARAGRAPH_PLACEHOLDER_RE.sub(replace_paragraph, html)
        html = HTML_PLACEHOLDER_RE.sub(replace, html)
        return html.replace(AMP_SUBSTITUTE, "&")


@dataclass
class MarkdownFeatures:
    """Switches for the optional markdown syntax understood by the parser."""

    front_matter: bool = True
    tables: bool = True
    fenced_code: bool = True
    toc: bool = True
    footnotes: bool = False
    def_list: bool = False
    admonition: bool = False
    attr_list: bool = False
    extra_extensions: List[str] = None

    def __post_init__(self):
        if self.extra_extensions is None:
            self.extra_extensions = []

    @classmethod
    def switch_names(cls) -> List[str]:
        return [f.name for f in fields(cls) if f.type is bool]

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "MarkdownFeatures":
        """
        Build a feature set where only the named switches are enabled.

        Names containing a dot are treated as Python-Markdown extension import
        paths and passed through untouched.

        Args:
            names: Feature names, e.g. ["front_matter", "tables", "toc"]

        Returns:
            MarkdownFeatures with everything not named disabled
        """
        switches = cls.switch_names()
        enabled = {name: False for name in switches}
        extra = []
        for name in names:
            name = name.strip()
            if not name:
                continue
            if name in enabled:
                enabled[name] = True
            elif "." in name:
                extra.append(name)
            else:
                raise ValueError(
                    f"Unknown markdown feature '{name}', expected one of: {', '.join(switches)}"
                )
        return cls(extra_extensions=extra, **enabled)

    def extensions(self) -> List[str]:
        """Python-Markdown extension names matching the enabled switches."""
        names = [
            name
            for name in (
                "tables", "fenced_code", "toc", "footnotes", "def_list", "admonition", "attr_list"
            )
            if getattr(self, name)
        ]
        return names + list(self.extra_extensions)

    def create_parser(self) -> "MarkdownParser":
        return MarkdownParser(self)


class _CaptureTreeprocessor(Treeprocessor):
    """Keeps a handle on the final element tree instead of letting it be serialized away."""

    def __init__(self, md: markdown.Markdown):
        super().__init__(md)
        self.root: Optional[etree.Element] = None

    def run(self, root: etree.Element) -> None:
        self.root = root


class _CaptureTreeExtension(Extension):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.processor: Optional[_CaptureTreeprocessor] = None

    def extendMarkdown(self, md: markdown.Markdown) -> None:
        self.processor = _CaptureTreeprocessor(md)
        # Lowest priority so every other tree processor has already run
        md.treeprocessors.register(self.processor, "capture_tree", -100)


class MarkdownParser:
    """Parses markdown text into DocumentTree objects."""

    def __init__(self, features: MarkdownFeatures = None):
        self.features = features or MarkdownFeatures()
        self._capture = _CaptureTreeExtension()
        self._markdown = markdown.Markdown(
            extensions=[*self.features.extensions(), self._capture]
        )

    def parse(self, text: str, source: Optional[Union[str, Path]] = None) -> DocumentTree:
        """
        Parse markdown content with optional frontmatter.

        Args:
            text: Full markdown text, frontmatter included
            source: Where the text came from, used in error messages

        Returns:
            DocumentTree for the content

        Raises:
            ParseFailure: If the frontmatter or markdown body cannot be parsed
        """
        source = Path(source) if source is not None else None
        metadata, content = self._split_front_matter(text, source)

        try:
            self._markdown.reset()
            self._capture.processor.root = None
            self._markdown.convert(content)
            root = self._capture.processor.root
            html_blocks = [
                block if isinstance(block, str) else etree.tostring(block, encoding="unicode")
                for block in self._markdown.htmlStash.rawHtmlBlocks
            ]
        except Exception as e:
            raise ParseFailure(f"Error parsing content: {e}", source) from e

        # Python-Markdown short-circuits blank input without building a tree
        if root is None:
            root = etree.Element("div")

        return DocumentTree(
            root=root, front_matter=metadata, html_blocks=html_blocks, source=source
        )

    def _split_front_matter(self, text: str, source: Optional[Path]):
        if not self.features.front_matter:
            return {}, text

        try:
            post = frontmatter.loads(text)
        except yaml.YAMLError as e:
            raise ParseFailure(f"Invalid YAML frontmatter: {e}", source) from e
        except (TypeError, ValueError) as e:
            raise ParseFailure(f"Invalid frontmatter: {e}", source) from e

        metadata = dict(post.metadata) if post.metadata else {}
        return metadata, post.content or ""
