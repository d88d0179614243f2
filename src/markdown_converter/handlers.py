"""Per-element handlers turning parsed markdown elements into HTML."""

import importlib
import re
import xml.etree.ElementTree as etree
from typing import Callable, Dict, Iterable, Mapping, Optional

VOID_TAGS = frozenset({"area", "br", "col", "embed", "hr", "img", "input", "link", "meta", "source", "wbr"})

# Only replace & when not part of an entity, matching Python-Markdown's serializer
_RE_AMP = re.compile(r"&(?!(?:#[0-9]+|#x[0-9a-f]+|[0-9a-z]+);)", re.I)

# handler(element, ctx) -> html; ctx is a renderer.RenderContext
Handler = Callable[[etree.Element, "RenderContext"], str]


def escape_text(text: Optional[str]) -> str:
    if not text:
        return ""
    text = _RE_AMP.sub("&amp;", text)
    return text.replace("<", "&lt;").replace(">", "&gt;")


def escape_attribute(value: str) -> str:
    return escape_text(value).replace('"', "&quot;")


def format_attributes(attrib: Mapping[str, str]) -> str:
    return "".join(f' {name}="{escape_attribute(str(value))}"' for name, value in attrib.items())


def render_element(
    element: etree.Element,
    ctx: "RenderContext",
    attrib: Optional[Mapping[str, str]] = None,
    inner: Optional[str] = None,
) -> str:
    """
    Serialize one element, rendering its children through the context.

    Args:
        element: Element to serialize (its tail is the parent's business)
        ctx: Render context used for the children
        attrib: Attributes to emit instead of the element's own
        inner: Pre-rendered inner HTML to emit instead of the children

    Returns:
        HTML for the element
    """
    attrib = element.attrib if attrib is None else attrib
    opening = f"<{element.tag}{format_attributes(attrib)}>"
    if element.tag in VOID_TAGS:
        return opening
    if inner is None:
        inner = ctx.render_inner(element)
    return f"{opening}{inner}</{element.tag}>"


def default_handler(element: etree.Element, ctx: "RenderContext") -> str:
    return render_element(element, ctx)


def link_handler(element: etree.Element, ctx: "RenderContext") -> str:
    """Point links to other markdown documents at the page generated for them."""
    href = element.get("href")
    target = ctx.resolve_link(href) if href else None
    if target is None:
        return render_element(element, ctx)

    route, document = target
    attrib = dict(element.attrib)
    attrib["href"] = route
    inner = ctx.render_inner(element)
    if not inner.strip() and document.title:
        inner = escape_text(document.title)
    return render_element(element, ctx, attrib=attrib, inner=inner)


def image_handler(element: etree.Element, ctx: "RenderContext") -> str:
    if not element.get("alt"):
        ctx.reporter.warn(f"{ctx.source_path}: image '{element.get('src', '')}' has no alt text")
    return render_element(element, ctx)


class MarkdownHandlers:
    """Registry of element handlers, keyed by HTML tag."""

    def __init__(self, handlers: Optional[Mapping[str, Handler]] = None):
        self._handlers: Dict[str, Handler] = {
            "a": link_handler,
            "img": image_handler,
        }
        if handlers:
            self._handlers.update(handlers)

    def __contains__(self, tag: str) -> bool:
        return tag in self._handlers

    def get(self, tag: str) -> Handler:
        return self._handlers.get(tag, default_handler)

    def register(self, tag: str, handler: Handler) -> None:
        if not callable(handler):
            raise TypeError(f"Handler for <{tag}> must be callable, got {type(handler).__name__}")
        self._handlers[tag] = handler

    def load(self, entry: str) -> None:
        """
        Register a handler from a "tag=module:attribute" entry.

        Args:
            entry: e.g. "h1=mysite.markdown:heading"
        """
        tag, sep, target = entry.partition("=")
        module_name, colon, attribute = target.partition(":")
        if not sep or not colon or not tag.strip() or not module_name or not attribute:
            raise ValueError(f"Invalid handler entry '{entry}', expected tag=module:attribute")

        module = importlib.import_module(module_name.strip())
        self.register(tag.strip(), getattr(module, attribute.strip()))

    @classmethod
    def from_entries(cls, entries: Iterable[str]) -> "MarkdownHandlers":
        handlers = cls()
        for entry in entries:
            if entry.strip():
                handlers.load(entry)
        return handlers
