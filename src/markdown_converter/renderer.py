"""Renders parsed markdown documents into Python page modules."""

import json
import keyword
import posixpath
import xml.etree.ElementTree as etree
from pathlib import PurePosixPath
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple
from urllib.parse import unquote, urlsplit

from jinja2 import Environment, StrictUndefined, TemplateError

from .errors import MarkdownConversionError, RenderFailure
from .handlers import MarkdownHandlers, escape_text
from .naming import route_for
from .parser import DocumentTree
from .reporter import Reporter

DEFAULT_MARKDOWN_EXTENSIONS = (".md", ".markdown")

ReferenceResolver = Callable[[str], Optional[DocumentTree]]

PAGE_TEMPLATE = '''\
{{ ("Page generated from " ~ source_path ~ ". Do not edit by hand.") | pyrepr }}
{% if imports %}

{% for statement in imports %}
{{ statement }}
{% endfor %}
{% endif %}

PACKAGE = {{ package | pyrepr }}
ROUTE = {{ route | pyrepr }}
FRONT_MATTER = {{ front_matter | pyrepr }}
CONTENT = (
{% for line in content_lines %}
    {{ line | pyrepr }}
{% endfor %}
)


def {{ function_name }}():
    {{ ("Render the page served at " ~ route ~ ".") | pyrepr }}
{% if root_name %}
    return {{ root_name }}(CONTENT, front_matter=FRONT_MATTER)
{% else %}
    return CONTENT
{% endif %}
'''


def _environment() -> Environment:
    env = Environment(
        autoescape=False,
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["pyrepr"] = repr
    return env


def is_dotted_identifier(name: str) -> bool:
    parts = name.split(".")
    return all(part.isidentifier() and not keyword.iskeyword(part) for part in parts)


def import_statement(entry: str) -> str:
    """
    Normalize a configured import into a Python import statement.

    "mysite.widgets.Callout" becomes "from mysite.widgets import Callout" and a
    bare module name becomes "import module". Full statements pass through.
    """
    entry = entry.strip()
    if entry.startswith(("import ", "from ")):
        return entry
    if not is_dotted_identifier(entry):
        raise ValueError(f"Cannot turn '{entry}' into an import statement")
    module, _, name = entry.rpartition(".")
    if not module:
        return f"import {name}"
    return f"from {module} import {name}"


def _json_safe(front_matter: Dict[str, Any]) -> Dict[str, Any]:
    # YAML gives dates and other objects a literal repr can't rebuild without imports.
    # NaN and infinity have no literal form either.
    return json.loads(json.dumps(front_matter, default=str, allow_nan=False))


class RenderContext:
    """State shared by element handlers while one document is rendered."""

    def __init__(
        self,
        resolve_ref: ReferenceResolver,
        source_path: str,
        handlers: MarkdownHandlers,
        reporter: Reporter,
        markdown_extensions: Sequence[str] = DEFAULT_MARKDOWN_EXTENSIONS,
    ):
        self.resolve_ref = resolve_ref
        self.source_path = source_path
        self.handlers = handlers
        self.reporter = reporter
        self.markdown_extensions = tuple(ext.lower() for ext in markdown_extensions)

    def render(self, element: etree.Element) -> str:
        """Render an element (without its tail) through its registered handler."""
        if not isinstance(element.tag, str):
            # Comments and processing instructions
            return ""

        handler = self.handlers.get(element.tag)
        try:
            html = handler(element, self)
        except (MarkdownConversionError, OSError):
            # Failures loading a linked document belong to that document
            raise
        except Exception as e:
            raise RenderFailure(f"Handler for <{element.tag}> failed: {e}", self.source_path) from e

        if not isinstance(html, str):
            raise RenderFailure(
                f"Handler for <{element.tag}> returned {type(html).__name__}, expected str",
                self.source_path,
            )
        return html

    def render_inner(self, element: etree.Element) -> str:
        """Render an element's text and children, including each child's tail."""
        parts = [escape_text(element.text)]
        for child in element:
            parts.append(self.render(child))
            parts.append(escape_text(child.tail))
        return "".join(parts)

    def resolve_link(self, href: str) -> Optional[Tuple[str, DocumentTree]]:
        """
        Resolve a link to another markdown document.

        Args:
            href: Link target as written in the markdown source

        Returns:
            (route, document) for relative links to markdown files that resolve
            under a markdown root, otherwise None so the link is kept as is
        """
        parts = urlsplit(href)
        if parts.scheme or parts.netloc or not parts.path or parts.path.startswith("/"):
            return None
        if PurePosixPath(parts.path).suffix.lower() not in self.markdown_extensions:
            return None

        target = posixpath.normpath(
            posixpath.join(posixpath.dirname(self.source_path), unquote(parts.path))
        )
        document = self.resolve_ref(target)
        if document is None:
            return None

        route = route_for(target, document.front_matter.get("routeOverride"))
        if parts.query:
            route += f"?{parts.query}"
        if parts.fragment:
            route += f"#{parts.fragment}"
        return route, document


class PageRenderer:
    """Generates the source of a Python page module from a parsed markdown document."""

    def __init__(
        self,
        resolve_ref: ReferenceResolver,
        default_root: Optional[str],
        imports: Sequence[str],
        source_path: str,
        handlers: MarkdownHandlers,
        package: str,
        function_name: str,
        reporter: Reporter,
        markdown_extensions: Sequence[str] = DEFAULT_MARKDOWN_EXTENSIONS,
    ):
        """
        Initialize the renderer for a single markdown file.

        Args:
            resolve_ref: Callback resolving a root-relative path to a parsed document
            default_root: Dotted name of the layout wrapping page content, if any
            imports: Import statements (or dotted names) added to the generated module
            source_path: Forward-slash path of the markdown file relative to its root
            handlers: Element handlers used to produce the page HTML
            package: Package the generated module belongs to
            function_name: Name of the generated page function
            reporter: Sink for diagnostics
            markdown_extensions: Link suffixes treated as references to other documents
        """
        self.resolve_ref = resolve_ref
        self.default_root = default_root
        self.imports = list(imports)
        self.source_path = source_path
        self.handlers = handlers
        self.package = package
        self.function_name = function_name
        self.reporter = reporter
        self.markdown_extensions = markdown_extensions
        self._template = _environment().from_string(PAGE_TEMPLATE)

    def render(self, tree: DocumentTree) -> str:
        """
        Render a parsed document.

        Args:
            tree: Parsed markdown document

        Returns:
            Source text of the generated Python module

        Raises:
            RenderFailure: If a handler fails or the page settings are invalid
        """
        if not self.function_name.isidentifier() or keyword.iskeyword(self.function_name):
            raise RenderFailure(f"Invalid page function name '{self.function_name}'", self.source_path)

        front_matter = tree.front_matter
        imports = self._collect_imports(front_matter)
        root_name = self._resolve_root(front_matter, imports)

        ctx = RenderContext(
            self.resolve_ref,
            self.source_path,
            self.handlers,
            self.reporter,
            self.markdown_extensions,
        )
        content = tree.restore_html(ctx.render_inner(tree.root)).strip()
        route = route_for(self.source_path, front_matter.get("routeOverride"))
        try:
            safe_front_matter = _json_safe(front_matter)
        except ValueError as e:
            raise RenderFailure(f"Front matter can't be embedded: {e}", self.source_path) from e

        try:
            return self._template.render(
                source_path=self.source_path,
                imports=imports,
                package=self.package,
                route=route,
                front_matter=safe_front_matter,
                content_lines=content.splitlines(keepends=True) or [""],
                function_name=self.function_name,
                root_name=root_name,
            )
        except TemplateError as e:
            raise RenderFailure(f"Template error: {e}", self.source_path) from e

    def _collect_imports(self, front_matter: Dict[str, Any]) -> List[str]:
        extra = front_matter.get("imports") or []
        if isinstance(extra, str):
            extra = [extra]

        statements: List[str] = []
        for entry in [*self.imports, *extra]:
            try:
                statement = import_statement(str(entry))
            except ValueError as e:
                raise RenderFailure(str(e), self.source_path) from e
            if statement not in statements:
                statements.append(statement)
        return statements

    def _resolve_root(self, front_matter: Dict[str, Any], imports: List[str]) -> Optional[str]:
        """Pick the layout wrapping the page; frontmatter `root` overrides the default."""
        root = front_matter.get("root", self.default_root)
        if root is None:
            return None
        if not isinstance(root, str):
            raise RenderFailure(f"Page root must be a string, got {type(root).__name__}", self.source_path)

        root = root.strip()
        if not root:
            return None
        if not is_dotted_identifier(root):
            raise RenderFailure(f"Page root '{root}' is not a valid dotted name", self.source_path)

        module, _, name = root.rpartition(".")
        if module:
            statement = f"from {module} import {name}"
            if statement not in imports:
                imports.append(statement)
        return name
