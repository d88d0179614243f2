"""Resolves relative links between markdown documents."""

import logging
from pathlib import Path
from typing import Optional, Sequence

from .node_cache import DocumentCache
from .parser import DocumentTree
from .roots import is_under

logger = logging.getLogger(__name__)


class CrossReferenceResolver:
    """Looks up documents referenced by a relative path against every markdown root."""

    def __init__(self, cache: DocumentCache, roots: Optional[Sequence[Path]] = None):
        self.cache = cache
        self.roots = tuple(roots) if roots is not None else cache.roots

    def __call__(self, relative_path: str) -> Optional[DocumentTree]:
        return self.get_relative(relative_path)

    def get_relative(self, relative_path: str) -> Optional[DocumentTree]:
        """
        Return the parsed document matching a relative path under any markdown root.

        For example, "guides/intro.md" returns the parsed document for
        `resources/markdown/guides/intro.md` when `resources/markdown` is a root.
        Roots are tried in order and the first match wins.

        Args:
            relative_path: Forward-slash separated path, relative to a root

        Returns:
            DocumentTree, or None if no root holds a matching file. A path that
            escapes the root it is resolved under (e.g. `../public/license.md`)
            never matches for that root; such links are left for the renderer
            to treat as raw file links.
        """
        match = self.find(relative_path)
        if match is None:
            logger.debug(f"Reference '{relative_path}' does not resolve under any markdown root")
            return None
        return self.cache.get(match)

    def find(self, relative_path: str) -> Optional[Path]:
        """Return the canonical file a relative path resolves to, without parsing it."""
        for root in self.roots:
            try:
                candidate = (root / relative_path).resolve()
                # Make sure we don't access anything outside this root
                if candidate.is_file() and is_under(candidate, root):
                    return candidate
            except (OSError, RuntimeError) as e:
                logger.debug(f"Ignoring unreadable candidate for '{relative_path}' under {root}: {e}")
        return None
