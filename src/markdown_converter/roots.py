"""Resolution of the directories markdown files may live under."""

import logging
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def is_under(path: PathLike, root: Path) -> bool:
    """Check whether a canonical path equals or descends from a canonical root."""
    path = Path(path)
    return path == root or root in path.parents


def is_under_any(path: PathLike, roots: Iterable[Path]) -> bool:
    """Check whether a canonical path lies under at least one root."""
    return any(is_under(path, root) for root in roots)


class RootResolver:
    """Builds the ordered, canonical set of markdown roots for a single run."""

    def __init__(
        self,
        resource_dirs: Sequence[PathLike],
        generated_dirs: Sequence[PathLike] = (),
    ):
        """
        Initialize the resolver.

        Args:
            resource_dirs: Configured resource directories, in priority order
            generated_dirs: Directories holding markdown produced by other generators
        """
        self.resource_dirs = list(resource_dirs)
        self.generated_dirs = list(generated_dirs)

    def resolve(self) -> Tuple[Path, ...]:
        """
        Canonicalize and deduplicate all configured directories.

        Missing directories are dropped rather than treated as errors, since a
        project is free to have no markdown in one of its resource folders.

        Returns:
            Tuple of absolute, symlink-resolved directories, first-seen order
        """
        roots: List[Path] = []
        for directory in [*self.resource_dirs, *self.generated_dirs]:
            canonical = Path(directory).expanduser().resolve()
            if not canonical.is_dir():
                logger.debug(f"Skipping markdown root {directory}: not an existing directory")
                continue
            if canonical in roots:
                continue
            roots.append(canonical)

        logger.debug(f"Resolved {len(roots)} markdown roots: {[str(r) for r in roots]}")
        return tuple(roots)


def resolve_roots(
    resource_dirs: Sequence[PathLike], generated_dirs: Sequence[PathLike] = ()
) -> Tuple[Path, ...]:
    """Shortcut for ``RootResolver(resource_dirs, generated_dirs).resolve()``."""
    return RootResolver(resource_dirs, generated_dirs).resolve()
