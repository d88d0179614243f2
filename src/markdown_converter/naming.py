"""Derives package, file, function and route names for each converted markdown file."""

import posixpath
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import List, Optional, Union

from src.utils.text import camel_case_to_kebab_case, capitalize_first, to_identifier


def prefix_qualified_package(package: str, project_package: str = "") -> str:
    """
    Qualify a package relative to the project package.

    A package starting with "." (e.g. ".pages") is appended to the project
    package; anything else is already fully qualified.
    """
    if package.startswith("."):
        return ".".join(part for part in (project_package, package[1:]) if part)
    return package


def package_parts_for(relative_path: str) -> List[str]:
    """Directory parts of a forward-slash relative path."""
    return list(PurePosixPath(relative_path).parent.parts)


def package_for(relative_path: str, base_package: str) -> str:
    """Translate a file's relative directory into a package under ``base_package``."""
    parts = [base_package] if base_package else []
    parts.extend(package_parts_for(relative_path))
    return ".".join(parts)


def artifact_name_for(relative_path: str) -> str:
    """File name (without extension) of the generated module, e.g. "intro.md" -> "Intro"."""
    return capitalize_first(PurePosixPath(relative_path).stem)


def function_name_for(relative_path: str) -> str:
    """Name of the page function inside the generated module, e.g. "my-page.md" -> "MyPage"."""
    return to_identifier(PurePosixPath(relative_path).stem)


def route_for(relative_path: str, route_override: Optional[str] = None) -> str:
    """
    Compute the URL route a markdown page is served at.

    "guides/intro.md" maps to "/guides/intro", "guides/index.md" to "/guides/"
    and "GettingStarted.md" to "/getting-started". A route override replaces
    the last segment, or the whole route when it starts with "/".

    Args:
        relative_path: Forward-slash path of the file relative to its root
        route_override: Optional override, usually from the ``routeOverride`` frontmatter key

    Returns:
        Route beginning with "/"
    """
    path = PurePosixPath(relative_path)
    directory = "/".join(path.parent.parts)
    prefix = f"/{directory}/" if directory else "/"

    if route_override:
        route_override = str(route_override)
        if route_override.startswith("/"):
            return route_override
        return prefix + route_override.strip("/")

    slug = camel_case_to_kebab_case(path.stem)
    if slug == "index":
        return prefix
    return prefix + slug


@dataclass(frozen=True)
class ConversionUnit:
    """One input markdown file and everything derived from its location."""

    source_file: Path
    relative_path: str
    package: str
    artifact_name: str
    function_name: str
    output_file: Path
    route: str

    @classmethod
    def create(
        cls,
        source_file: Union[str, Path],
        relative_path: str,
        base_package: str,
        gen_dir: Union[str, Path],
        extension: str = ".py",
    ) -> "ConversionUnit":
        """
        Derive a conversion unit from a source file's relative location.

        Args:
            source_file: Path of the markdown file
            relative_path: Path relative to the root containing the file
            base_package: Package generated pages are placed under
            gen_dir: Directory generated modules are written into
            extension: File extension of generated modules

        Returns:
            ConversionUnit with output path `<gen_dir>/<relative dir>/<Artifact><extension>`
        """
        relative_path = posixpath.normpath(relative_path.replace("\\", "/"))
        artifact_name = artifact_name_for(relative_path)
        output_dir = Path(gen_dir).joinpath(*package_parts_for(relative_path))
        return cls(
            source_file=Path(source_file),
            relative_path=relative_path,
            package=package_for(relative_path, base_package),
            artifact_name=artifact_name,
            function_name=function_name_for(relative_path),
            output_file=output_dir / f"{artifact_name}{extension}",
            route=route_for(relative_path),
        )
