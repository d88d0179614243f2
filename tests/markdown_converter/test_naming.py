"""Tests for conversion unit naming rules."""

from pathlib import Path

import pytest

from src.markdown_converter.naming import (
    ConversionUnit,
    artifact_name_for,
    function_name_for,
    package_for,
    prefix_qualified_package,
    route_for,
)


class TestConversionUnit:
    """Test how output locations are derived from input paths."""

    def test_nested_file(self):
        """guides/intro.md lands in <gen>/guides/Intro.py in the guides sub-package."""
        gen_dir = Path("/build/gen/com/example/pages")

        unit = ConversionUnit.create(
            Path("/site/markdown/guides/intro.md"),
            "guides/intro.md",
            base_package="com.example.pages",
            gen_dir=gen_dir,
        )

        assert unit.output_file == gen_dir / "guides" / "Intro.py"
        assert unit.package == "com.example.pages.guides"
        assert unit.artifact_name == "Intro"
        assert unit.function_name == "Intro"
        assert unit.route == "/guides/intro"
        assert unit.relative_path == "guides/intro.md"
        assert unit.source_file == Path("/site/markdown/guides/intro.md")

    def test_top_level_file(self):
        """Files at the root of a markdown folder use the base package unchanged."""
        unit = ConversionUnit.create("/md/about.md", "about.md", "pages", "/gen/pages", extension=".pyi")

        assert unit.output_file == Path("/gen/pages/About.pyi")
        assert unit.package == "pages"

    def test_windows_separators_are_normalized(self):
        """Relative paths always use forward slashes."""
        unit = ConversionUnit.create("/md/a/b/c.md", "a\\b\\c.md", "pages", "/gen")

        assert unit.relative_path == "a/b/c.md"
        assert unit.package == "pages.a.b"
        assert unit.output_file == Path("/gen/a/b/C.py")

    def test_units_are_immutable(self):
        """Conversion units are value objects."""
        unit = ConversionUnit.create("/md/a.md", "a.md", "pages", "/gen")

        with pytest.raises(AttributeError):
            unit.package = "other"


class TestNamingRules:
    """Test the individual naming helpers."""

    def test_package_for(self):
        """Directory separators become package separators."""
        assert package_for("docs/api/client.md", "site.pages") == "site.pages.docs.api"
        assert package_for("client.md", "site.pages") == "site.pages"
        assert package_for("docs/client.md", "") == "docs"

    def test_artifact_name_capitalizes_first_letter_only(self):
        """The file name keeps everything but the first letter as written."""
        assert artifact_name_for("intro.md") == "Intro"
        assert artifact_name_for("guides/gettingStarted.md") == "GettingStarted"
        assert artifact_name_for("my-page.md") == "My-page"

    def test_function_name_is_an_identifier(self):
        """Function names are TitleCamel identifiers."""
        assert function_name_for("intro.md") == "Intro"
        assert function_name_for("my-page.md") == "MyPage"
        assert function_name_for("release notes_v2.md") == "ReleaseNotesV2"
        assert function_name_for("2024-recap.md") == "Page2024Recap"

    def test_route_for(self):
        """Routes mirror the folder layout with kebab-case names."""
        assert route_for("intro.md") == "/intro"
        assert route_for("guides/GettingStarted.md") == "/guides/getting-started"
        assert route_for("index.md") == "/"
        assert route_for("guides/index.md") == "/guides/"

    def test_route_override(self):
        """Overrides replace the last segment, or the whole route when absolute."""
        assert route_for("guides/intro.md", "start") == "/guides/start"
        assert route_for("guides/intro.md", "/welcome") == "/welcome"
        assert route_for("intro.md", "start/") == "/start"

    def test_prefix_qualified_package(self):
        """Packages starting with a dot are relative to the project package."""
        assert prefix_qualified_package(".pages", "com.example") == "com.example.pages"
        assert prefix_qualified_package(".pages", "") == "pages"
        assert prefix_qualified_package("site.pages", "com.example") == "site.pages"
