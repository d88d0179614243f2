"""Tests for the pagegen command line."""

import pytest

from src.cli.main import build_parser, main


@pytest.fixture
def project(tmp_path, monkeypatch):
    """A project with two markdown pages and an .env file pointing at them."""
    for name in ("MARKDOWN_RESOURCE_DIRS", "GENERATED_MARKDOWN_DIRS", "GEN_SRC_ROOT", "PAGES_PACKAGE"):
        monkeypatch.delenv(name, raising=False)
    markdown_dir = tmp_path / "markdown"
    (markdown_dir / "guides").mkdir(parents=True)
    (markdown_dir / "index.md").write_text("# Home\n\n[Intro](guides/intro.md)")
    (markdown_dir / "guides" / "intro.md").write_text("# Intro")
    env_file = tmp_path / ".env"
    env_file.write_text("")
    return markdown_dir, tmp_path / "gen", env_file


class TestParser:
    """Test argument parsing."""

    def test_convert_arguments(self):
        """Convert accepts several resource directories and a clean flag."""
        args = build_parser().parse_args(["convert", "--resources", "a", "b", "--clean", "--package", "site"])

        assert args.command == "convert"
        assert args.resources == ["a", "b"]
        assert args.clean is True
        assert args.package == "site"
        assert args.generated is None


class TestMain:
    """Test running commands end to end."""

    def test_convert(self, project):
        """Convert writes one page module per markdown file."""
        markdown_dir, gen_root, env_file = project

        main([
            "convert",
            "--config", str(env_file),
            "--resources", str(markdown_dir),
            "--gen-root", str(gen_root),
            "--package", "site.pages",
        ])

        assert (gen_root / "site" / "pages" / "Index.py").exists()
        assert (gen_root / "site" / "pages" / "guides" / "Intro.py").exists()

    def test_convert_failure_exits_with_error(self, project):
        """A broken markdown file makes the command exit with status 1."""
        markdown_dir, gen_root, env_file = project
        (markdown_dir / "broken.md").write_text("---\ntitle: [unclosed\n---\n")

        with pytest.raises(SystemExit) as exc_info:
            main(["convert", "--config", str(env_file), "--resources", str(markdown_dir), "--gen-root", str(gen_root)])

        assert exc_info.value.code == 1

    def test_list(self, project, monkeypatch, capsys):
        """List prints where each page would be generated without writing anything."""
        markdown_dir, gen_root, env_file = project
        monkeypatch.setenv("MARKDOWN_RESOURCE_DIRS", str(markdown_dir))
        monkeypatch.setenv("GEN_SRC_ROOT", str(gen_root))

        main(["list", "--config", str(env_file)])

        output = capsys.readouterr().out.splitlines()
        assert output == [
            "guides/intro.md -> pages.guides.Intro:Intro (/guides/intro)",
            "index.md -> pages.Index:Index (/)",
        ]
        assert not gen_root.exists()

    def test_no_command_prints_help(self, capsys):
        """Running without a command shows usage."""
        main([])

        assert "pagegen" in capsys.readouterr().out

    def test_convert_creates_generated_root(self, tmp_path, project):
        """The generated source root exists after convert even without markdown."""
        _, gen_root, env_file = project
        empty = tmp_path / "empty"
        empty.mkdir()

        main(["convert", "--config", str(env_file), "--resources", str(empty), "--gen-root", str(gen_root)])

        assert gen_root.is_dir()

    def test_list_failure_exits_with_error(self, project, monkeypatch):
        """Colliding page names make list exit with status 1."""
        markdown_dir, _, env_file = project
        (markdown_dir / "index.markdown").write_text("# Duplicate")
        monkeypatch.setenv("MARKDOWN_RESOURCE_DIRS", str(markdown_dir))

        with pytest.raises(SystemExit) as exc_info:
            main(["list", "--config", str(env_file)])

        assert exc_info.value.code == 1
