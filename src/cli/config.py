"""Configuration management for the page generator CLI."""

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from src.markdown_converter.converter import ConversionConfig
from src.markdown_converter.handlers import MarkdownHandlers
from src.markdown_converter.parser import MarkdownFeatures


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


class Config:
    """Configuration loaded from .env file."""

    def __init__(self, env_file: Optional[str] = None):
        """Load configuration from .env file."""
        if env_file:
            load_dotenv(env_file)
        else:
            # Load from project root .env
            project_root = Path(__file__).parent.parent.parent
            env_path = project_root / ".env"
            if env_path.exists():
                load_dotenv(env_path)

        # Markdown sources
        self.markdown_resource_dirs = _split_list(os.getenv("MARKDOWN_RESOURCE_DIRS", "./resources/markdown"))
        self.generated_markdown_dirs = _split_list(os.getenv("GENERATED_MARKDOWN_DIRS", ""))
        self.markdown_file_extensions = _split_list(os.getenv("MARKDOWN_FILE_EXTENSIONS", ".md,.markdown"))
        self.skip_hidden_files = _flag("SKIP_HIDDEN_FILES", "true")

        # Generated pages
        self.gen_src_root = os.getenv("GEN_SRC_ROOT", "./build/generated/pages")
        self.pages_package = os.getenv("PAGES_PACKAGE", "pages")
        self.project_package = os.getenv("PROJECT_PACKAGE", "")
        self.clean_output = _flag("CLEAN_OUTPUT", "false")

        # Rendering
        self.markdown_default_root = os.getenv("MARKDOWN_DEFAULT_ROOT", "").strip() or None
        self.markdown_imports = _split_list(os.getenv("MARKDOWN_IMPORTS", ""))
        self.markdown_features = _split_list(
            os.getenv("MARKDOWN_FEATURES", "front_matter,tables,fenced_code,toc")
        )
        self.markdown_handlers = _split_list(os.getenv("MARKDOWN_HANDLERS", ""))

    def to_conversion_config(self, **overrides) -> ConversionConfig:
        """
        Build the settings for a conversion run.

        Args:
            **overrides: ConversionConfig fields that take precedence over the environment

        Returns:
            ConversionConfig for MarkdownConverter
        """
        settings = dict(
            resource_dirs=[Path(d) for d in self.markdown_resource_dirs],
            generated_markdown_dirs=[Path(d) for d in self.generated_markdown_dirs],
            gen_src_root=Path(self.gen_src_root),
            pages_package=self.pages_package,
            project_package=self.project_package,
            file_extensions=list(self.markdown_file_extensions),
            skip_hidden_files=self.skip_hidden_files,
            default_root=self.markdown_default_root,
            imports=list(self.markdown_imports),
            features=MarkdownFeatures.from_names(self.markdown_features),
            handlers=MarkdownHandlers.from_entries(self.markdown_handlers),
            clean_output=self.clean_output,
        )
        settings.update({key: value for key, value in overrides.items() if value is not None})
        return ConversionConfig(**settings)

    def ensure_output_dirs(self, gen_src_root: Optional[Path] = None):
        """Ensure the generated source root exists, defaulting to GEN_SRC_ROOT."""
        Path(gen_src_root or self.gen_src_root).mkdir(parents=True, exist_ok=True)
