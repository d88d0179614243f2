"""List command - shows which page module each markdown file maps to."""

import logging
import sys

from src.cli.config import Config
from src.markdown_converter.converter import MarkdownConverter

logger = logging.getLogger(__name__)


def list_command(config: Config):
    """Print the conversion units that `convert` would produce, without writing anything."""
    try:
        converter = MarkdownConverter(config.to_conversion_config())
        units = list(converter.discover_units())
    except Exception as e:
        logger.error(f"❌ Listing pages failed: {str(e)}")
        sys.exit(1)

    if not units:
        logger.warning("⚠️ No markdown files found")
        return

    for unit in units:
        print(f"{unit.relative_path} -> {unit.package}.{unit.artifact_name}:{unit.function_name} ({unit.route})")

    logger.info(f"📊 {len(units)} markdown files")
