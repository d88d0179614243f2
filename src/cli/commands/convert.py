"""Convert command - turns markdown resources into generated page modules."""

import logging
import sys
from pathlib import Path
from typing import List, Optional

from src.cli.config import Config
from src.markdown_converter.converter import MarkdownConverter

logger = logging.getLogger(__name__)


def convert_command(
    config: Config,
    resource_dirs: Optional[List[str]] = None,
    generated_dirs: Optional[List[str]] = None,
    gen_root: Optional[str] = None,
    package: Optional[str] = None,
    clean: bool = False,
):
    """Convert all markdown resources into page modules."""
    logger.info("🔄 Starting markdown conversion...")

    try:
        conversion_config = config.to_conversion_config(
            resource_dirs=[Path(d) for d in resource_dirs] if resource_dirs else None,
            generated_markdown_dirs=[Path(d) for d in generated_dirs] if generated_dirs else None,
            gen_src_root=Path(gen_root) if gen_root else None,
            pages_package=package,
            clean_output=True if clean else None,
        )

        for directory in conversion_config.resource_dirs:
            logger.info(f"📁 Markdown directory: {directory}")
        for directory in conversion_config.generated_markdown_dirs:
            logger.info(f"📁 Generated markdown directory: {directory}")
        logger.info(f"📦 Pages package: {conversion_config.qualified_package or '<root>'}")
        logger.info(f"💾 Output directory: {conversion_config.gen_dir}")

        # Ensure the generated source root exists
        config.ensure_output_dirs(conversion_config.gen_src_root)

        converter = MarkdownConverter(conversion_config)
        units = converter.convert()

    except Exception as e:
        logger.error(f"❌ Conversion failed: {str(e)}")
        sys.exit(1)

    if not units:
        logger.warning("⚠️ No markdown files found")
        return

    logger.info(f"✅ Generated {len(units)} pages in {conversion_config.gen_dir}")
