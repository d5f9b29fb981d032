"""Markdown to HTML conversion entry points."""

from __future__ import annotations

import logging
from pathlib import Path

from .blocks import run_basic_block_gamut
from .config import ConfigError, MarkdownConfig, validate_config
from .exceptions import ConvertFileError
from .filesystem import safe_read
from .html_blocks import hash_html_blocks
from .link_refs import strip_link_definitions
from .models import ConversionContext
from .normalizer import normalize
from .protector import unprotect

logger = logging.getLogger(__name__)


class Markdown:
    """Reusable converter bound to a configuration.

    The instance only holds configuration. Every call to `convert` works on a
    fresh `ConversionContext`, so no state leaks between documents.

    Args:
        config: Conversion settings; defaults to `MarkdownConfig()`.

    Raises:
        ConfigError: If `config` holds invalid values.

    Examples:
        converter = Markdown(MarkdownConfig(self_closing_tags=False))
        converter("---")  # "<hr>\\n"
    """

    def __init__(self, config: MarkdownConfig | None = None):
        self.config = config or MarkdownConfig()
        validate_config(self.config)

    def convert(self, text: str) -> str:
        """Convert Markdown text to HTML.

        Args:
            text: Markdown source. Any text is accepted; constructs that do not
                parse are kept as literal text.

        Returns:
            str: HTML ending with exactly one newline.

        Examples:
            Markdown().convert("# Title")  # "<h1>Title</h1>\\n"
        """
        ctx = ConversionContext.from_config(self.config)
        try:
            text = normalize(text, self.config.tab_width)
            text = hash_html_blocks(ctx, text)
            text = strip_link_definitions(ctx, text)
            text = run_basic_block_gamut(ctx, text)
            text = unprotect(ctx, text)
            logger.debug("Converted document using %d protected region(s)", ctx.counter)
        finally:
            ctx.clear()

        return text.rstrip("\n") + "\n"

    __call__ = convert


def markdown(text: str, config: MarkdownConfig | None = None) -> str:
    """Convert Markdown text to HTML with a one-off converter.

    Examples:
        markdown("*hello*")  # "<p><em>hello</em></p>\\n"
    """
    return Markdown(config).convert(text)


def convert_file(filepath: Path, config: MarkdownConfig | None = None) -> str:
    """Read a Markdown file and convert it to HTML.

    Args:
        filepath: Path to the Markdown file.
        config: Conversion settings; defaults to `MarkdownConfig()`.

    Returns:
        str: HTML ending with exactly one newline.

    Raises:
        ConvertFileError: If the configuration is invalid or the file cannot be
            read or decoded as UTF-8.

    Examples:
        html = convert_file(Path("README.md"))
    """
    try:
        converter = Markdown(config)
    except ConfigError as error:
        raise ConvertFileError(str(error)) from error

    try:
        with safe_read(filepath) as file:
            content = file.read()
    except UnicodeDecodeError as error:
        error_message = f"Invalid UTF-8 sequence in {filepath}: {error}"
        raise ConvertFileError(error_message) from error
    except IOError as error:
        raise ConvertFileError(str(error)) from error

    logger.debug("Read %d characters from %s", len(content), filepath)
    return converter.convert(content)
