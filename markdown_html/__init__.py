"""
markdown-html: Markdown to HTML converter.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    markdown-html README.md -o README.html

Library Usage:
    from pathlib import Path
    from markdown_html import Markdown, MarkdownConfig, markdown

    html = markdown("# Title")
    converter = Markdown(MarkdownConfig(self_closing_tags=False))
    html = converter(Path("README.md").read_text())
"""

__version__ = "0.1.0"

from .config import ConfigError, MarkdownConfig, build_config
from .converter import Markdown, convert_file, markdown
from .exceptions import ConvertFileError, MarkdownError, PlaceholderError

__all__ = [
    # Core functionality
    "markdown",
    "Markdown",
    "convert_file",
    # Configuration
    "MarkdownConfig",
    "build_config",
    # Exceptions
    "ConfigError",
    "ConvertFileError",
    "MarkdownError",
    "PlaceholderError",
    # Version
    "__version__",
]
