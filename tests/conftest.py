import pytest
from click.testing import CliRunner

from markdown_html.config import MarkdownConfig
from markdown_html.models import ConversionContext


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture()
def ctx() -> ConversionContext:
    """Provides a fresh conversion context with default settings."""
    return ConversionContext.from_config(MarkdownConfig())
