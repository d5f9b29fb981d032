"""
Converts a Markdown file to HTML.
The HTML is printed to stdout, or written to the file given with --output.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from . import __version__
from .config import ConfigError, build_config
from .converter import convert_file
from .exceptions import ConvertFileError
from .filesystem import (
    collect_file_stat,
    enforce_file_size,
    get_max_file_size,
    normalize_filepath,
    write_output,
)

__all__ = ["cli"]

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


@click.command()
@click.version_option(version=__version__, prog_name="markdown-html")
@click.option("--tab-width", type=int, help="Number of spaces a tab stands for")
@click.option("--html", "html_output", is_flag=True, help="Emit HTML void elements (<br>)")
@click.option("--no-markup", is_flag=True, help="Escape raw HTML instead of passing it through")
@click.option("--no-entities", is_flag=True, help="Escape every ampersand, even in entities")
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the HTML to this file",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug messages to stderr")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    tab_width: int | None = None,
    html_output: bool = False,
    no_markup: bool = False,
    no_entities: bool = False,
    output: Path | None = None,
    verbose: bool = False,
):
    """
    Entry point for converting a Markdown file to HTML.

    Args:
        filepath: Path to the Markdown file to convert.
        tab_width: Override for the tab width.
        html_output: Emit ``<br>`` rather than ``<br />``.
        no_markup: Disable raw HTML pass-through.
        no_entities: Disable lenient ampersand handling.
        output: Destination file; stdout when omitted.
        verbose: Enable debug logging.

    Returns:
        None.

    Raises:
        click.BadParameter: If the path is not a Markdown file or the
            configuration is invalid.
        click.ClickException: If the file is too large, cannot be read or
            decoded, or the output cannot be written.

    Examples:
        markdown-html README.md --html -o README.html
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format=LOG_FORMAT)

    try:
        filepath = normalize_filepath(filepath)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error

    try:
        config = build_config(
            filepath.parent,
            tab_width=tab_width,
            self_closing_tags=False if html_output else None,
            no_markup=no_markup or None,
            no_entities=no_entities or None,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        max_file_size = get_max_file_size(default=config.max_file_size)
    except ValueError as error:
        raise click.ClickException(str(error)) from error

    try:
        file_stat = collect_file_stat(filepath)
        enforce_file_size(file_stat, max_file_size, filepath)
    except IOError as error:
        raise click.ClickException(str(error)) from error

    logger.debug("Converting %s (%d bytes)", filepath, file_stat.st_size)
    try:
        html = convert_file(filepath, config)
    except ConvertFileError as error:
        raise click.ClickException(str(error)) from error

    if output is None:
        click.echo(html, nl=False)
        return

    try:
        write_output(output, html)
    except IOError as error:
        raise click.ClickException(str(error)) from error
    logger.debug("Wrote %s", output)


if __name__ == "__main__":
    cli()
