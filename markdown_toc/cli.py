"""
Generates, refreshes, deletes, and follows a Markdown table of contents.
"""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import click

from .config import ConfigError, RenderConfig, build_config
from .document import delete_toc, follow_link, refresh_if_present, refresh_toc
from .filesystem import (
    MAX_FILE_SIZE_ENV_VAR,
    MAX_LINE_LENGTH_ENV_VAR,
    env_limit,
    replace_source,
    resolve_markdown_path,
)
from .generator import generate_toc
from .logging import configure_logging, get_logger
from .models import TocUpdate
from .parser import ParseFileError, parse_file

__all__ = ["cli"]

logger = get_logger("cli")


_CONFIG_OPTIONS = (
    click.option("--start-marker", help="TOC start marker (empty string for none)"),
    click.option("--end-marker", help="TOC end marker (empty string for none)"),
    click.option("--title-line", help="Line placed above the TOC entries"),
    click.option("--list-marker", help="List marker (e.g. -, *, 1.)"),
    click.option("--indent-unit", type=click.IntRange(min=0), help="Spaces per nesting level"),
    click.option(
        "--quote/--no-quote", "quote_lines", default=None, help="Render entries as a blockquote"
    ),
    click.option("--min-level", type=int, help="Minimum heading level"),
    click.option("--max-level", type=int, help="Maximum heading level"),
)


def config_options(command):
    """Attach the configuration override options shared by every command."""
    for option in reversed(_CONFIG_OPTIONS):
        command = option(command)
    return command


class _Session:
    """A validated Markdown file read for processing."""

    def __init__(self, raw_path: str, overrides: dict[str, object]):
        try:
            filepath = resolve_markdown_path(raw_path, Path.cwd().resolve())
        except ValueError as error:
            raise click.BadParameter(str(error)) from error

        try:
            config = build_config(filepath.parent, **overrides)
        except ConfigError as error:
            raise click.BadParameter(str(error)) from error

        try:
            self.config: RenderConfig = replace(
                config,
                max_file_size=env_limit(MAX_FILE_SIZE_ENV_VAR, config.max_file_size),
                max_line_length=env_limit(MAX_LINE_LENGTH_ENV_VAR, config.max_line_length),
            )
        except ValueError as error:
            raise click.ClickException(str(error)) from error

        try:
            self.source, self.result = parse_file(filepath, self.config)
        except ParseFileError as error:
            raise click.ClickException(str(error)) from error

    @property
    def content(self) -> str:
        return self.source.text

    def save(self, update: TocUpdate) -> None:
        if update.content == self.content:
            logger.debug("%s already up to date", self.source.path)
            return
        try:
            replace_source(
                self.source, update.content, warn=lambda message: click.echo(message, err=True)
            )
        except OSError as error:
            raise click.ClickException(str(error)) from error
        logger.debug("%s: TOC %s", self.source.path, update.action)

    def offset_of_line(self, line_number: int) -> int:
        lines = self.result.lines
        if not 1 <= line_number <= len(lines) + 1:
            raise click.BadParameter(
                f"line {line_number} is outside of {self.source.path} ({len(lines)} lines)"
            )
        return sum(len(line) for line in lines[: line_number - 1])


@click.group()
@click.version_option(package_name="markdown-toc")
@click.option("-v", "--verbose", is_flag=True, help="Log debug details to stderr")
def cli(verbose: bool):
    """
    Maintain a table of contents inside Markdown files.

    Examples:
        markdown-toc refresh README.md --indent-unit 4
    """
    configure_logging(verbose=verbose)


@cli.command()
@config_options
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def generate(filepath: str, **overrides: object):
    """Print a freshly rendered TOC for FILEPATH to stdout."""
    session = _Session(filepath, overrides)
    click.echo(generate_toc(session.result.outline, session.config), nl=False)


@cli.command()
@config_options
@click.option(
    "--line",
    "line_number",
    type=click.IntRange(min=1),
    default=1,
    show_default=True,
    help="Line before which a new TOC is inserted when none exists",
)
@click.option("--if-present", is_flag=True, help="Only replace an existing TOC")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def refresh(filepath: str, line_number: int, if_present: bool, **overrides: object):
    """Replace the TOC in FILEPATH, inserting one when it has none."""
    session = _Session(filepath, overrides)
    if if_present:
        update = refresh_if_present(session.content, session.config)
    else:
        position = session.offset_of_line(line_number)
        update = refresh_toc(session.content, session.config, position=position)
    session.save(update)


@cli.command()
@config_options
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def delete(filepath: str, **overrides: object):
    """Remove the TOC from FILEPATH."""
    session = _Session(filepath, overrides)
    update = delete_toc(session.content, session.config)
    if update.action == "unchanged":
        click.echo(f"No table of contents found in {session.source.path}", err=True)
        return
    session.save(update)


@cli.command()
@config_options
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
@click.argument("line_number", metavar="LINE", type=click.IntRange(min=1))
def follow(filepath: str, line_number: int, **overrides: object):
    """Print the line number of the heading targeted by the TOC entry on LINE."""
    session = _Session(filepath, overrides)
    target = follow_link(session.content, session.offset_of_line(line_number), session.config)
    if target is None:
        raise click.ClickException(f"No heading found for line {line_number}")
    click.echo(session.content.count("\n", 0, target) + 1)


if __name__ == "__main__":
    cli()
