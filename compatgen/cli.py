"""Console script for compatgen."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__ as _version
from .constants import DEBUG_ENV_VAR
from .exceptions import CompatgenError
from .pipeline import compile_all, run
from .render_summary import render_query, render_summary
from .sources import load_sources
from .targets import parse_targets

_DATA_DIR_OPTION = click.option(
    "--data-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    required=True,
    help="Directory holding agents.json, prefixes.json, caniuse.json and mdn.json.",
)


def debug_enabled() -> bool:
    """Check debug mode env flag."""
    return os.environ.get(DEBUG_ENV_VAR, "").strip() == "1"


def _configure_logging(debug: bool) -> None:
    level = logging.DEBUG if debug or debug_enabled() else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(_version, "-v", "--version")
@click.option("--debug", is_flag=True, help="Log every compilation step.")
def main(debug: bool) -> None:
    """
    Compile browser compatibility data into prefix and feature tables

    \b
    Example usages:
      compatgen generate --data-dir data --out-dir .
      compatgen query border-radius --data-dir data -t safari=4 -t chrome=90
    """
    _configure_logging(debug)


@main.command()
@_DATA_DIR_OPTION
@click.option(
    "--out-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Root that src/ and node/ artifacts are written below.",
)
@click.option("--formatter", default="rustfmt", show_default=True, help="Formatter for .rs files.")
@click.option("--no-format", is_flag=True, help="Skip running the formatter.")
def generate(data_dir: Path, out_dir: Path, formatter: str, no_format: bool) -> None:
    """Compile the datasets and write every artifact."""
    command = None if no_format else tuple(formatter.split())
    try:
        compilation, written = run(data_dir, out_dir, formatter=command)
    except CompatgenError as exc:
        raise click.ClickException(str(exc)) from exc
    Console().print(render_summary(compilation, written))


@main.command()
@click.argument("name", metavar="<construct_or_feature>")
@_DATA_DIR_OPTION
@click.option(
    "-t",
    "--target",
    "target_pairs",
    multiple=True,
    required=True,
    help="Target browser as browser=version, repeatable.",
)
def query(name: str, data_dir: Path, target_pairs: tuple[str, ...]) -> None:
    """Show prefix and compatibility answers for one name."""
    try:
        targets = parse_targets(target_pairs)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--target") from exc

    try:
        compilation = compile_all(load_sources(data_dir))
    except CompatgenError as exc:
        raise click.ClickException(str(exc)) from exc
    Console().print(render_query(compilation, name, targets))
