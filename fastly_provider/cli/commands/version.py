# -*- coding: utf-8 -*-

import click

from fastly_provider import __version__
from fastly_provider.cli.commands.main import cli_start, console


@cli_start.command()
@click.option(
    "-s",
    "--short",
    "short",
    default=False,
    is_flag=True,
    required=False,
    help="Display only the short version number.",
)
def version(short: bool) -> None:
    """
    Displays the version of the provider package.
    """
    if short:
        console.print(__version__)
    else:
        console.print(f"fastly-provider version: {__version__}")
