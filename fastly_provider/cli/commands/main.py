# -*- coding: utf-8 -*-

import click
from rich.console import Console

from fastly_provider.config.settings import ApplicationSettings, LogLevelType
from fastly_provider.log.logger_setup import setup_logger

console = Console()


@click.group
@click.option(
    "-l",
    "--log-level",
    "log_level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="""Set the logging level.
            Supported levels are DEBUG, INFO, WARNING, ERROR,
            and CRITICAL. If not specified, the environment variable
            `APPLICATION__LOG_LEVEL` is used, and if not set, INFO.""",
)
def cli_start(log_level: LogLevelType | None) -> None:
    # Provider root command
    setup_logger(log_level or ApplicationSettings().log_level)
