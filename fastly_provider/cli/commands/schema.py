# -*- coding: utf-8 -*-

import json

import click

from fastly_provider.cli.commands.main import cli_start
from fastly_provider.core.models import ServiceType
from fastly_provider.core.service import ServiceResource


@cli_start.command()
@click.option(
    "-t",
    "--service-type",
    "service_type",
    type=click.Choice([service_type.value for service_type in ServiceType]),
    default=ServiceType.VCL.value,
    help="The type of service to print the schema for.",
)
def schema(service_type: str) -> None:
    """
    Prints the schema of the service resource as JSON.
    """
    service = ServiceResource.for_service_type(service_type)
    click.echo(json.dumps(service.resource.describe(), indent=2))
