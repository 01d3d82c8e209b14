# -*- coding: utf-8 -*-

import click
from rich.table import Table

from fastly_provider.cli.commands.main import cli_start, console
from fastly_provider.cli.utils import get_fastly_client, run_command
from fastly_provider.config.desired_state import DesiredState, load_desired_state
from fastly_provider.core.service import ServiceResource
from fastly_provider.core.utils.set_diff import DiffResult


def render_plan(service_id: str, plan: dict[str, DiffResult]) -> Table:
    table = Table(title=f"Planned changes for service {service_id}")
    table.add_column("Block")
    table.add_column("Action")
    table.add_column("Name")
    for key, diff in plan.items():
        for action, records in (
            ("create", diff.added),
            ("update", diff.modified),
            ("delete", diff.deleted),
        ):
            for record in records:
                table.add_row(key, action, record.get("name", ""))
    return table


def _block_config(service: ServiceResource, desired: DesiredState) -> dict[str, list]:
    return {key: desired.block(key) for key in service.keys}


@run_command
async def _plan(config_path: str) -> None:
    desired = load_desired_state(config_path)
    service = ServiceResource.for_service_type(desired.service_type)
    async with get_fastly_client() as client:
        d, _ = await service.refresh(
            desired.service_id, _block_config(service, desired), client
        )

    plan = service.plan(d)
    if all(diff.is_empty for diff in plan.values()):
        console.print("No changes. The service matches the configuration.")
        return
    console.print(render_plan(desired.service_id, plan))


@run_command
async def _apply(config_path: str, activate: bool) -> None:
    desired = load_desired_state(config_path)
    service = ServiceResource.for_service_type(desired.service_type)
    async with get_fastly_client() as client:
        d, detail = await service.refresh(
            desired.service_id, _block_config(service, desired), client
        )
        plan = service.plan(d)
        if not all(diff.is_empty for diff in plan.values()):
            console.print(render_plan(desired.service_id, plan))
        version = await service.apply(d, detail, client, activate=activate)

    if version is None:
        console.print("No changes. The service matches the configuration.")
    elif activate:
        console.print(f"Applied and activated version {version}")
    else:
        console.print(f"Applied to version {version}, activate it to go live")


@cli_start.command()
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False))
def plan(config_path: str) -> None:
    """
    Shows the logging endpoints that would be created, updated and deleted.

    CONFIG_PATH: Path to the desired state YAML file.
    """
    _plan(config_path)


@cli_start.command()
@click.argument("config_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "-a",
    "--activate",
    "activate",
    default=False,
    is_flag=True,
    help="Activate the new service version once the changes are applied.",
)
def apply(config_path: str, activate: bool) -> None:
    """
    Clones the service's active version and reconciles its logging endpoints with the configuration.

    CONFIG_PATH: Path to the desired state YAML file.
    """
    _apply(config_path, activate)
