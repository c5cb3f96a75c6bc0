"""CLI: device-bridge devices list|info|disconnect"""

import json

import click
from rich.console import Console
from rich.table import Table

from device_bridge.errors import BridgeError

console = Console()


def _get_adapter(ctx):
    from device_bridge.cli.main import _get_adapter
    return _get_adapter(ctx)


def _run(coro):
    from device_bridge.cli.main import _run
    return _run(coro)


def _fail(exc):
    from device_bridge.cli.main import _fail
    _fail(exc)


@click.group()
def devices():
    """Devices on the remote platform."""


@devices.command("list")
@click.option("--voucher", required=True, help="Voucher JSON")
@click.option("--service-identifier", default="")
@click.option("--page", default=1, type=int)
@click.option("--page-size", default=10, type=int)
@click.option("--json-output", "--json", is_flag=True)
@click.pass_context
def devices_list(ctx, voucher, service_identifier, page, page_size, json_output):
    """List devices for a voucher."""

    async def _list():
        adapter = _get_adapter(ctx)
        try:
            return await adapter.get_device_list(voucher, service_identifier, page, page_size)
        finally:
            await adapter.close()

    try:
        rsp = _run(_list())
    except BridgeError as e:
        _fail(e)
    if json_output:
        click.echo(json.dumps(rsp.model_dump(by_alias=True), indent=2, ensure_ascii=False))
        return
    table = Table(title=f"Devices ({rsp.data.total} total)")
    table.add_column("Number", style="bold")
    table.add_column("Name")
    table.add_column("Description")
    for d in rsp.data.items:
        table.add_row(d.device_number, d.device_name, d.description)
    console.print(table)


@devices.command("info")
@click.argument("device_code")
@click.option("--voucher", default="", help="Voucher JSON")
@click.option("--json-output", "--json", is_flag=True)
@click.pass_context
def devices_info(ctx, device_code, voucher, json_output):
    """Fetch (and bind) one device by its code."""

    async def _info():
        adapter = _get_adapter(ctx)
        try:
            return await adapter.get_device_info(device_code, voucher)
        finally:
            await adapter.close()

    try:
        rsp = _run(_info())
    except BridgeError as e:
        _fail(e)
    if json_output:
        click.echo(json.dumps(rsp.model_dump(), indent=2, ensure_ascii=False))
        return
    console.print(f"[bold]{rsp.data.device_name}[/bold] ({rsp.data.device_number})")
    if rsp.data.description:
        console.print(rsp.data.description)


@devices.command("disconnect")
@click.argument("device_id")
@click.pass_context
def devices_disconnect(ctx, device_id):
    """Clear a device from the cache and report it offline."""

    async def _disconnect():
        adapter = _get_adapter(ctx)
        try:
            await adapter.device_disconnect(device_id)
        finally:
            await adapter.close()

    try:
        _run(_disconnect())
    except BridgeError as e:
        _fail(e)
    console.print(f"[green]Device {device_id} reported offline.[/green]")
