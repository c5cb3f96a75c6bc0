"""
device-bridge CLI: drive the plugin callbacks by hand.

Commands:
  device-bridge forms show <form-type>        Print a form schema
  device-bridge devices list --voucher ...    List devices on the remote platform
  device-bridge devices info <code> ...       Fetch one device
  device-bridge devices disconnect <id>       Clear cache and push offline status
  device-bridge notify <type> <message>       Deliver a host notification
"""

import asyncio
import json

try:
    import click
    from rich.console import Console
except ImportError:
    raise SystemExit("CLI requires extras: pip install device-bridge[cli]")

from device_bridge import __version__
from device_bridge.adapter import AsyncDeviceAdapter
from device_bridge.config import BridgeConfig, configure_logging, load_config
from device_bridge.errors import BridgeError
from device_bridge.responses import error_response

console = Console()


def _get_adapter(ctx: click.Context) -> AsyncDeviceAdapter:
    return AsyncDeviceAdapter(ctx.obj["config"])


def _run(coro):
    return asyncio.run(coro)


def _fail(exc: BridgeError) -> None:
    rsp = error_response(exc)
    click.echo(json.dumps(rsp.model_dump(), ensure_ascii=False))
    raise SystemExit(1)


@click.group()
@click.version_option(__version__)
@click.option("--config", "config_file", default=None, type=click.Path(dir_okay=False),
              help="Path to config.json")
@click.option("--log-level", default=None, help="Override log.level from the config")
@click.pass_context
def main(ctx, config_file, log_level):
    """device-bridge: host plugin callbacks backed by a remote device platform."""
    try:
        cfg: BridgeConfig = load_config(config_file)
    except BridgeError as e:
        _fail(e)
    configure_logging(log_level or cfg.log.level)
    ctx.obj = {"config": cfg}


# Register subcommands from separate modules
from device_bridge.cli.devices import devices
from device_bridge.cli.forms import forms
from device_bridge.cli.notify import notify

main.add_command(devices)
main.add_command(forms)
main.add_command(notify)


if __name__ == "__main__":
    main()
