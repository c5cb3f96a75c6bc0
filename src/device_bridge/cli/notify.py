"""CLI: device-bridge notify"""

import click
from rich.console import Console

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


@click.command("notify")
@click.argument("message_type")
@click.argument("message")
@click.pass_context
def notify(ctx, message_type, message):
    """Deliver a notification (1 = service config, 2 = device config)."""

    async def _notify():
        adapter = _get_adapter(ctx)
        try:
            await adapter.notification(message_type, message)
        finally:
            await adapter.close()

    try:
        _run(_notify())
    except BridgeError as e:
        _fail(e)
    console.print("[green]Notification accepted.[/green]")
