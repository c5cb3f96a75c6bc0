"""CLI: device-bridge forms show"""

import json

import click

from device_bridge.errors import BridgeError


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
def forms():
    """Form configuration."""


@forms.command("show")
@click.argument("form_type")
@click.option("--protocol-type", default="", help="Protocol type reported by the host")
@click.option("--device-type", default="", help="Device type reported by the host")
@click.pass_context
def forms_show(ctx, form_type, protocol_type, device_type):
    """Print the schema for FORM_TYPE (CFG, VCR or SVCR)."""

    async def _show():
        adapter = _get_adapter(ctx)
        try:
            return await adapter.get_form_config(protocol_type, device_type, form_type)
        finally:
            await adapter.close()

    try:
        schema = _run(_show())
    except BridgeError as e:
        _fail(e)
    click.echo(json.dumps(schema, indent=2, ensure_ascii=False))
