"""Command-line interface for the openFDA MCP server tools."""

import asyncio
import json
import logging
import sys
from typing import Optional

import click

from .config import load_config
from .api_client import OpenFDAAPIError
from .logging_utils import setup_logging
from .mcp_server import OpenFDAMCPServer
from .mcp_server.config import ALL_TOOL_SCHEMAS, TOOL_CATEGORIES
from .mcp_server.validation import ToolValidationError
from .utils.request_context import generate_request_id, set_request_id


async def _call_tool(app_config, name: str, arguments: str) -> str:
    server = OpenFDAMCPServer(app_config)
    await server.initialize()
    try:
        content = await server.tool_registry.dispatch(name, arguments)
    finally:
        await server.shutdown()
    return content[0].text


@click.group()
@click.option(
    "--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR)"
)
@click.option(
    "--config", "--config-file", help="Path to configuration file (YAML or JSON)"
)
@click.pass_context
def cli(ctx, log_level: Optional[str], config: Optional[str]):
    """openFDA drug label tools from the command line."""
    ctx.ensure_object(dict)

    request_id = generate_request_id()
    set_request_id(request_id)
    ctx.obj["request_id"] = request_id

    try:
        app_config = load_config(config_file=config)
    except Exception as e:
        click.echo(f"❌ Error: {e}", err=True)
        sys.exit(1)
    ctx.obj["config"] = app_config

    # CLI flag overrides config
    setup_logging(log_level or app_config.log_level, include_request_id=True)


@cli.command("tools")
@click.option("--category", type=click.Choice(sorted(TOOL_CATEGORIES)), help="Only list one category")
@click.option("--json", "as_json", is_flag=True, help="Print the full tool schemas as JSON")
def list_tools(category: Optional[str], as_json: bool):
    """List available tools."""
    names = TOOL_CATEGORIES[category] if category else list(ALL_TOOL_SCHEMAS)

    if as_json:
        click.echo(json.dumps([ALL_TOOL_SCHEMAS[name] for name in names], indent=2))
        return

    for name in names:
        click.echo(f"{name}: {ALL_TOOL_SCHEMAS[name]['description']}")


@cli.command("call")
@click.argument("name")
@click.argument("arguments", default="{}")
@click.pass_context
def call_tool(ctx, name: str, arguments: str):
    """Invoke tool NAME with ARGUMENTS given as a JSON object.

    Example: openfda-mcp call get_label_by_drug_name '{"name": "ibuprofen", "limit": 3}'
    """
    logger = logging.getLogger(__name__)

    try:
        text = asyncio.run(_call_tool(ctx.obj["config"], name, arguments))
    except ToolValidationError as e:
        click.echo(f"❌ Invalid call: {e}", err=True)
        sys.exit(2)
    except OpenFDAAPIError as e:
        logger.debug(f"Upstream failure for {name}: {e}")
        click.echo(f"❌ {e}", err=True)
        sys.exit(1)

    click.echo(text)


@cli.command("health")
@click.pass_context
def health(ctx):
    """Check connectivity with openFDA."""
    text = asyncio.run(_call_tool(ctx.obj["config"], "health", "{}"))
    click.echo(text)
    if text != "ok":
        sys.exit(1)


if __name__ == "__main__":
    cli()
