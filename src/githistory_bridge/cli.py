"""githistory-bridge CLI.

Usage:
    githistory-bridge commands                 # List the command table
    githistory-bridge commands --format json
    githistory-bridge config                   # Show effective settings
    githistory-bridge config --config bridge.yaml
"""

from __future__ import annotations

import json

import click
import pydantic

from .config import configure_logging, load_settings
from .protocol import CommandType

FORMAT_TABLE = "table"
FORMAT_JSON = "json"

_format_option = click.option(
    "--format",
    "output_format",
    type=click.Choice([FORMAT_TABLE, FORMAT_JSON]),
    default=FORMAT_TABLE,
    help="Output format",
)


@click.group()
@click.option("--log-level", default=None, help="Override the configured log level")
@click.pass_context
def main(ctx: click.Context, log_level: str | None) -> None:
    """Inspect the git history webview bridge."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level


@main.command("commands")
@_format_option
def list_commands(output_format: str) -> None:
    """List the commands the controller understands."""
    names = sorted(command.value for command in CommandType)
    if output_format == FORMAT_JSON:
        click.echo(json.dumps(names))
        return
    for name in names:
        click.echo(name)


@main.command("config")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML settings file",
)
@_format_option
@click.pass_context
def show_config(ctx: click.Context, config_path: str | None, output_format: str) -> None:
    """Show the effective settings (file, then environment)."""
    try:
        settings = load_settings(config_path)
    except (pydantic.ValidationError, ValueError) as e:
        raise click.ClickException(f"Invalid settings: {e}") from e

    configure_logging(ctx.obj.get("log_level") or settings.log_level)

    data = settings.model_dump()
    if data.get("github_token"):
        data["github_token"] = "***"

    if output_format == FORMAT_JSON:
        click.echo(json.dumps(data, indent=2))
        return

    width = max(len(key) for key in data)
    for key, value in data.items():
        click.echo(f"{key:<{width}}  {value}")


if __name__ == "__main__":
    main()
