"""Project sync and clean commands."""

import click

from dec.context import DecContext
from dec.error_boundary import cli_error_boundary
from dec.ide.adapters import get_ide_adapter
from dec.io.project_config import load_project_config
from dec.operations.project_sync import sync_project
from dec.operations.sync import clean_ide
from dec.output import user_output


@click.command()
@click.pass_obj
@cli_error_boundary
def sync(ctx: DecContext) -> None:
    """Regenerate IDE rule files and MCP config for the current project."""
    config = load_project_config(ctx.cwd)
    results, inputs = sync_project(ctx.cwd, config, ctx.resolver(), ctx.paths)

    for name, reason in sorted(inputs.problems.items()):
        user_output(click.style("! ", fg="yellow") + f"{name}: {reason}")

    for result in results:
        user_output(
            click.style("✓ ", fg="green")
            + f"{result.ide}: {len(result.rules_written)} rule(s), "
            + f"{len(result.mcp_servers)} MCP server(s) -> {result.mcp_config_path}"
        )
        for path in result.rules_removed:
            user_output(f"    removed {path.name}")


@click.command()
@click.pass_obj
@cli_error_boundary
def clean(ctx: DecContext) -> None:
    """Remove every dec-generated rule file and MCP entry from the project."""
    config = load_project_config(ctx.cwd)
    for ide in config.ides:
        result = clean_ide(get_ide_adapter(ide), ctx.cwd)
        user_output(f"{result.ide}: removed {len(result.rules_removed)} rule file(s)")
