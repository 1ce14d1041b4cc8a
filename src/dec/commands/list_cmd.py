"""Commands for browsing the registries."""

import click
from rich.table import Table

from dec.context import DecContext
from dec.error_boundary import cli_error_boundary
from dec.errors import PackNotFoundError
from dec.models.registry import ResolvedPack
from dec.output import print_table, user_output
from dec.packages import placeholder


def _packs_table(packs: list[ResolvedPack]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("name", style="cyan", no_wrap=True)
    table.add_column("version", no_wrap=True)
    table.add_column("type", no_wrap=True)
    table.add_column("source", no_wrap=True)
    table.add_column("installed", no_wrap=True)
    table.add_column("description")
    for pack in packs:
        meta = pack.metadata
        table.add_row(
            meta.name,
            meta.version or "-",
            meta.type,
            pack.source,
            "yes" if pack.is_installed else "",
            meta.description,
        )
    return table


@click.command(name="list")
@click.option("--installed", is_flag=True, help="Only show installed packages")
@click.pass_obj
@cli_error_boundary
def list_packs(ctx: DecContext, installed: bool) -> None:
    """List every package known to the registries."""
    packs = ctx.resolver().list_all_packs()
    if installed:
        packs = [pack for pack in packs if pack.is_installed]

    if not packs:
        user_output("No packages found. Run 'dec update' to fetch the registry.")
        return
    print_table(_packs_table(packs))


@click.command()
@click.argument("keyword")
@click.pass_obj
@cli_error_boundary
def search(ctx: DecContext, keyword: str) -> None:
    """Search package names and descriptions."""
    packs = ctx.resolver().search_packs(keyword)
    if not packs:
        user_output(f"No packages match '{keyword}'")
        return
    print_table(_packs_table(packs))


@click.command()
@click.argument("name")
@click.pass_obj
@cli_error_boundary
def info(ctx: DecContext, name: str) -> None:
    """Show details and configurable variables of a package."""
    resolver = ctx.resolver()
    resolved = resolver.resolve_pack(name)
    if resolved is None:
        raise PackNotFoundError(name)

    meta = resolved.metadata
    user_output(click.style(meta.name, bold=True) + f" v{meta.version or '-'} ({meta.type})")
    if meta.description:
        user_output(f"  {meta.description}")
    user_output(f"  source:    {resolved.source}")
    user_output(f"  path:      {resolved.install_path}")
    installed_version = ctx.installer(resolver).get_installed_version(name)
    user_output(f"  installed: {installed_version or 'no'}")
    if meta.dependencies:
        user_output(f"  requires:  {', '.join(meta.dependencies)}")

    if meta.config_schema:
        user_output("\n  variables:")
        for key, field in sorted(meta.config_schema.items()):
            default = "" if field.default is None else f" (default: {field.default})"
            user_output(f"    {key}: {field.description or field.type}{default}")

    if meta.mcp is not None:
        template = " ".join([meta.mcp.command, *meta.mcp.args, *meta.mcp.env.values()])
        defaults = placeholder.extract_default_vars(template)
        if defaults:
            user_output("\n  MCP placeholder defaults:")
            for line in _flatten(defaults):
                user_output(f"    {line}")


def _flatten(tree: dict, prefix: str = "") -> list[str]:
    lines: list[str] = []
    for key in sorted(tree):
        value = tree[key]
        path = f"{prefix}{key}"
        if isinstance(value, dict):
            lines.extend(_flatten(value, f"{path}."))
        else:
            lines.append(f"{path} = {value}")
    return lines
