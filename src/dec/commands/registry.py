"""Registry maintenance commands: update, link, unlink."""

from pathlib import Path

import click

from dec.context import DecContext
from dec.error_boundary import cli_error_boundary
from dec.output import user_output


@click.command()
@click.pass_obj
@cli_error_boundary
def update(ctx: DecContext) -> None:
    """Fetch the latest official registry."""
    resolver = ctx.resolver()
    user_output(f"Fetching {ctx.global_config.registry_url}...")
    registry = resolver.update_official()
    user_output(click.style("✓ ", fg="green") + f"Registry has {len(registry.packs)} package(s)")


@click.command()
@click.argument("path", required=False, type=click.Path(path_type=Path))
@click.option("--name", "-n", help="Package name (defaults to the directory name)")
@click.option("--version", "version", default="dev", show_default=True, help="Version to report")
@click.option(
    "--type",
    "pack_type",
    type=click.Choice(["rule", "mcp"]),
    default="rule",
    show_default=True,
    help="Package type",
)
@click.option("--list", "list_links", is_flag=True, help="List linked packages")
@click.pass_obj
@cli_error_boundary
def link(
    ctx: DecContext,
    path: Path | None,
    name: str | None,
    version: str,
    pack_type: str,
    list_links: bool,
) -> None:
    """Resolve a package from a local development directory.

    Examples:

        dec link ./my-rules

        dec link ../pg-mcp --name postgres --type mcp
    """
    resolver = ctx.resolver()

    if list_links:
        linked = resolver.list_linked_packs()
        if not linked:
            user_output("No linked packages")
            return
        for pack in linked:
            user_output(f"  {pack.name:<24} {pack.type:<5} {pack.local_path}")
        return

    if path is None:
        raise click.UsageError("PATH is required unless --list is given")

    target = path if path.is_absolute() else ctx.cwd / path
    pack_name = name or target.resolve().name
    pack = resolver.link_pack(pack_name, target, version, "mcp" if pack_type == "mcp" else "rule")
    user_output(click.style("✓ ", fg="green") + f"Linked {pack.name} -> {pack.local_path}")


@click.command()
@click.argument("name", required=False)
@click.option("--all", "unlink_everything", is_flag=True, help="Remove every link")
@click.pass_obj
@cli_error_boundary
def unlink(ctx: DecContext, name: str | None, unlink_everything: bool) -> None:
    """Stop resolving a package from its local directory."""
    resolver = ctx.resolver()
    if unlink_everything:
        count = resolver.unlink_all()
        user_output(f"Removed {count} link(s)")
        return

    if name is None:
        raise click.UsageError("NAME is required unless --all is given")
    resolver.unlink_pack(name)
    user_output(click.style("✓ ", fg="green") + f"Unlinked {name}")
