"""Install and uninstall commands."""

import click

from dec.context import DecContext
from dec.error_boundary import cli_error_boundary
from dec.output import user_output


@click.command()
@click.argument("names", nargs=-1, required=True)
@click.option("--force", "-f", is_flag=True, help="Reinstall even if already up to date")
@click.pass_obj
@cli_error_boundary
def install(ctx: DecContext, names: tuple[str, ...], force: bool) -> None:
    """Install packages (and their dependencies) from the registries.

    Examples:

        dec install go-style

        dec install go-style postgres-mcp --force
    """
    resolver = ctx.resolver()
    if not resolver.has_official_cache():
        user_output("No registry cache yet; run 'dec update' to fetch the official registry")

    installer = ctx.installer(resolver)
    result = installer.install_many(names, force=force)

    for name in result.installed:
        version = installer.get_installed_version(name) or "?"
        user_output(click.style("✓ ", fg="green") + f"Installed {name} v{version}")
    for name in result.skipped:
        user_output(f"• Skipped {name} (up to date or linked)")
    for name, reason in sorted(result.failed.items()):
        user_output(click.style("✗ ", fg="red") + f"{name}: {reason}")

    user_output(
        f"\n{len(result.installed)} installed, {len(result.skipped)} skipped, "
        f"{len(result.failed)} failed"
    )
    result.raise_for_failures()


@click.command()
@click.argument("names", nargs=-1, required=True)
@click.pass_obj
@cli_error_boundary
def uninstall(ctx: DecContext, names: tuple[str, ...]) -> None:
    """Remove installed packages and their executables."""
    installer = ctx.installer(ctx.resolver())
    for name in names:
        if installer.uninstall(name):
            user_output(click.style("✓ ", fg="green") + f"Uninstalled {name}")
        else:
            user_output(f"• {name} is not installed")
