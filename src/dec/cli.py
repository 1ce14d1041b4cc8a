import logging

import click

from dec import __version__
from dec.commands.install import install, uninstall
from dec.commands.list_cmd import info, list_packs, search
from dec.commands.registry import link, unlink, update
from dec.commands.sync import clean, sync
from dec.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])


def _configure_logging(debug: bool) -> None:
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(version=__version__)
@click.option("--debug", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Install IDE rule packs and MCP servers, and sync them into projects."""
    _configure_logging(debug)
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context(debug=debug)


cli.add_command(install)
cli.add_command(uninstall)
cli.add_command(list_packs)
cli.add_command(search)
cli.add_command(info)
cli.add_command(update)
cli.add_command(link)
cli.add_command(unlink)
cli.add_command(sync)
cli.add_command(clean)


def main() -> None:
    """CLI entry point used by the `dec` console script."""
    cli()
