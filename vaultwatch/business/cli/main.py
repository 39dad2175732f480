"""
CLI Main Entry Point

Built with Click.
"""

import click

from vaultwatch.business.cli.commands.risk import risk
from vaultwatch.business.cli.commands.search import search
from vaultwatch.business.cli.commands.snapshot import snapshot


@click.group()
@click.version_option(version="0.1.0", prog_name="vaultwatch")
def cli() -> None:
    """Vault watch - snapshot sync and strategy risk groups

    Fetches vault and strategy data, keeps a local snapshot and scores
    configured risk groups.
    """
    pass


cli.add_command(snapshot)
cli.add_command(risk)
cli.add_command(search)


if __name__ == "__main__":
    cli()
