"""
Snapshot Command - refresh and show the vault snapshot
"""

import json
import logging
from datetime import datetime, timezone
from typing import Optional

import click

from vaultwatch.business.cli.commands.common import setup_logging, sync_snapshot
from vaultwatch.data.models import DataSource, Snapshot

logger = logging.getLogger(__name__)


@click.command()
@click.option("--chain", "-n", type=int, default=1, show_default=True, help="Chain id")
@click.option("--revalidate", "-r", is_flag=True, help="Bypass upstream caches")
@click.option("--offline", is_flag=True, help="Show the persisted snapshot without fetching")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="Watch settings YAML path",
)
@click.option(
    "--output",
    "-o",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logs")
def snapshot(
    chain: int,
    revalidate: bool,
    offline: bool,
    config: Optional[str],
    output: str,
    verbose: bool,
) -> None:
    """Refresh the snapshot of a chain and summarize it

    \b
    Examples:
      vaultwatch snapshot
      vaultwatch snapshot -n 250 --revalidate
      vaultwatch snapshot -o json
    """
    setup_logging(verbose)
    result = sync_snapshot(chain, revalidate, config, offline)

    if output == "json":
        click.echo(json.dumps(result.to_dict(), indent=2, default=str))
    else:
        _output_text(result)


def _output_text(result: Snapshot) -> None:
    updated = (
        datetime.fromtimestamp(result.last_update / 1000, tz=timezone.utc).isoformat()
        if result.last_update
        else "never"
    )
    strategies = sum(1 for _ in result.strategies())
    tvl = sum(v.total_debt_usdc for v in result.vaults)

    click.echo(f"Last update: {updated}")
    click.echo(f"Vaults: {len(result.vaults)} | Strategies: {strategies} | Debt: ${tvl:,.0f}")
    click.echo()

    network = result.network
    click.echo("Network health:")
    for source in DataSource:
        state = "up" if network.status.get(source) == 1 else "DOWN"
        click.echo(f"   {source.value:<6} {state}")
    click.echo(f"   block {network.block_number} | graph block {network.graph_block_number}")
    if network.has_graph_indexing_errors:
        click.echo("   subgraph reports indexing errors")
