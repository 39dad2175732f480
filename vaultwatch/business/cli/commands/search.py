"""
Search Command - free-text vault search
"""

import logging
from typing import Optional

import click

from vaultwatch.business.cli.commands.common import setup_logging, sync_snapshot
from vaultwatch.engine.filters import filter_vaults, summarize_vaults

logger = logging.getLogger(__name__)


@click.command()
@click.argument("query", default="")
@click.option("--chain", "-n", type=int, default=1, show_default=True, help="Chain id")
@click.option("--only-alerts", is_flag=True, help="Only vaults with warnings")
@click.option("--only-in-queue", is_flag=True, help="Only strategies in the withdrawal queue")
@click.option("--offline", is_flag=True, help="Use the persisted snapshot without fetching")
@click.option("--config", "-c", type=click.Path(exists=True), help="Watch settings YAML path")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logs")
def search(
    query: str,
    chain: int,
    only_alerts: bool,
    only_in_queue: bool,
    offline: bool,
    config: Optional[str],
    verbose: bool,
) -> None:
    """Search vaults and strategies by name, symbol or address

    \b
    Examples:
      vaultwatch search usdc
      vaultwatch search 0x5f18 --only-alerts
    """
    setup_logging(verbose)
    result = sync_snapshot(chain, False, config, offline)

    vaults = filter_vaults(result.vaults, query, only_with_alerts=only_alerts)
    summary = summarize_vaults(vaults, only_in_queue=only_in_queue)

    click.echo(f"Vaults Found: {summary.vaults}  Strategies Found: {summary.strategies}")
    click.echo("-" * 60)
    for vault in vaults:
        click.echo(f"{vault.name} ({vault.symbol}) {vault.address}")
        for strategy in vault.strategies:
            if only_in_queue and not strategy.is_in_queue:
                continue
            click.echo(f"   {strategy.name:<40} ${strategy.total_debt_usdc:,.0f}")
