"""
Risk Command - risk groups of a chain
"""

import json
import logging
from typing import Optional

import click

from vaultwatch.business.cli.commands.common import setup_logging, sync_snapshot
from vaultwatch.business.config.risk_config import RiskConfig
from vaultwatch.engine.models.risk import RiskGroup
from vaultwatch.engine.risk.aggregator import SORT_KEYS, compute_risk_groups, sort_risk_groups

logger = logging.getLogger(__name__)


@click.command()
@click.option("--chain", "-n", type=int, default=1, show_default=True, help="Chain id")
@click.option(
    "--sort",
    "-s",
    "sort_by",
    type=click.Choice(sorted(SORT_KEYS)),
    default="score",
    show_default=True,
    help="Sort key",
)
@click.option("--asc", is_flag=True, help="Sort ascending")
@click.option("--revalidate", "-r", is_flag=True, help="Bypass upstream caches")
@click.option("--offline", is_flag=True, help="Use the persisted snapshot without fetching")
@click.option("--config", "-c", type=click.Path(exists=True), help="Watch settings YAML path")
@click.option("--groups", "-g", type=click.Path(exists=True), help="Risk groups YAML path")
@click.option(
    "--output",
    "-o",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logs")
def risk(
    chain: int,
    sort_by: str,
    asc: bool,
    revalidate: bool,
    offline: bool,
    config: Optional[str],
    groups: Optional[str],
    output: str,
    verbose: bool,
) -> None:
    """Score the configured risk groups of a chain

    \b
    Examples:
      vaultwatch risk
      vaultwatch risk -s tvl
      vaultwatch risk -n 250 -o json
    """
    setup_logging(verbose)
    risk_config = RiskConfig.load(groups)
    result = sync_snapshot(chain, revalidate, config, offline)

    risk_groups = compute_risk_groups(
        result, chain, risk_config.for_chain(chain), bands=risk_config.scoring
    )
    risk_groups = sort_risk_groups(risk_groups, sort_by, descending=not asc)

    if output == "json":
        click.echo(json.dumps([g.to_dict() for g in risk_groups], indent=2))
    else:
        _output_text(risk_groups)


def _output_text(groups: list[RiskGroup]) -> None:
    if not groups:
        click.echo("No risk groups configured for this chain")
        return

    click.echo(f"{'Group':<24}{'TVL':>18}{'Share':>9}{'Risk':>6}{'Median':>8}{'Score':>8}")
    click.echo("-" * 73)
    for group in groups:
        click.echo(
            f"{group.name:<24}"
            f"{group.tvl:>18,.0f}"
            f"{group.total_debt_ratio:>8.1f}%"
            f"{group.tvl_impact:>6}"
            f"{group.median_score:>8.1f}"
            f"{group.impact_score:>8.1f}"
        )
