"""Free-text search over the vault → strategy hierarchy.

The same predicates drive the vault list search box and the include/exclude
patterns of risk group classification.
"""

from dataclasses import dataclass
from typing import Iterable

from vaultwatch.data.models import Strategy, Vault


@dataclass
class SearchResult:
    """Summary of a filtered vault list."""

    vaults: int = 0
    strategies: int = 0
    not_allocated: float = 0.0


def _contains(field: str | None, term: str) -> bool:
    return term in (field or "").lower()


def find_strategy_by_search(strategy: Strategy, term: str) -> bool:
    """Match a strategy by name or address, case-insensitively.

    An empty term matches everything.
    """
    if not term:
        return True
    term = term.lower()
    return _contains(strategy.name, term) or _contains(strategy.address, term)


def deep_find_vault_by_search(vault: Vault, term: str) -> bool:
    """Match a vault by name, symbol, address, or any of its strategies."""
    if not term:
        return True
    lowered = term.lower()
    return (
        _contains(vault.name, lowered)
        or _contains(vault.symbol, lowered)
        or _contains(vault.address, lowered)
        or any(find_strategy_by_search(s, term) for s in vault.strategies)
    )


def filter_vaults(
    vaults: Iterable[Vault],
    query: str,
    only_with_alerts: bool = False,
) -> list[Vault]:
    """Filter vaults by search query, optionally keeping only alerted ones."""
    result = list(vaults)
    if only_with_alerts:
        result = [v for v in result if v.has_alerts]
    return [v for v in result if deep_find_vault_by_search(v, query)]


def summarize_vaults(vaults: Iterable[Vault], only_in_queue: bool = False) -> SearchResult:
    """Count vaults and strategies and sum unallocated assets.

    Args:
        vaults: Vaults to summarize (usually the output of ``filter_vaults``).
        only_in_queue: Count only strategies in the withdrawal queue.
    """
    summary = SearchResult()
    for vault in vaults:
        summary.vaults += 1
        summary.strategies += sum(
            1 for s in vault.strategies if s.is_in_queue or not only_in_queue
        )
        summary.not_allocated += vault.not_allocated_usdc
    return summary


def find_vault(vaults: Iterable[Vault], address: str) -> Vault | None:
    """Find a vault by address (case-insensitive)."""
    address = (address or "").lower()
    for vault in vaults:
        if vault.address.lower() == address:
            return vault
    return None
