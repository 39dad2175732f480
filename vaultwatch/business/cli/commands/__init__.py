"""
CLI Commands
"""

from vaultwatch.business.cli.commands.risk import risk
from vaultwatch.business.cli.commands.search import search
from vaultwatch.business.cli.commands.snapshot import snapshot

__all__ = ["risk", "search", "snapshot"]
