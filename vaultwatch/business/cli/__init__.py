"""
Command line tools

Commands:
- snapshot: refresh and summarize the snapshot
- risk: score risk groups
- search: free-text vault search
"""

from vaultwatch.business.cli.main import cli

__all__ = ["cli"]
