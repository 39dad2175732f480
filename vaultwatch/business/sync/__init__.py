"""Data synchronization."""

from vaultwatch.business.sync.controller import WatchController
from vaultwatch.business.sync.factory import create_source_adapter, create_store

__all__ = [
    "WatchController",
    "create_source_adapter",
    "create_store",
]
