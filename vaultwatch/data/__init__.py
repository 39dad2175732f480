"""Data layer: snapshot models, codec, source adapters and local storage."""

from vaultwatch.data.models import (
    NetworkHealth,
    NetworkStatus,
    Snapshot,
    Strategy,
    Vault,
)

__all__ = [
    "NetworkHealth",
    "NetworkStatus",
    "Snapshot",
    "Strategy",
    "Vault",
]
