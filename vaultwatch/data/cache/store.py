"""Key-value persistence port for committed snapshots.

The sync controller only depends on ``KeyValueStore``; the backend (memory,
JSON file, Redis) is picked by configuration.
"""

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from vaultwatch.data.exceptions import StoreError

logger = logging.getLogger(__name__)

# Keys of the three persisted snapshot entries
VAULTS_KEY = "vaults"
NETWORK_KEY = "networkSync"
LAST_UPDATE_KEY = "vaultsLastUpdate"


class KeyValueStore(ABC):
    """Abstract key-value store holding JSON-serializable values."""

    @property
    def is_available(self) -> bool:
        """Check if the store can be read and written."""
        return True

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Get a value, or ``default`` when the key is absent."""
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Set a single value."""
        pass

    @abstractmethod
    def set_many(self, values: dict[str, Any]) -> None:
        """Set several values together: either all are written or none."""
        pass


class MemoryStore(KeyValueStore):
    """In-process store. Values are copied through JSON like the others."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str, default: Any = None) -> Any:
        if key not in self._data:
            return default
        return json.loads(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self.set_many({key: value})

    def set_many(self, values: dict[str, Any]) -> None:
        encoded = {key: json.dumps(value) for key, value in values.items()}
        self._data.update(encoded)


class JsonFileStore(KeyValueStore):
    """Store backed by a single JSON document on disk.

    Every write replaces the whole file through a temporary file and
    ``os.replace``, so readers see either the old or the new document.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable store {self._path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.set_many({key: value})

    def set_many(self, values: dict[str, Any]) -> None:
        with self._lock:
            data = self._read()
            data.update(values)
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f)
                os.replace(tmp_path, self._path)
            except (OSError, TypeError, ValueError) as e:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise StoreError(f"Failed to write {self._path}: {e}") from e
        logger.debug(f"Stored {sorted(values)} in {self._path}")
