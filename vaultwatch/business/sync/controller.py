"""
Watch Controller - data synchronization

Keeps the committed snapshot of the active chain up to date:

1. At most one fetch in flight (single-flight busy flag)
2. A chain switch bumps the generation counter; results of fetches launched
   under an older generation are dropped on arrival
3. A current result is decoded, swapped in as a whole object and persisted

All state lives on one event loop. The only suspension point is the adapter
call, so the busy flag, generation counter and snapshot need no lock.

Usage:
    controller = WatchController(adapter, store=JsonFileStore(path))
    await controller.start()            # initial refresh, no revalidation
    controller.switch_chain(250)        # context change, auto refresh
    controller.update()                 # user refresh, forces revalidation
    snapshot = controller.current_snapshot()
"""

import asyncio
import logging
import time
from typing import Callable

from vaultwatch.data.cache.store import (
    LAST_UPDATE_KEY,
    NETWORK_KEY,
    VAULTS_KEY,
    KeyValueStore,
    MemoryStore,
)
from vaultwatch.data.exceptions import DataProviderError, SourcePayloadError, StoreError
from vaultwatch.data.models import Snapshot
from vaultwatch.data.providers.base import SourceAdapter, SourceResult
from vaultwatch.data.utils.bignumber import decode_bignumbers, encode_bignumbers

logger = logging.getLogger(__name__)

SnapshotListener = Callable[[Snapshot], None]


class WatchController:
    """Single-flight, generation-guarded snapshot synchronization."""

    def __init__(
        self,
        adapter: SourceAdapter,
        store: KeyValueStore | None = None,
        chain_id: int = 1,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the controller and load the persisted snapshot.

        Args:
            adapter: Source of raw snapshots.
            store: Persistence port. Defaults to an in-memory store.
            chain_id: Initial chain context.
            clock: Wall clock in epoch seconds, used when the adapter reports
                no access timestamp.
        """
        self._adapter = adapter
        self._store = store or MemoryStore()
        self._chain_id = chain_id or 1
        self._clock = clock
        self._generation = 0
        self._busy = False
        self._listeners: list[SnapshotListener] = []
        self._tasks: set[asyncio.Task] = set()
        self._snapshot = self._load_persisted()

    # =========================================================================
    # Read accessors
    # =========================================================================

    def current_snapshot(self) -> Snapshot:
        """Last committed snapshot (persisted one, or empty, before any commit)."""
        return self._snapshot

    def is_updating(self) -> bool:
        """Check if a fetch for the current context is in flight."""
        return self._busy

    @property
    def chain_id(self) -> int:
        return self._chain_id

    @property
    def generation(self) -> int:
        return self._generation

    def add_listener(self, listener: SnapshotListener) -> None:
        """Register a callback invoked with every newly committed snapshot."""
        self._listeners.append(listener)

    # =========================================================================
    # Refresh operations
    # =========================================================================

    def start(self) -> asyncio.Task | None:
        """Initial refresh of the current chain, without revalidation."""
        return self.refresh(self._chain_id, force_revalidate=False)

    def update(self) -> asyncio.Task | None:
        """User-triggered refresh: asks sources to bypass their caches."""
        return self.refresh(self._chain_id, force_revalidate=True)

    def switch_chain(self, chain_id: int) -> asyncio.Task | None:
        """Change the chain context and refresh it without revalidation.

        Returns None if ``chain_id`` already is the current context.
        """
        chain_id = chain_id or 1
        if chain_id == self._chain_id:
            return None
        return self.refresh(chain_id, force_revalidate=False)

    def refresh(
        self,
        chain_id: int | None = None,
        force_revalidate: bool = False,
    ) -> asyncio.Task | None:
        """Schedule a fetch. Must be called from a running event loop.

        A ``chain_id`` other than the current one is a context change: any
        in-flight fetch becomes stale and a new fetch starts right away.

        Args:
            chain_id: Chain to fetch. Defaults to the current context.
            force_revalidate: Ask the source to bypass any cache.

        Returns:
            The fetch task, resolving to the committed Snapshot (or None when
            the result was stale), or None if a fetch is already in flight.
            Transport and decode errors propagate out of the task.
        """
        chain_id = chain_id or self._chain_id
        if chain_id != self._chain_id:
            self._change_context(chain_id)

        if self._busy:
            logger.debug(f"Fetch already running for chain {chain_id}, skipping refresh")
            return None

        self._busy = True
        generation = self._generation
        task = asyncio.get_running_loop().create_task(
            self._run_fetch(chain_id, force_revalidate, generation)
        )
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    async def wait_idle(self) -> None:
        """Wait until every scheduled fetch finished (errors are not raised)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # =========================================================================
    # Internals
    # =========================================================================

    def _change_context(self, chain_id: int) -> None:
        if self._busy:
            logger.info(
                f"Chain switched {self._chain_id} -> {chain_id}, "
                f"invalidating fetch of generation {self._generation}"
            )
        self._generation += 1
        self._busy = False
        self._chain_id = chain_id

    async def _run_fetch(
        self,
        chain_id: int,
        force_revalidate: bool,
        generation: int,
    ) -> Snapshot | None:
        logger.info(
            f"Fetching snapshot via {self._adapter.name}: chain {chain_id}, "
            f"revalidate={force_revalidate}, generation {generation}"
        )
        try:
            result = await self._adapter.fetch(chain_id, force_revalidate)
        except DataProviderError as e:
            logger.error(f"Snapshot fetch failed for chain {chain_id}: {e}")
            raise
        finally:
            # A stale fetch must not release the busy flag of a newer one
            if generation == self._generation:
                self._busy = False

        if generation != self._generation:
            logger.debug(
                f"Dropping stale snapshot for chain {chain_id} "
                f"(generation {generation}, current {self._generation})"
            )
            return None

        try:
            snapshot = self._build_snapshot(result)
        except DataProviderError as e:
            logger.error(f"Snapshot decode failed for chain {chain_id}: {e}")
            raise

        self._commit(snapshot)
        return snapshot

    def _build_snapshot(self, result: SourceResult) -> Snapshot:
        payload = decode_bignumbers(result.payload)
        if result.access is not None:
            last_update = int(result.access)
        else:
            last_update = int(self._clock() * 1000)
        try:
            return Snapshot.from_payload(payload, last_update)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise SourcePayloadError(f"Malformed snapshot payload: {e}") from e

    def _commit(self, snapshot: Snapshot) -> None:
        self._snapshot = snapshot
        logger.info(
            f"Committed snapshot: {len(snapshot.vaults)} vaults, "
            f"last update {snapshot.last_update}"
        )
        self._persist(snapshot)
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Snapshot listener failed")

    def _persist(self, snapshot: Snapshot) -> None:
        try:
            self._store.set_many(
                {
                    VAULTS_KEY: encode_bignumbers([v.to_dict() for v in snapshot.vaults]),
                    NETWORK_KEY: snapshot.network.to_dict(),
                    LAST_UPDATE_KEY: snapshot.last_update,
                }
            )
        except StoreError as e:
            logger.warning(f"Failed to persist snapshot: {e}")

    def _load_persisted(self) -> Snapshot:
        try:
            payload = {
                "vaults": self._store.get(VAULTS_KEY, []),
                "network": self._store.get(NETWORK_KEY, {}),
            }
            last_update = self._store.get(LAST_UPDATE_KEY, 0)
            snapshot = Snapshot.from_payload(decode_bignumbers(payload), last_update)
        except (DataProviderError, StoreError, AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning(f"Ignoring unreadable persisted snapshot: {e}")
            return Snapshot.empty()

        if not snapshot.is_empty:
            logger.info(f"Loaded persisted snapshot: {len(snapshot.vaults)} vaults")
        return snapshot

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        # Mark the exception retrieved; awaiting callers still receive it
        if not task.cancelled():
            task.exception()
