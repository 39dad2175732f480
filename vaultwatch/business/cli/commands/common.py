"""
Shared helpers for CLI commands.
"""

import asyncio
import logging
from typing import Optional

import click

from vaultwatch.business.config.settings import WatchSettings
from vaultwatch.business.sync.controller import WatchController
from vaultwatch.business.sync.factory import create_source_adapter, create_store
from vaultwatch.data.exceptions import DataProviderError
from vaultwatch.data.models import Snapshot

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure root logging for a CLI run"""
    log_level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def build_controller(chain_id: int, settings_path: Optional[str] = None) -> WatchController:
    """Create a controller wired from the settings file"""
    settings = WatchSettings.load(settings_path)
    return WatchController(
        create_source_adapter(settings),
        store=create_store(settings),
        chain_id=chain_id,
    )


async def _refresh(controller: WatchController, revalidate: bool) -> Snapshot:
    task = controller.update() if revalidate else controller.start()
    if task is not None:
        await task
    return controller.current_snapshot()


def sync_snapshot(
    chain_id: int,
    revalidate: bool = False,
    settings_path: Optional[str] = None,
    offline: bool = False,
) -> Snapshot:
    """Refresh and return the snapshot of a chain.

    If the refresh fails, the persisted snapshot is used when there is one.

    Raises:
        click.ClickException: Refresh failed and nothing was persisted.
    """
    controller = build_controller(chain_id, settings_path)
    if offline:
        return controller.current_snapshot()

    try:
        return asyncio.run(_refresh(controller, revalidate))
    except DataProviderError as e:
        stale = controller.current_snapshot()
        if stale.is_empty:
            raise click.ClickException(f"Refresh failed: {e}") from e
        logger.warning(f"Refresh failed ({e}), using persisted snapshot from {stale.last_update}")
        return stale
