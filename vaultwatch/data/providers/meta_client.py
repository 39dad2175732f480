"""Yearn metadata client (humanized strategy names and descriptions)."""

import logging
from typing import Any

import requests

from vaultwatch.data.providers.http import DEFAULT_TIMEOUT, request_json, thread_session

logger = logging.getLogger(__name__)


class MetaClient:
    """Client for ``/api/<chain>/strategies/all`` on the meta service."""

    BASE_URL = "https://meta.yearn.network"

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = (base_url or self.BASE_URL).rstrip("/")
        self._timeout = timeout
        self._session = session

    def get_strategies_meta(self, chain_id: int) -> dict[str, dict[str, Any]]:
        """Get strategy metadata keyed by lowercased address."""
        url = f"{self._base_url}/api/{chain_id}/strategies/all"
        body = request_json(self._session or thread_session(), "GET", url, timeout=self._timeout)

        meta: dict[str, dict[str, Any]] = {}
        for entry in body or []:
            for address in entry.get("addresses") or []:
                meta[address.lower()] = {
                    "name": entry.get("name"),
                    "description": entry.get("description"),
                }
        logger.debug(f"Loaded metadata for {len(meta)} strategies")
        return meta
