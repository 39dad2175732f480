"""Source adapter backed by the pre-aggregation service."""

import asyncio
import logging
from typing import Any

import requests

from vaultwatch.data.providers.base import SourceAdapter, SourcePayloadError, SourceResult
from vaultwatch.data.providers.http import DEFAULT_TIMEOUT, request_json, thread_session

logger = logging.getLogger(__name__)


class RemoteSourceAdapter(SourceAdapter):
    """Fetches a ready-made snapshot from the aggregation service.

    The service combines RPC, subgraph and metadata sources server-side and
    answers ``GET /api/getVaults?chainID=<id>&revalidate=<bool>`` with::

        {"access": <timestamp>, "data": {"vaults": [...], "network": {...}}}

    Usage:
        adapter = RemoteSourceAdapter("https://watch.yearn.finance")
        result = await adapter.fetch(1)
    """

    ENDPOINT = "/api/getVaults"

    def __init__(
        self,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize remote adapter.

        Args:
            base_url: Service root URL.
            timeout: Request timeout in seconds.
            session: Optional requests session, shared by every call. Defaults
                to one session per worker thread.
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session

    @property
    def name(self) -> str:
        return "remote"

    async def fetch(self, chain_id: int, force_revalidate: bool = False) -> SourceResult:
        return await asyncio.to_thread(self._fetch_sync, chain_id, force_revalidate)

    def _fetch_sync(self, chain_id: int, force_revalidate: bool) -> SourceResult:
        params = {
            "chainID": chain_id or 1,
            "revalidate": "true" if force_revalidate else "false",
        }
        body = request_json(
            self._session or thread_session(),
            "GET",
            f"{self._base_url}{self.ENDPOINT}",
            timeout=self._timeout,
            params=params,
        )
        payload = self._extract_payload(body)
        access = self._parse_access(body.get("access"))
        logger.info(
            f"Remote snapshot for chain {params['chainID']}: "
            f"{len(payload['vaults'])} vaults"
        )
        return SourceResult(payload=payload, access=access)

    @staticmethod
    def _parse_access(access: Any) -> int | None:
        if access is None:
            return None
        try:
            return int(float(access))
        except (TypeError, ValueError, OverflowError) as e:
            raise SourcePayloadError(f"Invalid access timestamp: {access!r}") from e

    @staticmethod
    def _extract_payload(body: Any) -> dict[str, Any]:
        if not isinstance(body, dict) or not isinstance(body.get("data"), dict):
            raise SourcePayloadError("Response body has no 'data' object")
        data = body["data"]
        vaults = data.get("vaults")
        if not isinstance(vaults, list):
            raise SourcePayloadError("Response data has no 'vaults' list")
        return {"vaults": vaults, "network": data.get("network") or {}}
