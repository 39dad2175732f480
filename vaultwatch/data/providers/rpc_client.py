"""Minimal JSON-RPC client for chain head queries."""

import logging
from typing import Any

import requests

from vaultwatch.data.providers.base import SourcePayloadError
from vaultwatch.data.providers.http import DEFAULT_TIMEOUT, request_json, thread_session

logger = logging.getLogger(__name__)


class RpcClient:
    """JSON-RPC 2.0 client over HTTP."""

    def __init__(
        self,
        url: str,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._session = session
        self._request_id = 0

    def call(self, method: str, params: list[Any] | None = None) -> Any:
        """Call a JSON-RPC method and return its result."""
        self._request_id += 1
        body = request_json(
            self._session or thread_session(),
            "POST",
            self._url,
            timeout=self._timeout,
            json={
                "jsonrpc": "2.0",
                "id": self._request_id,
                "method": method,
                "params": params or [],
            },
        )
        if "error" in body:
            raise SourcePayloadError(f"RPC error on {method}: {body['error']}")
        return body.get("result")

    def get_block_number(self) -> int:
        """Latest block number."""
        result = self.call("eth_blockNumber")
        if not isinstance(result, str):
            raise SourcePayloadError(f"Unexpected eth_blockNumber result: {result!r}")
        return int(result, 16)
