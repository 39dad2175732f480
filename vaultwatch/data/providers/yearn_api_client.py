"""Yearn API client for the vault list."""

import logging
from decimal import Decimal
from typing import Any

import requests

from vaultwatch.data.providers.base import SourcePayloadError
from vaultwatch.data.providers.http import DEFAULT_TIMEOUT, request_json, thread_session
from vaultwatch.data.utils.bignumber import encode_bignumber

logger = logging.getLogger(__name__)


def _to_int(value: Any) -> int:
    if value is None or value == "":
        return 0
    if isinstance(value, str) and value.lower().startswith("0x"):
        return int(value, 16)
    return int(Decimal(str(value)))


class YearnApiClient:
    """Client for ``/v1/chains/<chain>/vaults/all``.

    Normalizes each vault into the wire shape used by snapshots. Token
    balances are emitted as BigNumber tags so the direct path goes through
    the same decoding as the remote one.
    """

    BASE_URL = "https://api.yearn.finance"

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = (base_url or self.BASE_URL).rstrip("/")
        self._timeout = timeout
        self._session = session

    def get_vaults(self, chain_id: int) -> list[dict[str, Any]]:
        """Get all vaults of a chain.

        Raises:
            SourceTransportError: API unreachable.
            SourcePayloadError: Body is not a list of vaults.
        """
        url = f"{self._base_url}/v1/chains/{chain_id}/vaults/all"
        body = request_json(self._session or thread_session(), "GET", url, timeout=self._timeout)
        if not isinstance(body, list):
            raise SourcePayloadError(f"Expected a vault list from {url}")
        vaults = []
        for raw in body:
            try:
                if raw.get("address"):
                    vaults.append(self._normalize_vault(raw))
            except (AttributeError, KeyError, TypeError, ValueError, ArithmeticError) as e:
                raise SourcePayloadError(f"Malformed vault entry from {url}: {e}") from e
        return vaults

    @staticmethod
    def _normalize_vault(raw: dict[str, Any]) -> dict[str, Any]:
        token = raw.get("token") or {}
        tvl = raw.get("tvl") or {}
        decimals = int(raw.get("decimals") or token.get("decimals") or 18)
        price = float(tvl.get("price") or 0.0)
        scale = Decimal(10) ** decimals

        strategies = []
        for position, strat in enumerate(raw.get("strategies") or []):
            details = strat.get("details") or {}
            total_debt = _to_int(details.get("totalDebt"))
            strategies.append(
                {
                    "address": strat.get("address", ""),
                    "name": strat.get("name", ""),
                    "description": strat.get("description") or "",
                    "activation": _to_int(details.get("activation")),
                    "totalDebtUSDC": float(Decimal(total_debt) / scale) * price,
                    "index": int(details.get("withdrawalQueuePosition", position)),
                }
            )

        return {
            "address": raw["address"],
            "name": raw.get("display_name") or raw.get("name", ""),
            "symbol": raw.get("symbol") or token.get("symbol", ""),
            "decimals": decimals,
            "balanceTokens": encode_bignumber(_to_int(tvl.get("total_assets"))),
            "tokenPriceUSDC": price,
            "strategies": strategies,
            "alerts": raw.get("alerts") or [],
        }
