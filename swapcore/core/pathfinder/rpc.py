"""Read-only JSON-RPC client with ordered endpoint fallback."""

from __future__ import annotations

import itertools
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from ...config import settings
from ..errors import ContractRevertError, RpcError
from .abi import decode_revert_reason

logger = logging.getLogger(__name__)

# JSON-RPC error code geth and most providers use for reverted eth_calls
REVERT_ERROR_CODE = 3


def _revert_from_error(error: Dict[str, Any]) -> Optional[ContractRevertError]:
    message = str(error.get("message") or "")
    data = error.get("data")
    if isinstance(data, dict):
        data = data.get("data") or data.get("result")
    if error.get("code") != REVERT_ERROR_CODE and "revert" not in message.lower():
        return None

    reason = decode_revert_reason(data if isinstance(data, str) else None)
    if reason is None:
        reason = message.split("execution reverted:", 1)[-1].strip() if "execution reverted:" in message else ""
    return ContractRevertError(reason, data if isinstance(data, str) else None)


class RpcClient:
    """Talks to one chain through an ordered list of endpoints.

    Transport failures and non-revert RPC errors fall through to the next URL.
    A contract revert is the chain's answer, so it is raised straight away.
    """

    def __init__(
        self,
        chain_id: int,
        urls: Sequence[str],
        *,
        timeout_s: Optional[float] = None,
    ) -> None:
        if not urls:
            raise ValueError(f"No RPC endpoints configured for chain {chain_id}")
        self.chain_id = chain_id
        self.urls: List[str] = [url.rstrip("/") for url in urls]
        self.timeout_s = timeout_s if timeout_s is not None else settings.rpc_timeout_seconds
        self._ids = itertools.count(1)

    async def _post(self, url: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        async with httpx.AsyncClient(timeout=self.timeout_s) as client:
            response = await client.post(
                url,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
            response.raise_for_status()
            return response.json()

    async def request(self, method: str, params: List[Any]) -> Any:
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        last_error: Optional[Exception] = None

        for url in self.urls:
            try:
                data = await self._post(url, payload)
            except (httpx.HTTPError, ValueError) as exc:
                logger.debug("RPC %s failed on %s: %s", method, url, exc)
                last_error = exc
                continue

            error = data.get("error") if isinstance(data, dict) else None
            if error:
                revert = _revert_from_error(error) if isinstance(error, dict) else None
                if revert is not None:
                    raise revert
                logger.debug("RPC %s error from %s: %s", method, url, error)
                last_error = RpcError(f"RPC error from {url}: {error}")
                continue

            if not isinstance(data, dict) or "result" not in data:
                last_error = RpcError(f"Malformed RPC response from {url}")
                continue
            return data["result"]

        raise RpcError(f"All RPC endpoints failed for chain {self.chain_id}: {last_error}")

    async def eth_call(self, to: str, data: str, block: str = "latest") -> str:
        result = await self.request("eth_call", [{"to": to, "data": data}, block])
        if not isinstance(result, str):
            raise RpcError(f"Unexpected eth_call result: {result!r}")
        return result
