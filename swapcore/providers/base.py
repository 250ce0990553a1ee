"""Quote provider interface and shared HTTP plumbing for aggregator adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional

import httpx

from ..config import settings
from ..core.amounts import apply_slippage, normalize_amount
from ..core.chains import NATIVE_PLACEHOLDER, NATIVE_PLACEHOLDER_EEEE, is_native
from ..core.errors import ProviderError
from ..core.models import Quote, TradeRequest

DEFAULT_LIQUIDITY_SCORE = 50
LARGE_POOL_LIQUIDITY = 1_000_000
SMALL_POOL_LIQUIDITY = 100_000

EVM_CHAINS: FrozenSet[int] = frozenset({1, 10, 56, 137, 8453, 42161})


class QuoteProvider(ABC):
    """One liquidity source.

    ``quote`` resolves to a :class:`Quote` or ``None``. Requests the provider
    cannot serve (wrong chain, cross-chain on a same-chain source) return
    ``None`` without touching the network.
    """

    name: str
    supported_chains: FrozenSet[int] = EVM_CHAINS
    same_chain: bool = True
    cross_chain: bool = False

    def supports(self, request: TradeRequest) -> bool:
        if request.is_cross_chain:
            if not self.cross_chain:
                return False
            return (
                request.source_chain_id in self.supported_chains
                and request.dest_chain_id in self.supported_chains
            )
        return self.same_chain and request.source_chain_id in self.supported_chains

    async def quote(self, request: TradeRequest) -> Optional[Quote]:
        if not self.supports(request):
            return None
        return await self._quote(request)

    @abstractmethod
    async def _quote(self, request: TradeRequest) -> Optional[Quote]:
        """Fetch and translate a quote for a request this provider supports."""

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class HttpQuoteProvider(QuoteProvider):
    """Adapter over a JSON HTTP API with ordered base-URL fallback."""

    timeout_s: float = 10
    default_base_urls: List[str] = []

    def __init__(self, *, base_url: Optional[str] = None, timeout_s: Optional[float] = None) -> None:
        if base_url:
            self.base_urls: List[str] = [base_url.rstrip("/")]
        else:
            self.base_urls = list(self.default_base_urls)
        if timeout_s is not None:
            self.timeout_s = timeout_s

    def _headers(self) -> Dict[str, str]:
        return {"Accept": "application/json"}

    async def _request(
        self,
        method: str,
        path: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        merged_headers = {**self._headers(), **(headers or {})}
        last_error: Optional[Exception] = None

        for index, base_url in enumerate(self.base_urls):
            try:
                async with httpx.AsyncClient(base_url=base_url, timeout=self.timeout_s) as client:
                    response = await client.request(method, path, headers=merged_headers, **kwargs)
                    response.raise_for_status()
                    return response
            except httpx.HTTPStatusError as exc:
                # Some hosts omit certain routes. Fall back when we hit 404/405.
                if exc.response.status_code in (404, 405) and index < len(self.base_urls) - 1:
                    last_error = exc
                    continue
                raise ProviderError(self.name, f"HTTP {exc.response.status_code} from {base_url}{path}") from exc
            except httpx.RequestError as exc:
                last_error = exc
                continue

        raise ProviderError(self.name, f"all hosts failed: {last_error}")

    async def _get_json(self, path: str, params: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> Dict[str, Any]:
        cleaned = {key: value for key, value in (params or {}).items() if value is not None}
        response = await self._request("GET", path, params=cleaned, **kwargs)
        return self._json(response)

    async def _post_json(self, path: str, payload: Mapping[str, Any], **kwargs: Any) -> Dict[str, Any]:
        response = await self._request("POST", path, json=dict(payload), **kwargs)
        return self._json(response)

    def _json(self, response: httpx.Response) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise ProviderError(self.name, "response is not JSON") from exc
        if not isinstance(data, dict):
            raise ProviderError(self.name, "unexpected response shape")
        return data


def native_for_api(token: str, placeholder: str = NATIVE_PLACEHOLDER_EEEE) -> str:
    """Translate either native pseudo-address into the one a given API expects."""
    return placeholder if is_native(token) else token


def require(data: Mapping[str, Any], key: str, provider: str) -> Any:
    value = data.get(key) if isinstance(data, Mapping) else None
    if value in (None, ""):
        raise ProviderError(provider, f"response missing {key!r}")
    return value


def slippage_for(request: TradeRequest) -> float:
    if request.slippage_percent is None:
        return settings.default_slippage_percent
    return request.slippage_percent


def min_amount(dest_amount: Any, slippage_percent: Optional[float], provided: Any = None) -> str:
    """Provider-supplied minimum if present, else derived from slippage in integers."""
    if provided not in (None, ""):
        return normalize_amount(provided)
    return str(apply_slippage(int(normalize_amount(dest_amount)), slippage_percent))


def liquidity_score(steps: Optional[Iterable[Any]]) -> int:
    """Score a provider route from its steps: fewer hops and deeper pools rank higher."""
    if steps is None:
        return DEFAULT_LIQUIDITY_SCORE
    if not isinstance(steps, (list, tuple)):
        return DEFAULT_LIQUIDITY_SCORE

    score = 100 - 10 * len(steps)
    for step in steps:
        raw = step.get("liquidity") if isinstance(step, Mapping) else None
        if not raw:
            continue
        try:
            liquidity = float(raw)
        except (TypeError, ValueError):
            continue
        if liquidity > LARGE_POOL_LIQUIDITY:
            score += 10
        elif liquidity < SMALL_POOL_LIQUIDITY:
            score -= 20
    return max(0, min(100, score))


def percent(value: Any) -> float:
    try:
        return abs(float(value))
    except (TypeError, ValueError):
        return 0.0


def percent_from_fraction(value: Any) -> float:
    """APIs that report price impact as a fraction (0.012 == 1.2%)."""
    return percent(value) * 100


def gas_units(*candidates: Any, default: int = 0) -> int:
    for candidate in candidates:
        if candidate in (None, ""):
            continue
        try:
            return int(str(candidate), 0) if str(candidate).startswith("0x") else int(float(candidate))
        except (TypeError, ValueError):
            continue
    return default


__all__ = [
    "QuoteProvider",
    "HttpQuoteProvider",
    "EVM_CHAINS",
    "NATIVE_PLACEHOLDER",
    "native_for_api",
    "slippage_for",
    "require",
    "min_amount",
    "liquidity_score",
    "percent",
    "percent_from_fraction",
    "gas_units",
]
