"""Fingerprint cache: short-lived reuse of quotes for economically identical requests."""

import logging
import time
from typing import Callable, Optional, Tuple

from ..cache import TTLCache
from .amounts import normalize_amount
from .chains import normalize_address
from .models import Quote, TradeRequest

logger = logging.getLogger(__name__)

DEFAULT_SLIPPAGE_KEY = "default"


def _slippage_key(slippage_percent: Optional[float]) -> str:
    if slippage_percent is None:
        return DEFAULT_SLIPPAGE_KEY
    # 0.5, 0.50 and 1/2 all render as "0.5"
    return format(float(slippage_percent), "g")


def fingerprint(request: TradeRequest) -> str:
    """Deterministic key over every price-relevant field of a request."""
    return "|".join(
        (
            str(request.source_chain_id),
            str(request.dest_chain_id),
            normalize_address(request.source_token),
            normalize_address(request.dest_token),
            normalize_amount(request.source_amount),
            _slippage_key(request.slippage_percent),
        )
    )


def payload_owner(request: TradeRequest) -> Tuple[str, str]:
    """Addresses an execution payload is built for; not part of the fingerprint."""
    return normalize_address(request.requester_address), normalize_address(request.recipient)


class QuoteCache:
    """TTL store of winning quotes keyed by request fingerprint.

    Last write wins: any quote for the same fingerprint inside the TTL is an
    acceptable stand-in for another. Execution payloads embed the requester
    and recipient, so a hit for different addresses gets the pricing without
    the payload.
    """

    def __init__(
        self,
        ttl_seconds: float = 30.0,
        max_size: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._store: TTLCache[Tuple[Quote, Tuple[str, str]]] = TTLCache(
            default_ttl=ttl_seconds, max_size=max_size, clock=clock
        )

    @property
    def ttl_seconds(self) -> float:
        return self._store.default_ttl

    def get(self, request: TradeRequest) -> Optional[Quote]:
        key = fingerprint(request)
        entry = self._store.get(key)
        if entry is None:
            logger.debug("Quote cache miss for %s", key)
            return None

        quote, owner = entry
        logger.debug("Quote cache hit for %s (provider=%s)", key, quote.provider_id)
        if owner != payload_owner(request) and quote.execution_payload:
            return quote.without_payload()
        return quote

    def put(self, request: TradeRequest, quote: Quote) -> None:
        key = fingerprint(request)
        self._store.set(key, (quote, payload_owner(request)))
        logger.debug("Cached %s quote for %s", quote.provider_id, key)

    def clear(self) -> None:
        self._store.clear()

    def size(self) -> int:
        return self._store.size()

    def purge_expired(self) -> int:
        return self._store.purge_expired()
