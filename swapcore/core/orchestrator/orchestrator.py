"""
Quote orchestration: cache, then race, then sequential fallback, then
everything at once.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Sequence

import structlog

from ...config import Settings, settings as default_settings
from ...providers.base import QuoteProvider
from ...providers.decimals import DecimalsResolver
from ..errors import NoRouteError
from ..models import Quote, TradeRequest
from ..quote_cache import QuoteCache, fingerprint
from .registry import ProviderRegistry, build_rpc_clients
from .tiers import ExhaustiveTier, RaceTier, SequentialTier, TierResult

logger = logging.getLogger(__name__)

Tier = Callable[[Sequence[QuoteProvider], TradeRequest], Awaitable[TierResult]]


def default_tiers(config: Optional[Settings] = None) -> List[Tier]:
    config = config or default_settings
    return [
        RaceTier(config.race_size, config.race_timeout_seconds),
        SequentialTier(config.sequential_timeout_seconds),
        ExhaustiveTier(config.exhaustive_timeout_seconds),
    ]


class QuoteOrchestrator:
    """Single entry point: ``get_quote(request) -> Quote`` or ``NoRouteError``.

    The cache is owned by the orchestrator instance, so tests and hosts can
    hand in their own.
    """

    def __init__(
        self,
        registry: ProviderRegistry,
        cache: Optional[QuoteCache] = None,
        *,
        tiers: Optional[Sequence[Tier]] = None,
        decimals: Optional[DecimalsResolver] = None,
        decimals_timeout_s: Optional[float] = None,
    ) -> None:
        self.registry = registry
        self.cache = cache if cache is not None else QuoteCache()
        self.tiers: List[Tier] = list(tiers) if tiers is not None else default_tiers()
        self.decimals = decimals
        self.decimals_timeout_s = (
            default_settings.decimals_timeout_seconds if decimals_timeout_s is None else decimals_timeout_s
        )

    async def get_quote(self, request: TradeRequest) -> Quote:
        with structlog.contextvars.bound_contextvars(quote_key=fingerprint(request)):
            return await self._search(request)

    async def _search(self, request: TradeRequest) -> Quote:
        cached = self.cache.get(request)
        if cached is not None:
            return cached

        providers = self.registry.select(request)
        remaining: List[QuoteProvider] = list(providers)

        for tier in self.tiers:
            if not remaining:
                break
            tier_name = getattr(tier, "name", type(tier).__name__)
            logger.debug("Running %s tier over %s", tier_name, [p.name for p in remaining])
            quote, remaining = await tier(remaining, request)
            if quote is not None:
                quote = await self._enrich(request, quote)
                self.cache.put(request, quote)
                return quote

        attempted = [provider.name for provider in providers]
        logger.warning(
            "No route for %s:%s -> %s:%s (attempted: %s)",
            request.source_chain_id,
            request.source_token,
            request.dest_chain_id,
            request.dest_token,
            ", ".join(attempted),
        )
        raise NoRouteError(attempted)

    async def _enrich(self, request: TradeRequest, quote: Quote) -> Quote:
        if self.decimals is None:
            return quote
        source_decimals, dest_decimals = await asyncio.gather(
            self._decimals_of(request.source_token, request.source_chain_id),
            self._decimals_of(request.dest_token, request.dest_chain_id),
        )
        return quote.with_decimals(source_decimals, dest_decimals)

    async def _decimals_of(self, token: str, chain_id: int) -> int:
        try:
            return await asyncio.wait_for(self.decimals.decimals_of(token, chain_id), timeout=self.decimals_timeout_s)
        except asyncio.TimeoutError:
            logger.info("Decimals lookup for %s on chain %s timed out", token, chain_id)
            return self.decimals.default

    @classmethod
    def from_settings(cls, config: Optional[Settings] = None) -> "QuoteOrchestrator":
        config = config or default_settings
        rpc_clients = build_rpc_clients(config)
        decimals = DecimalsResolver(rpc_clients)
        registry = ProviderRegistry.from_settings(config, rpc_clients, decimals_of=decimals.decimals_of)
        cache = QuoteCache(ttl_seconds=config.quote_cache_ttl_seconds, max_size=config.quote_cache_max_size)
        return cls(
            registry,
            cache,
            tiers=default_tiers(config),
            decimals=decimals,
            decimals_timeout_s=config.decimals_timeout_seconds,
        )


# Singleton instance
_orchestrator: Optional[QuoteOrchestrator] = None


def get_orchestrator() -> QuoteOrchestrator:
    """Get the process-wide orchestrator, building it on first use."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = QuoteOrchestrator.from_settings()
    return _orchestrator
