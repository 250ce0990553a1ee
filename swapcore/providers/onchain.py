"""Adapter exposing the on-chain AMM pathfinder as an ordinary quote provider."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from ..config import settings
from ..core.amounts import apply_slippage
from ..core.chains import normalize_address
from ..core.models import Quote, Route, TradeRequest
from ..core.pathfinder import Pathfinder, approval_required
from ..core.pathfinder.slippage import dynamic_slippage, is_low_liquidity
from .base import QuoteProvider, slippage_for

logger = logging.getLogger(__name__)

BASE_SWAP_GAS = 150_000
EXTRA_HOP_GAS = 50_000


class OnchainProvider(QuoteProvider):
    """Quotes straight from AMM pools when off-chain sources cannot answer."""

    name = "onchain"

    def __init__(
        self,
        pathfinder: Pathfinder,
        *,
        fee_on_transfer_tokens: Optional[Iterable[str]] = None,
        low_liquidity_threshold: Optional[int] = None,
    ) -> None:
        self.pathfinder = pathfinder
        tokens = settings.fee_on_transfer_tokens if fee_on_transfer_tokens is None else fee_on_transfer_tokens
        self.fee_on_transfer_tokens = {normalize_address(token) for token in tokens}
        self.low_liquidity_threshold = (
            settings.low_liquidity_threshold if low_liquidity_threshold is None else low_liquidity_threshold
        )

    @property
    def supported_chains(self):  # type: ignore[override]
        return frozenset(self.pathfinder.readers)

    def supports(self, request: TradeRequest) -> bool:
        return not request.is_cross_chain and self.pathfinder.supports(request.source_chain_id)

    def is_fee_on_transfer(self, request: TradeRequest, route: Route) -> bool:
        flagged = {normalize_address(request.source_token), normalize_address(request.dest_token)}
        # A failed full-amount router call with pools present is the usual fee-token symptom
        return bool(flagged & self.fee_on_transfer_tokens) or route.is_estimate

    @staticmethod
    def liquidity_score(route: Route, low_liquidity: bool) -> int:
        score = 100 - 10 * route.hops
        if low_liquidity:
            score -= 20
        if route.is_estimate:
            score -= 15
        return max(0, min(100, score))

    async def _quote(self, request: TradeRequest) -> Optional[Quote]:
        chain_id = request.source_chain_id
        route = await self.pathfinder.find_best_route(
            request.source_token, request.dest_token, request.amount, chain_id
        )
        if route is None:
            return None

        reader = self.pathfinder.reader_for(chain_id)
        fee_on_transfer = self.is_fee_on_transfer(request, route)
        low_liquidity = is_low_liquidity(route.aggregate_liquidity, self.low_liquidity_threshold)
        route_slippage = dynamic_slippage(
            route.price_impact_percent,
            fee_on_transfer=fee_on_transfer,
            low_liquidity=low_liquidity,
        )
        effective_slippage = max(slippage_for(request), route_slippage)
        needs_approval = await approval_required(
            reader, request.source_token, request.requester_address, request.amount
        )

        logger.debug(
            "On-chain route %s via %s (source=%s, impact=%.2f%%, slippage=%.2f%%)",
            "->".join(route.path),
            reader.config.dex_name,
            route.source.value,
            route.price_impact_percent,
            effective_slippage,
        )

        return Quote(
            provider_id=self.name,
            dest_amount=str(route.expected_output),
            dest_amount_min=str(apply_slippage(route.expected_output, effective_slippage)),
            estimated_gas=BASE_SWAP_GAS + EXTRA_HOP_GAS * (route.hops - 1),
            liquidity_score=self.liquidity_score(route, low_liquidity),
            price_impact_percent=route.price_impact_percent,
            route=list(route.path),
            execution_payload={
                "protocol": reader.config.dex_name,
                "router": reader.config.router,
                "path": list(route.path),
                "pairs": list(route.pair_addresses),
                "amounts": [str(amount) for amount in route.amounts],
                "source": route.source.value,
                "slippagePercent": effective_slippage,
                "feeOnTransfer": fee_on_transfer,
                "approvalRequired": needs_approval,
            },
        )
