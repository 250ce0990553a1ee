"""Jupiter adapter for Solana swaps."""

from typing import Any, Dict, FrozenSet, List, Optional

from ..core.amounts import slippage_to_bps
from ..core.chains import SOLANA_CHAIN_ID, SOLANA_NATIVE_MINT, is_native
from ..core.errors import ProviderError
from ..core.models import Quote, TradeRequest
from .base import HttpQuoteProvider, liquidity_score, min_amount, percent_from_fraction, require, slippage_for

# Solana base fee plus a typical priority fee, in lamports
SOLANA_TX_COST = 5000


def _mint(token: str) -> str:
    if is_native(token) or token.upper() == "SOL":
        return SOLANA_NATIVE_MINT
    return token


class JupiterProvider(HttpQuoteProvider):
    """Jupiter v6 quote API. Swap transaction building happens downstream."""

    name = "jupiter"
    supported_chains: FrozenSet[int] = frozenset({SOLANA_CHAIN_ID})
    default_base_urls = ["https://quote-api.jup.ag/v6"]

    async def _quote(self, request: TradeRequest) -> Optional[Quote]:
        slippage = slippage_for(request)
        input_mint = _mint(request.source_token)
        output_mint = _mint(request.dest_token)
        data = await self._get_json(
            "/quote",
            {
                "inputMint": input_mint,
                "outputMint": output_mint,
                "amount": request.source_amount,
                "slippageBps": slippage_to_bps(slippage),
                "swapMode": "ExactIn",
            },
        )
        if "error" in data:
            raise ProviderError(self.name, f"Jupiter quote error: {data['error']}")

        dest_amount = require(data, "outAmount", self.name)
        route_plan: List[Dict[str, Any]] = data.get("routePlan") or []
        route = [input_mint]
        for step in route_plan:
            output = (step.get("swapInfo") or {}).get("outputMint")
            if output and output != route[-1]:
                route.append(output)
        if route[-1] != output_mint:
            route = []

        return Quote(
            provider_id=self.name,
            dest_amount=dest_amount,
            dest_amount_min=min_amount(dest_amount, slippage, data.get("otherAmountThreshold")),
            estimated_gas=SOLANA_TX_COST,
            liquidity_score=liquidity_score(route_plan or None),
            price_impact_percent=percent_from_fraction(data.get("priceImpactPct") or 0),
            route=route,
            execution_payload={"quoteResponse": data},
        )
