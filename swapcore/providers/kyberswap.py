"""KyberSwap aggregator adapter."""

from typing import Optional

from ..core.errors import ProviderError
from ..core.models import Quote, TradeRequest
from ..core.amounts import slippage_to_bps
from .base import (
    HttpQuoteProvider,
    gas_units,
    liquidity_score,
    min_amount,
    native_for_api,
    percent_from_fraction,
    require,
    slippage_for,
)


class KyberSwapProvider(HttpQuoteProvider):
    name = "kyberswap"
    default_base_urls = ["https://aggregator-api.kyberswap.com"]

    async def _quote(self, request: TradeRequest) -> Optional[Quote]:
        slippage = slippage_for(request)
        data = await self._get_json(
            "/v1/route",
            {
                "chainId": request.source_chain_id,
                "tokenIn": native_for_api(request.source_token),
                "tokenOut": native_for_api(request.dest_token),
                "amountIn": request.source_amount,
                "recipient": request.recipient,
                "slippageTolerance": slippage_to_bps(slippage),
            },
        )

        # Newer deployments wrap the payload in {"code": 0, "data": {...}}
        summary = data.get("routeSummary") or (data.get("data") or {}).get("routeSummary")
        if not summary:
            raise ProviderError(self.name, "response missing 'routeSummary'")
        dest_amount = require(summary, "amountOut", self.name)

        return Quote(
            provider_id=self.name,
            dest_amount=dest_amount,
            dest_amount_min=min_amount(dest_amount, slippage, summary.get("amountOutMin")),
            estimated_gas=gas_units(summary.get("gas"), default=300_000),
            liquidity_score=liquidity_score(summary.get("swaps")),
            price_impact_percent=percent_from_fraction(summary.get("priceImpact") or 0),
            execution_payload={
                "transactionRequest": {
                    "to": summary.get("to") or data.get("routerAddress"),
                    "data": summary.get("data"),
                    "value": summary.get("value") or "0",
                    "from": request.requester_address,
                    "gasLimit": summary.get("gas"),
                },
                "routeSummary": summary,
            },
        )
