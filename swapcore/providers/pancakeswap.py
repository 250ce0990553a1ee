"""PancakeSwap smart-router API adapter (the native DEX on BNB Chain)."""

from typing import FrozenSet, Optional

from ..core.models import Quote, TradeRequest
from ..core.amounts import slippage_to_bps
from .base import HttpQuoteProvider, gas_units, min_amount, native_for_api, require, slippage_for


class PancakeSwapProvider(HttpQuoteProvider):
    name = "pancakeswap"
    supported_chains: FrozenSet[int] = frozenset({1, 56, 8453, 42161})
    default_base_urls = ["https://api.pancakeswap.com"]

    async def _quote(self, request: TradeRequest) -> Optional[Quote]:
        slippage = slippage_for(request)
        data = await self._get_json(
            "/v3/quote",
            {
                "chainId": request.source_chain_id,
                "inputCurrency": native_for_api(request.source_token),
                "outputCurrency": native_for_api(request.dest_token),
                "amount": request.source_amount,
                "trader": request.requester_address,
                "slippageTolerance": slippage_to_bps(slippage),
            },
        )
        dest_amount = require(data, "outputAmount", self.name)

        return Quote(
            provider_id=self.name,
            dest_amount=dest_amount,
            dest_amount_min=min_amount(dest_amount, slippage),
            estimated_gas=gas_units(data.get("estimatedGas"), default=300_000),
            execution_payload={
                "transactionRequest": {
                    "to": data.get("to") or data.get("routerAddress"),
                    "data": data.get("data") or data.get("calldata"),
                    "value": data.get("value") or "0",
                    "from": request.requester_address,
                    "gasLimit": data.get("estimatedGas"),
                },
            },
        )
