"""LI.FI quote adapter (same-chain and cross-chain)."""

from typing import Any, Dict, Optional

from ..config import settings
from ..core.models import Quote, TradeRequest
from .base import (
    HttpQuoteProvider,
    gas_units,
    liquidity_score,
    min_amount,
    native_for_api,
    require,
    slippage_for,
)


class LifiProvider(HttpQuoteProvider):
    """Thin adapter over https://li.quest/v1/quote."""

    name = "lifi"
    timeout_s = 6
    cross_chain = True
    default_base_urls = ["https://li.quest"]

    def __init__(self, api_key: Optional[str] = None, integrator: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.api_key = api_key if api_key is not None else settings.lifi_api_key
        self.integrator = integrator or settings.integrator_name

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        if self.api_key:
            headers["x-lifi-api-key"] = self.api_key
        return headers

    async def _quote(self, request: TradeRequest) -> Optional[Quote]:
        slippage = slippage_for(request)
        params = {
            "fromChain": request.source_chain_id,
            "toChain": request.dest_chain_id,
            "fromToken": native_for_api(request.source_token),
            "toToken": native_for_api(request.dest_token),
            "fromAmount": request.source_amount,
            "fromAddress": request.requester_address,
            "toAddress": request.recipient_address,
            "slippage": slippage / 100,
            "integrator": self.integrator,
        }
        data = await self._get_json("/v1/quote", params)

        estimate = require(data, "estimate", self.name)
        dest_amount = require(estimate, "toAmount", self.name)
        gas_costs = estimate.get("gasCosts") or [{}]

        return Quote(
            provider_id=self.name,
            dest_amount=dest_amount,
            dest_amount_min=min_amount(dest_amount, slippage, estimate.get("toAmountMin")),
            estimated_gas=gas_units(gas_costs[0].get("estimate")),
            liquidity_score=liquidity_score(data.get("includedSteps")),
            execution_payload={
                "tool": data.get("tool"),
                "transactionRequest": data.get("transactionRequest"),
                "approvalAddress": estimate.get("approvalAddress"),
            },
        )
