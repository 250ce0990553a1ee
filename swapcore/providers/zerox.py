"""0x swap API adapter."""

from typing import Any, Dict, Optional

from ..config import settings
from ..core.models import Quote, TradeRequest
from .base import (
    HttpQuoteProvider,
    gas_units,
    min_amount,
    native_for_api,
    percent,
    require,
    slippage_for,
)


class ZeroExProvider(HttpQuoteProvider):
    name = "0x"
    default_base_urls = ["https://api.0x.org"]

    def __init__(self, api_key: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.api_key = api_key if api_key is not None else settings.zerox_api_key

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        if self.api_key:
            headers["0x-api-key"] = self.api_key
        return headers

    async def _quote(self, request: TradeRequest) -> Optional[Quote]:
        slippage = slippage_for(request)
        params = {
            "chainId": request.source_chain_id,
            "sellToken": native_for_api(request.source_token),
            "buyToken": native_for_api(request.dest_token),
            "sellAmount": request.source_amount,
            "takerAddress": request.requester_address,
            "slippagePercentage": slippage / 100,
        }
        data = await self._get_json("/swap/v1/quote", params)

        dest_amount = require(data, "buyAmount", self.name)
        return Quote(
            provider_id=self.name,
            dest_amount=dest_amount,
            dest_amount_min=min_amount(dest_amount, slippage),
            estimated_gas=gas_units(data.get("estimatedGas"), data.get("gas")),
            price_impact_percent=percent(data.get("estimatedPriceImpact")),
            execution_payload={
                "transactionRequest": {
                    "to": data.get("to"),
                    "data": data.get("data"),
                    "value": data.get("value"),
                    "from": request.requester_address,
                    "gasLimit": data.get("gas"),
                },
                "allowanceTarget": data.get("allowanceTarget"),
            },
        )
