"""OpenOcean aggregator adapter."""

from typing import Optional

from ..core.errors import ProviderError
from ..core.models import Quote, TradeRequest
from .base import (
    HttpQuoteProvider,
    gas_units,
    liquidity_score,
    min_amount,
    native_for_api,
    percent,
    require,
    slippage_for,
)


class OpenOceanProvider(HttpQuoteProvider):
    name = "openocean"
    default_base_urls = ["https://open-api.openocean.finance"]

    async def _quote(self, request: TradeRequest) -> Optional[Quote]:
        slippage = slippage_for(request)
        data = await self._get_json(
            f"/v3/{request.source_chain_id}/swap_quote",
            {
                "inTokenAddress": native_for_api(request.source_token),
                "outTokenAddress": native_for_api(request.dest_token),
                "amount": request.source_amount,
                "slippage": slippage,
                "gasPrice": 5,
                "account": request.requester_address,
            },
        )
        body = data.get("data")
        if not isinstance(body, dict):
            raise ProviderError(self.name, "response missing 'data'")
        dest_amount = require(body, "outAmount", self.name)
        path = body.get("path")
        steps = path.get("routes") if isinstance(path, dict) else path

        return Quote(
            provider_id=self.name,
            dest_amount=dest_amount,
            dest_amount_min=min_amount(dest_amount, slippage, body.get("minOutAmount")),
            estimated_gas=gas_units(body.get("estimatedGas"), body.get("gas"), default=300_000),
            liquidity_score=liquidity_score(steps),
            price_impact_percent=percent(str(body.get("price_impact") or "0").rstrip("%")),
            execution_payload={
                "transactionRequest": {
                    "to": body.get("to"),
                    "data": body.get("data"),
                    "value": body.get("value") or "0",
                    "from": request.requester_address,
                    "gasLimit": body.get("estimatedGas"),
                },
            },
        )
