"""ParaSwap adapter: price route first, then transaction build."""

from typing import Any, Awaitable, Callable, Optional

from ..core.models import Quote, TradeRequest
from ..core.amounts import slippage_to_bps
from .base import (
    HttpQuoteProvider,
    gas_units,
    min_amount,
    native_for_api,
    require,
    slippage_for,
)

DecimalsLookup = Callable[[str, int], Awaitable[int]]


class ParaSwapProvider(HttpQuoteProvider):
    name = "paraswap"
    default_base_urls = ["https://apiv5.paraswap.io"]

    def __init__(self, decimals_of: Optional[DecimalsLookup] = None, partner: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._decimals_of = decimals_of
        self.partner = partner

    async def _decimals(self, token: str, chain_id: int) -> int:
        if self._decimals_of is None:
            return 18
        return await self._decimals_of(token, chain_id)

    async def _quote(self, request: TradeRequest) -> Optional[Quote]:
        slippage = slippage_for(request)
        src_token = native_for_api(request.source_token)
        dest_token = native_for_api(request.dest_token)
        src_decimals = await self._decimals(request.source_token, request.source_chain_id)
        dest_decimals = await self._decimals(request.dest_token, request.dest_chain_id)

        prices = await self._get_json(
            "/prices",
            {
                "srcToken": src_token,
                "destToken": dest_token,
                "srcDecimals": src_decimals,
                "destDecimals": dest_decimals,
                "amount": request.source_amount,
                "side": "SELL",
                "network": request.source_chain_id,
                "userAddress": request.requester_address,
            },
        )
        price_route = require(prices, "priceRoute", self.name)
        dest_amount = require(price_route, "destAmount", self.name)

        tx = await self._post_json(
            f"/transactions/{request.source_chain_id}",
            {
                "srcToken": src_token,
                "destToken": dest_token,
                "srcAmount": request.source_amount,
                "srcDecimals": src_decimals,
                "destDecimals": dest_decimals,
                "priceRoute": price_route,
                "userAddress": request.requester_address,
                "receiver": request.recipient_address,
                "partner": self.partner or "swapcore",
                "slippage": slippage_to_bps(slippage),
            },
            params={"ignoreChecks": "true"},
        )

        return Quote(
            provider_id=self.name,
            dest_amount=dest_amount,
            dest_amount_min=min_amount(dest_amount, slippage),
            estimated_gas=gas_units(price_route.get("gasCost"), tx.get("gas")),
            execution_payload={
                "transactionRequest": {
                    "to": tx.get("to"),
                    "data": tx.get("data"),
                    "value": tx.get("value"),
                    "from": request.requester_address,
                    "gasLimit": price_route.get("gasCost"),
                },
                "tokenTransferProxy": price_route.get("tokenTransferProxy"),
            },
        )
