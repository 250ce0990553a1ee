"""1inch swap API adapter."""

from typing import Any, Dict, Optional

from ..config import settings
from ..core.models import Quote, TradeRequest
from .base import HttpQuoteProvider, gas_units, min_amount, native_for_api, require, slippage_for


class OneInchProvider(HttpQuoteProvider):
    name = "1inch"
    default_base_urls = ["https://api.1inch.dev"]

    def __init__(self, api_key: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.api_key = api_key if api_key is not None else settings.oneinch_api_key

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _quote(self, request: TradeRequest) -> Optional[Quote]:
        slippage = slippage_for(request)
        params = {
            "src": native_for_api(request.source_token),
            "dst": native_for_api(request.dest_token),
            "amount": request.source_amount,
            "from": request.requester_address,
            "receiver": request.recipient_address,
            "slippage": slippage,
            "disableEstimate": "false",
            "allowPartialFill": "false",
        }
        data = await self._get_json(f"/swap/v6.0/{request.source_chain_id}/swap", params)

        dest_amount = data.get("dstAmount") or require(data, "toAmount", self.name)
        tx = data.get("tx") or {}

        return Quote(
            provider_id=self.name,
            dest_amount=dest_amount,
            dest_amount_min=min_amount(dest_amount, slippage),
            estimated_gas=gas_units(tx.get("gas"), data.get("gas")),
            execution_payload={
                "transactionRequest": {
                    "to": tx.get("to"),
                    "data": tx.get("data"),
                    "value": tx.get("value"),
                    "from": tx.get("from"),
                    "gasLimit": tx.get("gas"),
                },
                "protocols": data.get("protocols"),
            },
        )
