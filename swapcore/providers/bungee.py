"""Bungee (Socket) adapter for cross-chain quotes."""

from typing import Any, Dict, List, Optional

from ..config import settings
from ..core.amounts import to_int
from ..core.errors import ProviderError
from ..core.models import Quote, TradeRequest
from .base import HttpQuoteProvider, gas_units, min_amount, native_for_api, slippage_for


class BungeeProvider(HttpQuoteProvider):
    """Thin adapter over the Bungee public quote API."""

    name = "bungee"
    timeout_s = 8
    same_chain = False
    cross_chain = True
    default_base_urls = [
        "https://public-backend.bungee.exchange",
        "https://api.socket.tech",
    ]

    def __init__(self, api_key: Optional[str] = None, *, base_url: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(base_url=base_url or settings.bungee_base_url or None, **kwargs)
        self.api_key = api_key if api_key is not None else settings.bungee_api_key

    def _headers(self) -> Dict[str, str]:
        headers = super()._headers()
        if self.api_key:
            headers["API-KEY"] = self.api_key
        return headers

    @staticmethod
    def _pick_route(result: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        auto = result.get("autoRoute")
        if isinstance(auto, dict) and (auto.get("output") or {}).get("amount"):
            return auto
        manual: List[Dict[str, Any]] = [
            route for route in result.get("manualRoutes") or [] if (route.get("output") or {}).get("amount")
        ]
        if not manual:
            return None
        return max(manual, key=lambda route: to_int(route["output"]["amount"]))

    async def _quote(self, request: TradeRequest) -> Optional[Quote]:
        slippage = slippage_for(request)
        data = await self._get_json(
            "/api/v1/bungee/quote",
            {
                "originChainId": str(request.source_chain_id),
                "destinationChainId": str(request.dest_chain_id),
                "inputToken": native_for_api(request.source_token),
                "outputToken": native_for_api(request.dest_token),
                "inputAmount": request.source_amount,
                "userAddress": request.requester_address,
                "receiverAddress": request.recipient,
                "slippage": slippage,
            },
        )
        result = data.get("result")
        if not isinstance(result, dict):
            raise ProviderError(self.name, "response missing 'result'")
        route = self._pick_route(result)
        if route is None:
            return None

        output = route["output"]
        dest_amount = output["amount"]
        gas_fee = route.get("gasFee") or {}

        return Quote(
            provider_id=self.name,
            dest_amount=dest_amount,
            dest_amount_min=min_amount(dest_amount, slippage, output.get("minAmountOut")),
            estimated_gas=gas_units(gas_fee.get("gasLimit"), route.get("estimatedGas")),
            execution_payload={
                "quoteId": route.get("quoteId"),
                "routeId": route.get("requestHash") or route.get("routeId"),
                "txData": route.get("txData"),
                "approvalData": route.get("approvalData"),
            },
        )
