"""Relay adapter for bridge and same-chain quotes (https://api.relay.link)."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..config import settings
from ..core.chains import NATIVE_PLACEHOLDER
from ..core.errors import ProviderError
from ..core.models import Quote, TradeRequest
from .base import HttpQuoteProvider, gas_units, min_amount, native_for_api, percent, slippage_for


def _transactions(steps: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    transactions: List[Dict[str, Any]] = []
    for step in steps:
        for item in step.get("items", []) or []:
            data = item.get("data") or {}
            if isinstance(data, dict) and "to" in data and ("data" in data or "value" in data):
                transactions.append(
                    {
                        "step_id": step.get("id"),
                        "action": step.get("action"),
                        "data": data,
                        "check": item.get("check"),
                    }
                )
    return transactions


class RelayProvider(HttpQuoteProvider):
    """Relay quotes; native currency is the zero address on Relay."""

    name = "relay"
    timeout_s = 8
    cross_chain = True
    default_base_urls = ["https://api.relay.link"]

    def __init__(self, *, base_url: Optional[str] = None, **kwargs: Any) -> None:
        super().__init__(base_url=base_url or settings.relay_base_url or None, **kwargs)

    def _headers(self) -> Dict[str, str]:
        return {
            "accept": "application/json, text/plain, */*",
            "content-type": "application/json",
            "origin": "https://relay.link",
        }

    async def _quote(self, request: TradeRequest) -> Optional[Quote]:
        slippage = slippage_for(request)
        payload = {
            "user": request.requester_address,
            "originChainId": request.source_chain_id,
            "destinationChainId": request.dest_chain_id,
            "originCurrency": native_for_api(request.source_token, NATIVE_PLACEHOLDER),
            "destinationCurrency": native_for_api(request.dest_token, NATIVE_PLACEHOLDER),
            "recipient": request.recipient,
            "tradeType": "EXACT_INPUT",
            "amount": request.source_amount,
            "referrer": settings.integrator_name,
            "slippageTolerance": str(round(slippage * 100)),
            "useExternalLiquidity": False,
        }
        data = await self._post_json("/quote", payload)

        details = data.get("details") or {}
        currency_out = details.get("currencyOut") or {}
        dest_amount = currency_out.get("amount")
        if dest_amount in (None, ""):
            raise ProviderError(self.name, "response missing details.currencyOut.amount")

        steps = data.get("steps") or []
        transactions = _transactions(steps)
        primary = transactions[0]["data"] if transactions else {}
        total_impact = (details.get("totalImpact") or {}).get("percent")

        return Quote(
            provider_id=self.name,
            dest_amount=dest_amount,
            dest_amount_min=min_amount(dest_amount, slippage, currency_out.get("minimumAmount")),
            estimated_gas=gas_units(primary.get("gas")),
            price_impact_percent=percent(total_impact),
            execution_payload={
                "requestId": (steps[0].get("requestId") if steps else None) or data.get("requestId"),
                "transactions": transactions,
                "timeEstimate": details.get("timeEstimate"),
            },
        )
