"""Provider registry: which sources to ask, in which order, for a given trade."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from ...config import Settings, settings as default_settings
from ...providers import build_http_providers
from ...providers.base import QuoteProvider
from ...providers.onchain import OnchainProvider
from ..chains import AMM_CONFIGS, SOLANA_CHAIN_ID, default_rpc_urls
from ..errors import UnsupportedChainError
from ..models import TradeRequest
from ..pathfinder import Pathfinder, RpcAmmReader, RpcClient

logger = logging.getLogger(__name__)

CROSS_CHAIN_ORDER: List[str] = ["lifi", "relay", "bungee"]

# Native DEX first, then generic aggregators, the on-chain pathfinder last
NATIVE_DEX_ORDER: Dict[int, List[str]] = {
    56: ["pancakeswap"],
}
AGGREGATOR_ORDER: List[str] = [
    "1inch",
    "0x",
    "kyberswap",
    "lifi",
    "openocean",
    "paraswap",
    "pancakeswap",
    "relay",
    "onchain",
]
SAME_CHAIN_ORDER: Dict[int, List[str]] = {
    SOLANA_CHAIN_ID: ["jupiter"],
}


def _native_first(native: Sequence[str]) -> List[str]:
    return [*native, *(name for name in AGGREGATOR_ORDER if name not in native)]


class ProviderRegistry:
    def __init__(
        self,
        providers: Iterable[QuoteProvider],
        *,
        cross_chain_order: Optional[Sequence[str]] = None,
        same_chain_orders: Optional[Mapping[int, Sequence[str]]] = None,
        default_same_chain_order: Optional[Sequence[str]] = None,
    ) -> None:
        self._providers: Dict[str, QuoteProvider] = {}
        for provider in providers:
            if provider.name in self._providers:
                raise ValueError(f"Duplicate provider name: {provider.name}")
            self._providers[provider.name] = provider

        self.cross_chain_order = list(cross_chain_order if cross_chain_order is not None else CROSS_CHAIN_ORDER)
        if same_chain_orders is None:
            same_chain_orders = {
                **{chain_id: _native_first(names) for chain_id, names in NATIVE_DEX_ORDER.items()},
                **SAME_CHAIN_ORDER,
            }
        self.same_chain_orders = {chain_id: list(names) for chain_id, names in same_chain_orders.items()}
        self.default_same_chain_order = list(
            default_same_chain_order if default_same_chain_order is not None else AGGREGATOR_ORDER
        )

    @property
    def names(self) -> List[str]:
        return list(self._providers)

    def get(self, name: str) -> Optional[QuoteProvider]:
        return self._providers.get(name)

    def order_for(self, request: TradeRequest) -> List[str]:
        if request.is_cross_chain:
            return self.cross_chain_order
        return self.same_chain_orders.get(request.source_chain_id, self.default_same_chain_order)

    def select(self, request: TradeRequest) -> List[QuoteProvider]:
        """Ordered providers able to serve the request."""
        selected = [
            self._providers[name]
            for name in self.order_for(request)
            if name in self._providers and self._providers[name].supports(request)
        ]
        if not selected:
            raise UnsupportedChainError(
                request.source_chain_id
                if not request.is_cross_chain
                else f"{request.source_chain_id}->{request.dest_chain_id}"
            )
        return selected

    @classmethod
    def from_settings(
        cls,
        config: Optional[Settings] = None,
        rpc_clients: Optional[Mapping[int, RpcClient]] = None,
        decimals_of=None,
    ) -> "ProviderRegistry":
        config = config or default_settings
        providers: List[QuoteProvider] = list(build_http_providers(config, decimals_of=decimals_of))
        if config.enable_onchain_pathfinder:
            providers.append(
                OnchainProvider(
                    build_pathfinder(config, rpc_clients),
                    fee_on_transfer_tokens=config.fee_on_transfer_tokens,
                    low_liquidity_threshold=config.low_liquidity_threshold,
                )
            )
        logger.info("Provider registry built with %s", ", ".join(provider.name for provider in providers))
        return cls(providers)


def build_rpc_clients(config: Optional[Settings] = None) -> Dict[int, RpcClient]:
    config = config or default_settings
    clients: Dict[int, RpcClient] = {}
    for chain_id in AMM_CONFIGS:
        urls = config.rpc_urls_for(chain_id, default_rpc_urls(chain_id))
        if urls:
            clients[chain_id] = RpcClient(chain_id, urls, timeout_s=config.rpc_timeout_seconds)
    return clients


def build_pathfinder(config: Optional[Settings] = None, rpc_clients: Optional[Mapping[int, RpcClient]] = None) -> Pathfinder:
    config = config or default_settings
    clients = rpc_clients if rpc_clients is not None else build_rpc_clients(config)
    readers = {
        chain_id: RpcAmmReader(AMM_CONFIGS[chain_id], client, pair_cache_ttl=config.pair_cache_ttl_seconds)
        for chain_id, client in clients.items()
        if chain_id in AMM_CONFIGS
    }
    return Pathfinder(readers, reserve_haircut_percent=config.reserve_estimate_haircut_percent)
