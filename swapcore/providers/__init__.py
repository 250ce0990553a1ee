from typing import List, Optional

from ..config import Settings, settings as default_settings
from .base import HttpQuoteProvider, QuoteProvider
from .bungee import BungeeProvider
from .jupiter import JupiterProvider
from .kyberswap import KyberSwapProvider
from .lifi import LifiProvider
from .oneinch import OneInchProvider
from .onchain import OnchainProvider
from .openocean import OpenOceanProvider
from .pancakeswap import PancakeSwapProvider
from .paraswap import ParaSwapProvider
from .relay import RelayProvider
from .zerox import ZeroExProvider


def build_http_providers(config: Optional[Settings] = None, decimals_of=None) -> List[QuoteProvider]:
    """Every off-chain adapter, configured from settings."""
    config = config or default_settings
    return [
        PancakeSwapProvider(),
        OneInchProvider(api_key=config.oneinch_api_key),
        ZeroExProvider(api_key=config.zerox_api_key),
        KyberSwapProvider(),
        LifiProvider(api_key=config.lifi_api_key, integrator=config.integrator_name),
        OpenOceanProvider(),
        ParaSwapProvider(decimals_of=decimals_of, partner=config.integrator_name),
        RelayProvider(base_url=config.relay_base_url or None),
        BungeeProvider(api_key=config.bungee_api_key, base_url=config.bungee_base_url or None),
        JupiterProvider(),
    ]


__all__ = [
    "QuoteProvider",
    "HttpQuoteProvider",
    "BungeeProvider",
    "JupiterProvider",
    "KyberSwapProvider",
    "LifiProvider",
    "OneInchProvider",
    "OnchainProvider",
    "OpenOceanProvider",
    "PancakeSwapProvider",
    "ParaSwapProvider",
    "RelayProvider",
    "ZeroExProvider",
    "build_http_providers",
]
