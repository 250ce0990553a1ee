"""Chain metadata: native placeholders, wrapped native tokens, AMM deployments and RPC endpoints."""

import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from .errors import UnsupportedChainError

NATIVE_PLACEHOLDER = '0x0000000000000000000000000000000000000000'
NATIVE_PLACEHOLDER_EEEE = '0xeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeeee'
NATIVE_ADDRESSES = frozenset({NATIVE_PLACEHOLDER, NATIVE_PLACEHOLDER_EEEE})

SOLANA_CHAIN_ID = 101
SOLANA_NATIVE_MINT = 'So11111111111111111111111111111111111111112'

_EVM_ADDRESS_RE = re.compile(r'^0x[0-9a-fA-F]{40}$')


@dataclass(frozen=True)
class AmmConfig:
    """A Uniswap-V2 style deployment the pathfinder can route through."""

    dex_name: str
    factory: str
    router: str
    wrapped_native: str
    reference_assets: Tuple[str, ...] = ()
    fee_numerator: int = 997
    fee_denominator: int = 1000

    @property
    def intermediates(self) -> List[str]:
        """Wrapped native first, then the curated reference assets."""
        seen = []
        for token in (self.wrapped_native, *self.reference_assets):
            lowered = token.lower()
            if lowered not in seen:
                seen.append(lowered)
        return seen


CHAIN_METADATA: Dict[int, Dict[str, Any]] = {
    1: {
        'name': 'Ethereum',
        'native_symbol': 'ETH',
        'native_decimals': 18,
        'rpc_urls': [
            'https://eth.llamarpc.com',
            'https://rpc.ankr.com/eth',
            'https://ethereum.publicnode.com',
        ],
    },
    56: {
        'name': 'BNB Smart Chain',
        'native_symbol': 'BNB',
        'native_decimals': 18,
        'rpc_urls': [
            'https://bsc-dataseed.binance.org',
            'https://bsc-dataseed1.defibit.io',
            'https://bsc-dataseed1.ninicoin.io',
            'https://bsc.publicnode.com',
            'https://bsc.llamarpc.com',
            'https://rpc.ankr.com/bsc',
        ],
    },
    10: {
        'name': 'Optimism',
        'native_symbol': 'ETH',
        'native_decimals': 18,
        'rpc_urls': [
            'https://mainnet.optimism.io',
            'https://rpc.ankr.com/optimism',
            'https://optimism.publicnode.com',
        ],
    },
    137: {
        'name': 'Polygon',
        'native_symbol': 'MATIC',
        'native_decimals': 18,
        'rpc_urls': [
            'https://polygon-rpc.com',
            'https://rpc.ankr.com/polygon',
            'https://polygon-bor.publicnode.com',
        ],
    },
    8453: {
        'name': 'Base',
        'native_symbol': 'ETH',
        'native_decimals': 18,
        'rpc_urls': [
            'https://mainnet.base.org',
            'https://base.llamarpc.com',
            'https://base.publicnode.com',
        ],
    },
    42161: {
        'name': 'Arbitrum',
        'native_symbol': 'ETH',
        'native_decimals': 18,
        'rpc_urls': [
            'https://arb1.arbitrum.io/rpc',
            'https://rpc.ankr.com/arbitrum',
            'https://arbitrum-one.publicnode.com',
        ],
    },
    SOLANA_CHAIN_ID: {
        'name': 'Solana',
        'native_symbol': 'SOL',
        'native_decimals': 9,
        'chain_type': 'solana',
        'rpc_urls': [],
    },
}

_SUSHI_FACTORY = '0xc35DADB65012eC5796536bD9864eD8773aBc74C4'
_SUSHI_ROUTER = '0xd9e1cE17f2641f24aE83637ab66a2cca9C378B9F'

AMM_CONFIGS: Dict[int, AmmConfig] = {
    1: AmmConfig(
        dex_name='Uniswap V2',
        factory='0x5C69bEe701ef814a2B6a3EDD4B1652CB9cc5aA6f',
        router='0x7a250d5630B4cF539739dF2C5dAcb4c659F2488D',
        wrapped_native='0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2',
        reference_assets=(
            '0xdAC17F958D2ee523a2206206994597C13D831ec7',  # USDT
            '0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48',  # USDC
            '0x6B175474E89094C44Da98b954EedeAC495271d0F',  # DAI
        ),
    ),
    56: AmmConfig(
        dex_name='PancakeSwap V2',
        factory='0xcA143Ce32Fe78f1f7019d7d551a6402fC4550CDc',
        router='0x10ED43C718714eb63d5aA57B78B54704E256024E',
        wrapped_native='0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c',
        reference_assets=(
            '0x0E09FaBB73Bd3Ade0a17ECC321fD13a19e81cE82',  # CAKE
            '0x55d398326f99059fF775485246999027B3197955',  # USDT
            '0xe9e7CEA3DedcA5984780Bafc599bD69ADd087D56',  # BUSD
            '0x8AC76a51cc950d9822D68b83fE1Ad97B32Cd580d',  # USDC
            '0x50c5725949A6F0c72E6C4a641F24049A917E0Cb6',  # FDUSD
        ),
    ),
    10: AmmConfig(
        dex_name='SushiSwap V2',
        factory=_SUSHI_FACTORY,
        router=_SUSHI_ROUTER,
        wrapped_native='0x4200000000000000000000000000000000000006',
        reference_assets=(
            '0x0b2C639c533813f4Aa9D7837CAf62653d097Ff85',  # USDC
        ),
    ),
    137: AmmConfig(
        dex_name='SushiSwap V2',
        factory=_SUSHI_FACTORY,
        router='0x1b02dA8Cb0d097eB8D57A175b88c7D8b47997506',
        wrapped_native='0x0d500B1d8E8eF31E21C99d1Db9A6444d3ADf1270',
        reference_assets=(
            '0xc2132D05D31c914a87C6611C10748AEb04B58e8F',  # USDT
            '0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174',  # USDC
        ),
    ),
    8453: AmmConfig(
        dex_name='SushiSwap V2',
        factory='0x71524B4f93c58fcbF659783284E38825f0622859',
        router='0x6BDED42c6DA8FBf0d2bA55B2fa120C5e0c8D7891',
        wrapped_native='0x4200000000000000000000000000000000000006',
        reference_assets=(
            '0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913',  # USDC
        ),
    ),
    42161: AmmConfig(
        dex_name='SushiSwap V2',
        factory='0xf1D7CC64Fb4452F05c498126312eBE29f30Fb000',
        router=_SUSHI_ROUTER,
        wrapped_native='0x82aF49447D8a07e3bd95BD0d56f35241523fBab1',
        reference_assets=(
            '0xaf88d065e77c8cC2239327C5EDb3A432268e5831',  # USDC
        ),
    ),
}


def is_evm_address(address: Optional[str]) -> bool:
    return bool(address) and bool(_EVM_ADDRESS_RE.match(address))


def normalize_address(address: str) -> str:
    """Lower-case 0x-hex addresses; other formats (base58) keep their case."""
    address = (address or '').strip()
    if address[:2].lower() == '0x':
        return address.lower()
    return address


def is_native(address: Optional[str]) -> bool:
    if not address:
        return False
    return address.strip().lower() in NATIVE_ADDRESSES


def chain_name(chain_id: int) -> str:
    meta = CHAIN_METADATA.get(chain_id)
    return meta['name'] if meta else f'chain-{chain_id}'


def native_decimals(chain_id: int) -> int:
    meta = CHAIN_METADATA.get(chain_id) or {}
    return int(meta.get('native_decimals', 18))


def default_rpc_urls(chain_id: int) -> List[str]:
    meta = CHAIN_METADATA.get(chain_id) or {}
    return list(meta.get('rpc_urls', []))


def get_amm_config(chain_id: int) -> AmmConfig:
    config = AMM_CONFIGS.get(chain_id)
    if config is None:
        raise UnsupportedChainError(chain_id)
    return config


__all__ = [
    'NATIVE_PLACEHOLDER',
    'NATIVE_PLACEHOLDER_EEEE',
    'NATIVE_ADDRESSES',
    'SOLANA_CHAIN_ID',
    'SOLANA_NATIVE_MINT',
    'AmmConfig',
    'CHAIN_METADATA',
    'AMM_CONFIGS',
    'is_evm_address',
    'normalize_address',
    'is_native',
    'chain_name',
    'native_decimals',
    'default_rpc_urls',
    'get_amm_config',
]
