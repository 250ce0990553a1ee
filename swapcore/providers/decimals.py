"""Token decimals lookup used to enrich quotes for display."""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Tuple

from ..core.chains import SOLANA_CHAIN_ID, is_native, native_decimals, normalize_address
from ..core.errors import RpcError
from ..core.pathfinder import abi
from ..core.pathfinder.rpc import RpcClient

logger = logging.getLogger(__name__)

DEFAULT_DECIMALS = 18

KNOWN_DECIMALS: Dict[Tuple[int, str], int] = {
    (1, "0xa0b86991c6218b36c1d19d4a2e9eb0ce3606eb48"): 6,  # USDC
    (1, "0xdac17f958d2ee523a2206206994597c13d831ec7"): 6,  # USDT
    (1, "0x6b175474e89094c44da98b954eedeac495271d0f"): 18,  # DAI
    (56, "0x55d398326f99059ff775485246999027b3197955"): 18,  # USDT
    (56, "0x8ac76a51cc950d9822d68b83fe1ad97b32cd580d"): 18,  # USDC
    (56, "0xe9e7cea3dedca5984780bafc599bd69add087d56"): 18,  # BUSD
    (137, "0x2791bca1f2de4661ed88a30c99a7a9449aa84174"): 6,  # USDC.e
    (137, "0xc2132d05d31c914a87c6611c10748aeb04b58e8f"): 6,  # USDT
    (10, "0x0b2c639c533813f4aa9d7837caf62653d097ff85"): 6,  # USDC
    (8453, "0x833589fcd6edb6e08f4c7c32d4f71b54bda02913"): 6,  # USDC
    (42161, "0xaf88d065e77c8cc2239327c5edb3a432268e5831"): 6,  # USDC
    (SOLANA_CHAIN_ID, "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"): 6,  # USDC
    (SOLANA_CHAIN_ID, "So11111111111111111111111111111111111111112"): 9,  # wSOL
}


class DecimalsResolver:
    """``decimals()`` via eth_call, memoized per (chain, token).

    Never raises: unknown chains and failed reads resolve to 18.
    """

    def __init__(self, rpc_clients: Optional[Mapping[int, RpcClient]] = None, default: int = DEFAULT_DECIMALS) -> None:
        self.rpc_clients: Dict[int, RpcClient] = dict(rpc_clients or {})
        self.default = default
        self._memo: Dict[Tuple[int, str], int] = {}

    async def decimals_of(self, token: str, chain_id: int) -> int:
        if is_native(token):
            return native_decimals(chain_id)

        key = (chain_id, normalize_address(token))
        if key in KNOWN_DECIMALS:
            return KNOWN_DECIMALS[key]
        if key in self._memo:
            return self._memo[key]

        rpc = self.rpc_clients.get(chain_id)
        if rpc is None:
            return self.default

        try:
            value = abi.decode_uint(await rpc.eth_call(key[1], abi.encode_decimals()))
        except (RpcError, ValueError) as exc:
            logger.debug("decimals() failed for %s on chain %s: %s", token, chain_id, exc)
            return self.default

        if value > 255:
            return self.default
        self._memo[key] = value
        return value
