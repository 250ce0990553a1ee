"""On-chain reads against a Uniswap-V2 style factory/router pair."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence, Tuple

from ...cache import TTLCache
from ..chains import NATIVE_PLACEHOLDER, AmmConfig
from ..models import Pool
from . import abi
from .rpc import RpcClient

logger = logging.getLogger(__name__)


class AmmReader(ABC):
    """Read-only view of one AMM deployment.

    ``get_amounts_out`` reverts (raises ``ContractRevertError``) exactly like
    the deployed router does for invalid or under-liquid paths.
    """

    def __init__(self, config: AmmConfig) -> None:
        self.config = config

    @abstractmethod
    async def get_pair(self, token_a: str, token_b: str) -> Optional[str]:
        ...

    @abstractmethod
    async def get_reserves(self, pair_address: str) -> Tuple[int, int, str]:
        """(reserve0, reserve1, token0)."""

    @abstractmethod
    async def get_amounts_out(self, amount_in: int, path: Sequence[str]) -> List[int]:
        ...

    @abstractmethod
    async def allowance(self, token: str, owner: str, spender: str) -> int:
        ...

    async def get_pool(self, token_a: str, token_b: str) -> Optional[Pool]:
        pair = await self.get_pair(token_a, token_b)
        if pair is None:
            return None
        reserve0, reserve1, token0 = await self.get_reserves(pair)
        token0 = token0.lower()
        token1 = token_b.lower() if token0 == token_a.lower() else token_a.lower()
        return Pool(
            pair_address=pair,
            token0=token0,
            token1=token1,
            reserve0=reserve0,
            reserve1=reserve1,
        )


def pair_key(token_a: str, token_b: str) -> Tuple[str, str]:
    a, b = token_a.lower(), token_b.lower()
    return (a, b) if a <= b else (b, a)


class RpcAmmReader(AmmReader):
    """AmmReader backed by eth_call through an :class:`RpcClient`."""

    def __init__(
        self,
        config: AmmConfig,
        rpc: RpcClient,
        *,
        pair_cache_ttl: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(config)
        self.rpc = rpc
        # Negative lookups are stored as the zero address
        self._pairs: TTLCache[str] = TTLCache(default_ttl=pair_cache_ttl, max_size=4096, clock=clock)

    async def get_pair(self, token_a: str, token_b: str) -> Optional[str]:
        key = pair_key(token_a, token_b)
        cached = self._pairs.get(key)
        if cached is None:
            result = await self.rpc.eth_call(self.config.factory, abi.encode_get_pair(*key))
            cached = abi.decode_address(result).lower()
            self._pairs.set(key, cached)
        if cached == NATIVE_PLACEHOLDER:
            return None
        return cached

    async def get_reserves(self, pair_address: str) -> Tuple[int, int, str]:
        reserves_raw = await self.rpc.eth_call(pair_address, abi.encode_get_reserves())
        token0_raw = await self.rpc.eth_call(pair_address, abi.encode_token0())
        reserve0, reserve1 = abi.decode_reserves(reserves_raw)
        return reserve0, reserve1, abi.decode_address(token0_raw)

    async def get_amounts_out(self, amount_in: int, path: Sequence[str]) -> List[int]:
        result = await self.rpc.eth_call(self.config.router, abi.encode_get_amounts_out(amount_in, path))
        return abi.decode_uint_array(result)

    async def allowance(self, token: str, owner: str, spender: str) -> int:
        result = await self.rpc.eth_call(token, abi.encode_allowance(owner, spender))
        return abi.decode_uint(result)
