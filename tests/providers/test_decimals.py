from unittest.mock import AsyncMock, Mock

import pytest

from swapcore.core.chains import NATIVE_PLACEHOLDER, SOLANA_CHAIN_ID
from swapcore.core.errors import RpcError
from swapcore.providers.decimals import DecimalsResolver

from fakes import TOKEN_A


def rpc_returning(*results):
    rpc = Mock()
    rpc.eth_call = AsyncMock(side_effect=list(results))
    return rpc


@pytest.mark.asyncio
async def test_native_and_known_tokens_need_no_rpc():
    resolver = DecimalsResolver()
    assert await resolver.decimals_of(NATIVE_PLACEHOLDER, 56) == 18
    assert await resolver.decimals_of("0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48", 1) == 6
    assert await resolver.decimals_of("EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v", SOLANA_CHAIN_ID) == 6


@pytest.mark.asyncio
async def test_decimals_read_on_chain_is_memoized():
    rpc = rpc_returning("0x" + format(8, "064x"))
    resolver = DecimalsResolver({56: rpc})

    assert await resolver.decimals_of(TOKEN_A, 56) == 8
    assert await resolver.decimals_of(TOKEN_A, 56) == 8
    assert rpc.eth_call.await_count == 1
    assert rpc.eth_call.await_args.args[1] == "0x313ce567"


@pytest.mark.asyncio
async def test_failures_fall_back_to_default():
    resolver = DecimalsResolver({56: rpc_returning(RpcError("down"), "0x" + format(1000, "064x"))})

    assert await resolver.decimals_of(TOKEN_A, 56) == 18
    assert await resolver.decimals_of(TOKEN_A, 56) == 18
    assert await resolver.decimals_of(TOKEN_A, 137) == 18
