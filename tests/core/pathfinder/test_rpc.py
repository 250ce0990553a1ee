from unittest.mock import AsyncMock

import httpx
import pytest

from swapcore.core.errors import ContractRevertError, RpcError
from swapcore.core.pathfinder.rpc import RpcClient

URLS = ["https://rpc-one.example", "https://rpc-two.example/"]


def make_client(*responses) -> RpcClient:
    client = RpcClient(56, URLS, timeout_s=1)
    client._post = AsyncMock(side_effect=list(responses))
    return client


@pytest.mark.asyncio
async def test_falls_back_on_transport_error():
    client = make_client(httpx.ConnectError("boom"), {"jsonrpc": "2.0", "id": 1, "result": "0x01"})

    assert await client.eth_call("0xpair", "0x0902f1ac") == "0x01"
    urls = [call.args[0] for call in client._post.await_args_list]
    assert urls == ["https://rpc-one.example", "https://rpc-two.example"]


@pytest.mark.asyncio
async def test_falls_back_on_non_revert_rpc_error():
    client = make_client(
        {"jsonrpc": "2.0", "id": 1, "error": {"code": -32005, "message": "rate limited"}},
        {"jsonrpc": "2.0", "id": 1, "result": "0x02"},
    )
    assert await client.request("eth_call", []) == "0x02"


@pytest.mark.asyncio
async def test_revert_is_raised_without_trying_other_endpoints():
    client = make_client(
        {"jsonrpc": "2.0", "id": 1, "error": {"code": 3, "message": "execution reverted: Pancake: K"}},
        {"jsonrpc": "2.0", "id": 1, "result": "0x02"},
    )

    with pytest.raises(ContractRevertError) as exc_info:
        await client.eth_call("0xrouter", "0xd06ca61f")

    assert exc_info.value.reason == "Pancake: K"
    assert client._post.await_count == 1


@pytest.mark.asyncio
async def test_all_endpoints_failing_raises_rpc_error():
    client = make_client(httpx.ReadTimeout("slow"), ValueError("not json"))

    with pytest.raises(RpcError):
        await client.request("eth_call", [])


@pytest.mark.asyncio
async def test_eth_call_rejects_non_string_result():
    client = make_client({"jsonrpc": "2.0", "id": 1, "result": None})
    with pytest.raises(RpcError):
        await client.eth_call("0xpair", "0x")


def test_requires_at_least_one_endpoint():
    with pytest.raises(ValueError):
        RpcClient(56, [])
