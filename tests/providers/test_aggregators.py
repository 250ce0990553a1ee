"""Response translation for each off-chain adapter, with the HTTP layer mocked out."""

from unittest.mock import AsyncMock

import pytest

from swapcore.core.chains import NATIVE_PLACEHOLDER, NATIVE_PLACEHOLDER_EEEE, SOLANA_CHAIN_ID, SOLANA_NATIVE_MINT
from swapcore.core.errors import ProviderError
from swapcore.providers import (
    BungeeProvider,
    JupiterProvider,
    KyberSwapProvider,
    LifiProvider,
    OneInchProvider,
    OpenOceanProvider,
    PancakeSwapProvider,
    ParaSwapProvider,
    RelayProvider,
    ZeroExProvider,
)

from fakes import OWNER, TOKEN_A, TOKEN_B, make_request

USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"


def stub_get(provider, response):
    provider._get_json = AsyncMock(return_value=response)
    return provider._get_json


@pytest.mark.asyncio
async def test_lifi_translation():
    provider = LifiProvider(api_key="key", integrator="tests")
    get_json = stub_get(
        provider,
        {
            "tool": "uniswap",
            "includedSteps": [{}],
            "transactionRequest": {"to": "0xdiamond"},
            "estimate": {
                "toAmount": "1000",
                "toAmountMin": "990",
                "gasCosts": [{"estimate": "150000"}],
                "approvalAddress": "0xapprove",
            },
        },
    )

    quote = await provider.quote(make_request(source_token=NATIVE_PLACEHOLDER, source_amount="5", slippage_percent=1))

    path, params = get_json.await_args.args
    assert path == "/v1/quote"
    assert params["fromToken"] == NATIVE_PLACEHOLDER_EEEE
    assert params["fromAmount"] == "5"
    assert params["slippage"] == pytest.approx(0.01)
    assert quote.provider_id == "lifi"
    assert quote.dest_amount == "1000"
    assert quote.dest_amount_min == "990"
    assert quote.estimated_gas == 150000
    assert quote.liquidity_score == 90
    assert quote.execution_payload["approvalAddress"] == "0xapprove"
    assert provider._headers()["x-lifi-api-key"] == "key"


@pytest.mark.asyncio
async def test_oneinch_translation():
    provider = OneInchProvider(api_key="secret")
    get_json = stub_get(provider, {"dstAmount": "2000", "tx": {"to": "0xrouter", "data": "0xdead", "value": "0", "gas": 210000}})

    quote = await provider.quote(make_request(slippage_percent=1))

    assert get_json.await_args.args[0] == "/swap/v6.0/56/swap"
    assert quote.dest_amount == "2000"
    assert quote.dest_amount_min == "1980"
    assert quote.estimated_gas == 210000
    assert quote.execution_payload["transactionRequest"]["to"] == "0xrouter"
    assert provider._headers()["Authorization"] == "Bearer secret"


@pytest.mark.asyncio
async def test_zerox_translation():
    provider = ZeroExProvider(api_key="k")
    stub_get(provider, {"buyAmount": "3000", "estimatedGas": "120000", "estimatedPriceImpact": "0.35", "to": "0xex"})

    quote = await provider.quote(make_request())

    assert quote.dest_amount == "3000"
    assert quote.estimated_gas == 120000
    assert quote.price_impact_percent == pytest.approx(0.35)


@pytest.mark.asyncio
async def test_zerox_missing_amount_is_a_provider_error():
    provider = ZeroExProvider(api_key="k")
    stub_get(provider, {"reason": "INSUFFICIENT_ASSET_LIQUIDITY"})

    with pytest.raises(ProviderError):
        await provider.quote(make_request())


@pytest.mark.asyncio
async def test_kyberswap_reads_wrapped_route_summary():
    provider = KyberSwapProvider()
    stub_get(
        provider,
        {
            "code": 0,
            "data": {
                "routerAddress": "0xkyber",
                "routeSummary": {"amountOut": "4000", "gas": "250000", "priceImpact": 0.012, "swaps": [[{}]]},
            },
        },
    )

    quote = await provider.quote(make_request())

    assert quote.dest_amount == "4000"
    assert quote.estimated_gas == 250000
    assert quote.price_impact_percent == pytest.approx(1.2)
    assert quote.liquidity_score == 90


@pytest.mark.asyncio
async def test_kyberswap_without_route_summary():
    provider = KyberSwapProvider()
    stub_get(provider, {"code": 4008, "message": "route not found"})

    with pytest.raises(ProviderError):
        await provider.quote(make_request())


@pytest.mark.asyncio
async def test_paraswap_prices_then_builds_transaction():
    decimals_of = AsyncMock(return_value=6)
    provider = ParaSwapProvider(decimals_of=decimals_of, partner="tests")
    get_json = stub_get(provider, {"priceRoute": {"destAmount": "5000", "gasCost": "180000", "tokenTransferProxy": "0xproxy"}})
    provider._post_json = AsyncMock(return_value={"to": "0xaugustus", "data": "0xcalldata", "value": "0"})

    quote = await provider.quote(make_request())

    assert get_json.await_args.args[1]["srcDecimals"] == 6
    post_path, body = provider._post_json.await_args.args
    assert post_path == "/transactions/56"
    assert body["partner"] == "tests"
    assert body["priceRoute"]["destAmount"] == "5000"
    assert quote.dest_amount == "5000"
    assert quote.estimated_gas == 180000
    assert quote.execution_payload["transactionRequest"]["to"] == "0xaugustus"


@pytest.mark.asyncio
async def test_openocean_translation():
    provider = OpenOceanProvider()
    stub_get(
        provider,
        {
            "code": 200,
            "data": {
                "outAmount": "6000",
                "minOutAmount": "5900",
                "estimatedGas": "200000",
                "price_impact": "-1.5%",
                "path": {"routes": [{}, {}]},
            },
        },
    )

    quote = await provider.quote(make_request())

    assert quote.dest_amount == "6000"
    assert quote.dest_amount_min == "5900"
    assert quote.price_impact_percent == pytest.approx(1.5)
    assert quote.liquidity_score == 80


@pytest.mark.asyncio
async def test_pancakeswap_translation_and_chain_support():
    provider = PancakeSwapProvider()
    get_json = stub_get(provider, {"outputAmount": "7000", "to": "0xsmartrouter", "calldata": "0xabc"})

    quote = await provider.quote(make_request())
    assert quote.dest_amount == "7000"
    assert quote.estimated_gas == 300_000
    assert quote.execution_payload["transactionRequest"]["data"] == "0xabc"

    assert await provider.quote(make_request(source_chain_id=10, dest_chain_id=10)) is None
    assert get_json.await_count == 1


@pytest.mark.asyncio
async def test_relay_cross_chain_translation():
    provider = RelayProvider()
    provider._post_json = AsyncMock(
        return_value={
            "details": {
                "currencyOut": {"amount": "8000", "minimumAmount": "7900"},
                "totalImpact": {"percent": "-0.8"},
                "timeEstimate": 30,
            },
            "steps": [
                {
                    "id": "deposit",
                    "action": "Confirm transaction",
                    "requestId": "0xrequest",
                    "items": [
                        {
                            "data": {"to": "0xrelay", "data": "0x", "value": "1", "gas": "90000"},
                            "check": {"endpoint": "/intents/status"},
                        }
                    ],
                }
            ],
        }
    )

    quote = await provider.quote(
        make_request(source_chain_id=1, dest_chain_id=8453, source_token=NATIVE_PLACEHOLDER_EEEE)
    )

    path, payload = provider._post_json.await_args.args
    assert path == "/quote"
    assert payload["originCurrency"] == NATIVE_PLACEHOLDER
    assert payload["recipient"] == OWNER
    assert quote.dest_amount == "8000"
    assert quote.dest_amount_min == "7900"
    assert quote.estimated_gas == 90000
    assert quote.price_impact_percent == pytest.approx(0.8)
    assert quote.execution_payload["requestId"] == "0xrequest"
    assert len(quote.execution_payload["transactions"]) == 1


@pytest.mark.asyncio
async def test_relay_without_output_amount():
    provider = RelayProvider()
    provider._post_json = AsyncMock(return_value={"details": {}})

    with pytest.raises(ProviderError):
        await provider.quote(make_request(source_chain_id=1, dest_chain_id=10))


@pytest.mark.asyncio
async def test_bungee_picks_best_manual_route_when_no_auto_route():
    provider = BungeeProvider(api_key="")
    stub_get(
        provider,
        {
            "result": {
                "autoRoute": None,
                "manualRoutes": [
                    {"output": {"amount": "100"}, "quoteId": "q1"},
                    {"output": {"amount": "300", "minAmountOut": "290"}, "quoteId": "q2"},
                ],
            }
        },
    )

    quote = await provider.quote(make_request(source_chain_id=1, dest_chain_id=42161))

    assert quote.dest_amount == "300"
    assert quote.dest_amount_min == "290"
    assert quote.execution_payload["quoteId"] == "q2"


@pytest.mark.asyncio
async def test_bungee_prefers_auto_route_and_skips_same_chain():
    provider = BungeeProvider(api_key="")
    get_json = stub_get(
        provider,
        {
            "result": {
                "autoRoute": {"output": {"amount": "50"}, "quoteId": "auto"},
                "manualRoutes": [{"output": {"amount": "300"}}],
            }
        },
    )

    quote = await provider.quote(make_request(source_chain_id=1, dest_chain_id=42161))
    assert quote.execution_payload["quoteId"] == "auto"

    assert await provider.quote(make_request()) is None
    assert get_json.await_count == 1


@pytest.mark.asyncio
async def test_bungee_without_routes_returns_none():
    provider = BungeeProvider(api_key="")
    stub_get(provider, {"result": {"manualRoutes": []}})

    assert await provider.quote(make_request(source_chain_id=1, dest_chain_id=42161)) is None


@pytest.mark.asyncio
async def test_jupiter_translation():
    provider = JupiterProvider()
    get_json = stub_get(
        provider,
        {
            "outAmount": "9000",
            "otherAmountThreshold": "8900",
            "priceImpactPct": "0.001",
            "routePlan": [
                {"swapInfo": {"outputMint": "MidMint111"}},
                {"swapInfo": {"outputMint": USDC_MINT}},
            ],
        },
    )
    request = make_request(
        source_chain_id=SOLANA_CHAIN_ID,
        dest_chain_id=SOLANA_CHAIN_ID,
        source_token=NATIVE_PLACEHOLDER,
        dest_token=USDC_MINT,
        source_amount="1000000000",
        slippage_percent=1,
    )

    quote = await provider.quote(request)

    params = get_json.await_args.args[1]
    assert params["inputMint"] == SOLANA_NATIVE_MINT
    assert params["slippageBps"] == 100
    assert quote.route == [SOLANA_NATIVE_MINT, "MidMint111", USDC_MINT]
    assert quote.dest_amount_min == "8900"
    assert quote.price_impact_percent == pytest.approx(0.1)
    assert quote.liquidity_score == 80


@pytest.mark.asyncio
async def test_jupiter_error_payload():
    provider = JupiterProvider()
    stub_get(provider, {"error": "Could not find any route"})
    request = make_request(
        source_chain_id=SOLANA_CHAIN_ID, dest_chain_id=SOLANA_CHAIN_ID, source_token=SOLANA_NATIVE_MINT, dest_token=USDC_MINT
    )

    with pytest.raises(ProviderError):
        await provider.quote(request)


@pytest.mark.asyncio
async def test_same_chain_only_adapters_ignore_cross_chain_requests():
    provider = OneInchProvider(api_key="")
    get_json = stub_get(provider, {"dstAmount": "1"})

    assert await provider.quote(make_request(source_chain_id=1, dest_chain_id=56)) is None
    get_json.assert_not_awaited()


def test_evm_adapters_skip_solana():
    request = make_request(
        source_chain_id=SOLANA_CHAIN_ID, dest_chain_id=SOLANA_CHAIN_ID, source_token=TOKEN_A, dest_token=TOKEN_B
    )
    assert not LifiProvider(api_key="").supports(request)
    assert JupiterProvider().supports(request)
