import pytest

from swapcore.config import Settings
from swapcore.core.chains import AMM_CONFIGS, SOLANA_CHAIN_ID
from swapcore.core.errors import UnsupportedChainError
from swapcore.core.orchestrator.registry import (
    AGGREGATOR_ORDER,
    ProviderRegistry,
    build_rpc_clients,
)

from fakes import FakeProvider, make_request

ALL_NAMES = ["pancakeswap", "1inch", "0x", "kyberswap", "lifi", "openocean", "paraswap", "relay", "onchain", "bungee"]
CROSS_CHAIN = {"lifi", "relay", "bungee"}


def make_registry():
    providers = [FakeProvider(name, "1", cross_chain=name in CROSS_CHAIN) for name in ALL_NAMES]
    providers.append(FakeProvider("jupiter", "1", chains=[SOLANA_CHAIN_ID]))
    return ProviderRegistry(providers)


def names(providers):
    return [provider.name for provider in providers]


def test_bnb_chain_puts_native_dex_first_and_pathfinder_last():
    selected = names(make_registry().select(make_request(source_chain_id=56, dest_chain_id=56)))
    assert selected[0] == "pancakeswap"
    assert selected[-1] == "onchain"
    assert selected[1:] == [name for name in AGGREGATOR_ORDER if name != "pancakeswap"]


def test_other_evm_chains_use_aggregator_order():
    selected = names(make_registry().select(make_request(source_chain_id=1, dest_chain_id=1)))
    assert selected == AGGREGATOR_ORDER


def test_pancakeswap_is_asked_on_every_chain_it_serves():
    registry = ProviderRegistry.from_settings(Settings(enable_onchain_pathfinder=False))
    pancakeswap = registry.get("pancakeswap")

    for chain_id in (1, 8453, 42161):
        assert chain_id in pancakeswap.supported_chains
        selected = names(registry.select(make_request(source_chain_id=chain_id, dest_chain_id=chain_id)))
        assert "pancakeswap" in selected

    polygon = names(registry.select(make_request(source_chain_id=137, dest_chain_id=137)))
    assert "pancakeswap" not in polygon


def test_cross_chain_uses_bridges_only():
    selected = names(make_registry().select(make_request(source_chain_id=1, dest_chain_id=8453)))
    assert selected == ["lifi", "relay", "bungee"]


def test_solana_uses_jupiter():
    request = make_request(
        source_chain_id=SOLANA_CHAIN_ID,
        dest_chain_id=SOLANA_CHAIN_ID,
        source_token="So11111111111111111111111111111111111111112",
        dest_token="EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
    )
    assert names(make_registry().select(request)) == ["jupiter"]


def test_no_capable_provider_raises():
    with pytest.raises(UnsupportedChainError):
        make_registry().select(make_request(source_chain_id=999, dest_chain_id=999))


def test_duplicate_names_are_rejected():
    with pytest.raises(ValueError):
        ProviderRegistry([FakeProvider("a"), FakeProvider("a")])


def test_from_settings_respects_pathfinder_toggle():
    enabled = ProviderRegistry.from_settings(Settings(enable_onchain_pathfinder=True))
    disabled = ProviderRegistry.from_settings(Settings(enable_onchain_pathfinder=False))

    assert "onchain" in enabled.names
    assert "onchain" not in disabled.names
    assert {"1inch", "jupiter", "bungee"} <= set(disabled.names)
    assert sorted(enabled.get("onchain").supported_chains) == sorted(AMM_CONFIGS)


def test_rpc_overrides_replace_default_endpoints():
    clients = build_rpc_clients(Settings(rpc_urls={56: ["https://my-node.example/"]}))
    assert clients[56].urls == ["https://my-node.example"]
    assert set(clients) == set(AMM_CONFIGS)
