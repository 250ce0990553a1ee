from swapcore.core.models import Quote, TradeRequest
from swapcore.core.quote_cache import QuoteCache, fingerprint

from fakes import TOKEN_A, TOKEN_B, make_request


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_camel_and_snake_case_requests_share_a_fingerprint():
    snake = TradeRequest.from_dict(
        {
            "source_chain_id": 56,
            "dest_chain_id": 56,
            "source_token": TOKEN_A,
            "dest_token": TOKEN_B,
            "source_amount": "1.5e3",
            "requester_address": "0x1",
        }
    )
    camel = TradeRequest.from_dict(
        {
            "sourceChainId": 56,
            "sourceTokenAddress": TOKEN_A.upper().replace("0X", "0x"),
            "destTokenAddress": TOKEN_B,
            "sourceAmount": 1500,
            "requesterAddress": "0x2",
        }
    )
    assert fingerprint(snake) == fingerprint(camel)


def test_fingerprint_covers_price_relevant_fields():
    base = make_request()
    assert fingerprint(base) != fingerprint(make_request(source_amount="2"))
    assert fingerprint(base) != fingerprint(make_request(dest_chain_id=1))
    assert fingerprint(base) != fingerprint(make_request(slippage_percent=1))
    assert fingerprint(make_request(slippage_percent=0.5)) == fingerprint(make_request(slippage_percent="0.50"))


def test_requester_does_not_change_fingerprint():
    assert fingerprint(make_request(requester_address="0x1")) == fingerprint(make_request(requester_address="0x2"))


def test_cached_quote_expires_after_ttl():
    clock = FakeClock()
    cache = QuoteCache(ttl_seconds=30, clock=clock)
    request = make_request()
    quote = Quote(provider_id="lifi", dest_amount="100")

    assert cache.get(request) is None
    cache.put(request, quote)
    clock.now = 29
    assert cache.get(request) is quote
    clock.now = 30
    assert cache.get(request) is None


def test_last_write_wins():
    cache = QuoteCache(clock=FakeClock())
    request = make_request()
    cache.put(request, Quote(provider_id="a", dest_amount="1"))
    cache.put(request, Quote(provider_id="b", dest_amount="2"))
    assert cache.get(request).provider_id == "b"
    assert cache.size() == 1


def test_payload_is_only_handed_back_to_the_addresses_it_was_built_for():
    cache = QuoteCache(clock=FakeClock())
    alice = make_request(requester_address="0x" + "a1" * 20)
    bob = make_request(requester_address="0x" + "b2" * 20)
    quote = Quote(
        provider_id="paraswap",
        dest_amount="100",
        execution_payload={"transactionRequest": {"from": alice.requester_address, "data": "0xdead"}},
    )
    cache.put(alice, quote)

    assert cache.get(alice) is quote

    shared = cache.get(bob)
    assert shared.dest_amount == "100"
    assert shared.provider_id == "paraswap"
    assert shared.execution_payload == {}

    redirected = make_request(requester_address=alice.requester_address, recipient_address="0x" + "c3" * 20)
    assert cache.get(redirected).execution_payload == {}
