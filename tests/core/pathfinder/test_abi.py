import pytest

from swapcore.core.pathfinder import abi

from fakes import TOKEN_A, TOKEN_B


def word(value: int) -> str:
    return format(value, "064x")


def revert_payload(reason: str) -> str:
    raw = reason.encode().hex()
    padded = raw.ljust(((len(raw) + 63) // 64) * 64 or 64, "0")
    return "0x08c379a0" + word(32) + word(len(reason.encode())) + padded


@pytest.mark.parametrize(
    "signature, expected",
    [
        (abi.GET_PAIR, "0xe6a43905"),
        (abi.GET_RESERVES, "0x0902f1ac"),
        (abi.TOKEN0, "0x0dfe1681"),
        (abi.GET_AMOUNTS_OUT, "0xd06ca61f"),
        (abi.DECIMALS, "0x313ce567"),
        (abi.ALLOWANCE, "0xdd62ed3e"),
        (abi.ERROR_STRING, "0x08c379a0"),
    ],
)
def test_selectors(signature, expected):
    assert abi.selector(signature) == expected


def test_encode_get_pair():
    data = abi.encode_get_pair(TOKEN_A, TOKEN_B)
    assert data == "0xe6a43905" + "0" * 24 + "a" * 40 + "0" * 24 + "b" * 40


def test_encode_get_amounts_out_layout():
    data = abi.encode_get_amounts_out(1000, [TOKEN_A, TOKEN_B])
    body = data[len("0xd06ca61f"):]
    words = [body[i:i + 64] for i in range(0, len(body), 64)]
    assert data.startswith("0xd06ca61f")
    assert int(words[0], 16) == 1000
    assert int(words[1], 16) == 64
    assert int(words[2], 16) == 2
    assert words[3].endswith("a" * 40)
    assert words[4].endswith("b" * 40)


def test_encode_rejects_bad_input():
    with pytest.raises(ValueError):
        abi.encode_get_amounts_out(-1, [TOKEN_A, TOKEN_B])
    with pytest.raises(ValueError):
        abi.encode_get_pair("0x1234", TOKEN_B)


def test_decode_uint_array():
    data = "0x" + word(32) + word(3) + word(1000) + word(500) + word(250)
    assert abi.decode_uint_array(data) == [1000, 500, 250]


def test_decode_uint_array_truncated():
    with pytest.raises(ValueError):
        abi.decode_uint_array("0x" + word(32) + word(3) + word(1))


def test_decode_reserves_and_address():
    assert abi.decode_reserves("0x" + word(7) + word(9) + word(123456)) == (7, 9)
    assert abi.decode_address("0x" + "0" * 24 + "b" * 40) == TOKEN_B


def test_decode_rejects_misaligned_data():
    with pytest.raises(ValueError):
        abi.decode_uint("0x1234")


def test_decode_revert_reason():
    assert abi.decode_revert_reason(revert_payload("Pancake: K")) == "Pancake: K"
    assert abi.decode_revert_reason("0xdeadbeef") is None
    assert abi.decode_revert_reason(None) is None


@pytest.mark.parametrize(
    "reason",
    [
        "Pancake: K",
        "UniswapV2: K",
        "UniswapV2Library: INSUFFICIENT_LIQUIDITY",
        "UniswapV2Library: INSUFFICIENT_INPUT_AMOUNT",
        "UniswapV2Library: INSUFFICIENT_OUTPUT_AMOUNT",
        "constant product invariant",
    ],
)
def test_liquidity_reverts(reason):
    assert abi.is_liquidity_revert(reason)


@pytest.mark.parametrize("reason", [None, "", "TransferHelper: TRANSFER_FROM_FAILED", "Ownable: caller is not the owner"])
def test_other_reverts(reason):
    assert not abi.is_liquidity_revert(reason)
