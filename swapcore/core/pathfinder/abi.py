"""
Minimal ABI encoding/decoding for the handful of Uniswap-V2 style calls the
pathfinder makes. Only static words and dynamic ``address[]``/``uint256[]``
are needed, so this stays hand-rolled instead of pulling in a full ABI codec.
"""

from __future__ import annotations

from functools import lru_cache
from typing import List, Optional, Sequence, Tuple

from eth_utils import keccak

WORD_HEX = 64

GET_PAIR = "getPair(address,address)"
GET_RESERVES = "getReserves()"
TOKEN0 = "token0()"
GET_AMOUNTS_OUT = "getAmountsOut(uint256,address[])"
DECIMALS = "decimals()"
ALLOWANCE = "allowance(address,address)"
ERROR_STRING = "Error(string)"

LIQUIDITY_REVERT_MARKERS = (
    "insufficient_liquidity",
    "insufficient_input_amount",
    "insufficient_output_amount",
    "constant product",
)


def _strip_0x(value: str) -> str:
    return value[2:] if value.startswith(("0x", "0X")) else value


def _encode_uint(value: int) -> str:
    if value < 0:
        raise ValueError("Value must be non-negative")
    if value >= 1 << 256:
        raise ValueError("Value does not fit in uint256")
    return hex(value)[2:].rjust(WORD_HEX, "0")


def _encode_address(address: str) -> str:
    addr = _strip_0x(address).lower()
    if len(addr) != 40:
        raise ValueError(f"Invalid address length: {address}")
    return addr.rjust(WORD_HEX, "0")


@lru_cache(maxsize=None)
def selector(signature: str) -> str:
    return "0x" + keccak(text=signature)[:4].hex()


def encode_get_pair(token_a: str, token_b: str) -> str:
    return selector(GET_PAIR) + _encode_address(token_a) + _encode_address(token_b)


def encode_get_reserves() -> str:
    return selector(GET_RESERVES)


def encode_token0() -> str:
    return selector(TOKEN0)


def encode_decimals() -> str:
    return selector(DECIMALS)


def encode_allowance(owner: str, spender: str) -> str:
    return selector(ALLOWANCE) + _encode_address(owner) + _encode_address(spender)


def encode_get_amounts_out(amount_in: int, path: Sequence[str]) -> str:
    """getAmountsOut(uint256,address[]) calldata."""
    head = _encode_uint(amount_in) + _encode_uint(64)  # offset to path
    tail = _encode_uint(len(path)) + "".join(_encode_address(token) for token in path)
    return selector(GET_AMOUNTS_OUT) + head + tail


def _words(data: str) -> List[str]:
    body = _strip_0x(data or "")
    if len(body) % WORD_HEX:
        raise ValueError("Return data is not word aligned")
    return [body[i:i + WORD_HEX] for i in range(0, len(body), WORD_HEX)]


def decode_uint(data: str, index: int = 0) -> int:
    words = _words(data)
    if index >= len(words):
        raise ValueError("Return data too short")
    return int(words[index], 16)


def decode_address(data: str, index: int = 0) -> str:
    words = _words(data)
    if index >= len(words):
        raise ValueError("Return data too short")
    return "0x" + words[index][-40:]


def decode_reserves(data: str) -> Tuple[int, int]:
    """(reserve0, reserve1) from getReserves(); the timestamp word is ignored."""
    return decode_uint(data, 0), decode_uint(data, 1)


def decode_uint_array(data: str) -> List[int]:
    words = _words(data)
    if not words:
        raise ValueError("Empty return data")
    start = int(words[0], 16) // 32
    if start >= len(words):
        raise ValueError("Array offset out of range")
    length = int(words[start], 16)
    items = words[start + 1:start + 1 + length]
    if len(items) != length:
        raise ValueError("Array length exceeds return data")
    return [int(item, 16) for item in items]


def decode_revert_reason(data: Optional[str]) -> Optional[str]:
    """Decode a standard Error(string) revert payload, if that is what it is."""
    if not data:
        return None
    body = _strip_0x(data)
    if not body.startswith(_strip_0x(selector(ERROR_STRING))):
        return None
    try:
        words = _words(body[8:])
        start = int(words[0], 16) // 32
        length = int(words[start], 16)
        raw = "".join(words[start + 1:])[: length * 2]
        return bytes.fromhex(raw).decode("utf-8", errors="replace")
    except (ValueError, IndexError):
        return None


def is_liquidity_revert(reason: Optional[str]) -> bool:
    """True for constant-product / insufficient-liquidity class reverts."""
    if not reason:
        return False
    lowered = reason.lower()
    # "Pancake: K", "UniswapV2: K"
    if lowered.rstrip().endswith(": k"):
        return True
    return any(marker in lowered for marker in LIQUIDITY_REVERT_MARKERS)
