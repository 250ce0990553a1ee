"""
Exact integer amount handling.

Amounts travel through the system as canonical integer strings in the
token's smallest unit. Providers and callers hand us all sorts of numeric
text (``"1.23e5"``, ``"+00042"``, ``"1e18"``), so everything is funnelled
through :func:`normalize_amount` before any arithmetic happens.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Optional, Union

from .errors import InvalidAmountError

BPS_DENOMINATOR = 10_000

# Exponents beyond this cannot describe an on-chain quantity (uint256 tops out
# at 78 digits) and would only allocate huge strings.
MAX_EXPONENT = 4096

_EXPONENT_RE = re.compile(r"^\s*([+-]?\d+)")
_DIGITS_RE = re.compile(r"^[0-9]+$")

AmountLike = Union[str, int, None]


def _strip_leading_zeros(digits: str) -> str:
    stripped = digits.lstrip("0")
    return stripped or "0"


@lru_cache(maxsize=4096)
def _normalize_text(text: str) -> str:
    trimmed = text.strip()
    if not trimmed:
        return "0"

    negative = False
    if trimmed[0] in "+-":
        negative = trimmed[0] == "-"
        trimmed = trimmed[1:]

    lowered = trimmed.lower()
    if "e" in lowered:
        coefficient, _, exponent_part = lowered.partition("e")
        match = _EXPONENT_RE.match(exponent_part.split("e", 1)[0])
        if match is None:
            raise InvalidAmountError(f"Invalid numeric exponent: {text!r}")
        exponent = int(match.group(1))

        int_part, dot, frac_part = coefficient.partition(".")
        digits = int_part + frac_part
        shift = exponent - (len(frac_part) if dot else 0)

        if shift > MAX_EXPONENT:
            raise InvalidAmountError(f"Numeric exponent out of range: {text!r}")
        if shift >= 0:
            adjusted = digits + "0" * shift
        else:
            cut = len(digits) + shift
            adjusted = digits[:cut] if cut > 0 else "0"
    elif "." in trimmed:
        # Inputs are expected in smallest units already, so the fractional
        # digits are joined rather than scaled.
        int_part, _, frac_part = trimmed.partition(".")
        adjusted = int_part + frac_part
    else:
        adjusted = trimmed

    if not adjusted:
        return "0"
    if not _DIGITS_RE.match(adjusted):
        return "0"

    normalized = _strip_leading_zeros(adjusted)
    if negative and normalized != "0":
        return "-" + normalized
    return normalized


def normalize_amount(value: AmountLike) -> str:
    """Convert numeric text into a canonical integer string.

    Accepts an optional sign, plain integers, decimals and scientific
    notation. Scientific notation shifts the mantissa digits by
    ``exponent - fractional_digits``, truncating (never rounding) when the
    shift is negative. Only an unparseable exponent raises
    :class:`InvalidAmountError`; any other malformed input becomes ``"0"``.
    """
    if value is None:
        return "0"
    if isinstance(value, bool):
        raise InvalidAmountError(f"Boolean is not an amount: {value!r}")
    if isinstance(value, int):
        return str(value)
    return _normalize_text(str(value))


def to_int(value: AmountLike) -> int:
    """Normalize and convert to ``int``."""
    return int(normalize_amount(value))


def slippage_to_bps(slippage_percent: Optional[float]) -> int:
    if slippage_percent is None:
        return 0
    bps = int(round(float(slippage_percent) * 100))
    return min(max(bps, 0), BPS_DENOMINATOR)


def apply_slippage(amount: int, slippage_percent: Optional[float]) -> int:
    """Minimum amount after slippage, in exact integer arithmetic."""
    bps = slippage_to_bps(slippage_percent)
    return amount * (BPS_DENOMINATOR - bps) // BPS_DENOMINATOR


__all__ = [
    "BPS_DENOMINATOR",
    "MAX_EXPONENT",
    "normalize_amount",
    "to_int",
    "slippage_to_bps",
    "apply_slippage",
]
