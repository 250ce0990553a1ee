"""Typed models shared by the cache, pathfinder and orchestrator."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .amounts import normalize_amount
from .errors import InvalidAmountError

MAX_HOPS = 3


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


def _chain_id(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{field_name} must be a positive integer")
    try:
        chain_id = int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{field_name} must be a positive integer") from exc
    if chain_id <= 0:
        raise ValueError(f"{field_name} must be a positive integer")
    return chain_id


@dataclass
class TradeRequest:
    """A user's desired trade, amounts in the source token's smallest unit."""

    source_chain_id: int
    dest_chain_id: int
    source_token: str
    dest_token: str
    source_amount: str
    requester_address: str
    recipient_address: Optional[str] = None
    slippage_percent: Optional[float] = None

    def __post_init__(self) -> None:
        self.source_chain_id = _chain_id(self.source_chain_id, "source_chain_id")
        self.dest_chain_id = _chain_id(self.dest_chain_id, "dest_chain_id")
        if not self.source_token or not self.dest_token:
            raise ValueError("source_token and dest_token are required")

        amount = normalize_amount(self.source_amount)
        if amount.startswith("-"):
            raise InvalidAmountError(f"source_amount must be non-negative, got {self.source_amount!r}")
        self.source_amount = amount

        if self.slippage_percent is not None:
            slippage = float(self.slippage_percent)
            if not 0 <= slippage <= 100:
                raise ValueError("slippage_percent must be between 0 and 100")
            self.slippage_percent = slippage

    @property
    def is_cross_chain(self) -> bool:
        return self.source_chain_id != self.dest_chain_id

    @property
    def amount(self) -> int:
        return int(self.source_amount)

    @property
    def recipient(self) -> str:
        return self.recipient_address or self.requester_address

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TradeRequest":
        """Build from either snake_case or camelCase keys."""
        source_chain = _first(data, "source_chain_id", "sourceChainId", "chain_id", "chainId")
        dest_chain = _first(data, "dest_chain_id", "destChainId")
        return cls(
            source_chain_id=source_chain,
            dest_chain_id=dest_chain if dest_chain is not None else source_chain,
            source_token=_first(data, "source_token", "sourceTokenAddress", "sourceToken"),
            dest_token=_first(data, "dest_token", "destTokenAddress", "destToken"),
            source_amount=_first(data, "source_amount", "sourceAmount"),
            requester_address=_first(data, "requester_address", "requesterAddress") or "",
            recipient_address=_first(data, "recipient_address", "recipientAddress"),
            slippage_percent=_first(data, "slippage_percent", "slippageTolerancePercent", "slippage"),
        )


@dataclass
class Quote:
    """A priced route from one provider. ``execution_payload`` is passed through untouched."""

    provider_id: str
    dest_amount: str
    dest_amount_min: Optional[str] = None
    estimated_gas: int = 0
    liquidity_score: int = 50
    price_impact_percent: float = 0.0
    route: List[str] = field(default_factory=list)
    execution_payload: Dict[str, Any] = field(default_factory=dict)
    source_token_decimals: Optional[int] = None
    dest_token_decimals: Optional[int] = None

    def __post_init__(self) -> None:
        self.dest_amount = normalize_amount(self.dest_amount)
        if self.dest_amount_min in (None, ""):
            self.dest_amount_min = self.dest_amount
        else:
            self.dest_amount_min = normalize_amount(self.dest_amount_min)
            if int(self.dest_amount_min) > int(self.dest_amount):
                self.dest_amount_min = self.dest_amount
        self.estimated_gas = max(int(self.estimated_gas or 0), 0)
        self.liquidity_score = min(max(int(self.liquidity_score), 0), 100)
        self.price_impact_percent = min(max(float(self.price_impact_percent or 0.0), 0.0), 100.0)
        self.route = list(self.route or [])

    @property
    def dest_amount_int(self) -> int:
        return int(self.dest_amount)

    def with_decimals(self, source_decimals: int, dest_decimals: int) -> "Quote":
        return replace(self, source_token_decimals=source_decimals, dest_token_decimals=dest_decimals)

    def without_payload(self) -> "Quote":
        return replace(self, execution_payload={})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "providerId": self.provider_id,
            "destAmount": self.dest_amount,
            "destAmountMin": self.dest_amount_min,
            "estimatedGasUnits": self.estimated_gas,
            "liquidityScore": self.liquidity_score,
            "priceImpactPercent": self.price_impact_percent,
            "route": list(self.route),
            "executionPayload": self.execution_payload,
            "sourceTokenDecimals": self.source_token_decimals,
            "destTokenDecimals": self.dest_token_decimals,
        }


@dataclass(frozen=True)
class Pool:
    pair_address: str
    token0: str
    token1: str
    reserve0: int
    reserve1: int

    def __post_init__(self) -> None:
        if self.reserve0 < 0 or self.reserve1 < 0:
            raise ValueError("reserves must be non-negative")

    def reserves_for(self, token_in: str) -> Tuple[int, int]:
        """(reserve_in, reserve_out) oriented for a swap starting at ``token_in``."""
        if token_in.lower() == self.token0.lower():
            return self.reserve0, self.reserve1
        if token_in.lower() == self.token1.lower():
            return self.reserve1, self.reserve0
        raise ValueError(f"{token_in} is not in pool {self.pair_address}")

    @property
    def liquidity(self) -> int:
        return math.isqrt(self.reserve0 * self.reserve1)


class RouteSource(str, Enum):
    ROUTER = "router"
    PROBE = "probe"
    RESERVES = "reserves"


@dataclass(frozen=True)
class Route:
    path: Tuple[str, ...]
    expected_output: int
    price_impact_percent: float
    aggregate_liquidity: int
    amounts: Tuple[int, ...] = ()
    source: RouteSource = RouteSource.ROUTER
    pair_addresses: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if len(self.path) < 2:
            raise ValueError("route path needs at least two tokens")
        if len(self.path) - 1 > MAX_HOPS:
            raise ValueError(f"route exceeds {MAX_HOPS} hops")
        lowered = [token.lower() for token in self.path]
        if len(set(lowered)) != len(lowered):
            raise ValueError("route path repeats a token")

    @property
    def hops(self) -> int:
        return len(self.path) - 1

    @property
    def is_estimate(self) -> bool:
        return self.source is not RouteSource.ROUTER


__all__ = [
    "MAX_HOPS",
    "TradeRequest",
    "Quote",
    "Pool",
    "Route",
    "RouteSource",
]
