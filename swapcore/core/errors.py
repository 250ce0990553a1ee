"""Error taxonomy for the quote routing core."""

from __future__ import annotations

from typing import Iterable, List, Optional


class SwapCoreError(Exception):
    """Base class for every error raised by swapcore."""


class InvalidAmountError(SwapCoreError, ValueError):
    """Numeric text could not be turned into an integer amount."""


class ProviderError(SwapCoreError):
    """A single quote provider failed (transport, status or payload shape)."""

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class NoRouteError(SwapCoreError):
    """Every routing tier was exhausted without a usable quote."""

    def __init__(self, attempted_providers: Iterable[str], message: Optional[str] = None) -> None:
        self.attempted_providers: List[str] = list(attempted_providers)
        super().__init__(
            message
            or "No route available from any provider (attempted: {})".format(
                ", ".join(self.attempted_providers) or "none"
            )
        )


class UnsupportedChainError(SwapCoreError):
    """No provider set or AMM configuration exists for the chain."""

    def __init__(self, chain_id: object) -> None:
        super().__init__(f"Chain {chain_id} is not supported")
        self.chain_id = chain_id


class RpcError(SwapCoreError):
    """JSON-RPC transport or protocol failure."""


class ContractRevertError(RpcError):
    """An eth_call reverted; `reason` holds the decoded revert string if any."""

    def __init__(self, reason: str, data: Optional[str] = None) -> None:
        super().__init__(f"execution reverted: {reason}" if reason else "execution reverted")
        self.reason = reason
        self.data = data


__all__ = [
    "SwapCoreError",
    "InvalidAmountError",
    "ProviderError",
    "NoRouteError",
    "UnsupportedChainError",
    "RpcError",
    "ContractRevertError",
]
