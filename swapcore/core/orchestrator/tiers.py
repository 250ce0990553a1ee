"""
Routing tiers.

Each tier is an async callable ``(remaining, request) -> (quote | None,
remaining)``. A provider that answered (with a quote, ``None`` or an error)
is finished; one that timed out stays in ``remaining`` so a later tier with a
longer budget can try it again.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from ..models import Quote, TradeRequest
from ...providers.base import QuoteProvider

logger = logging.getLogger(__name__)

TierResult = Tuple[Optional[Quote], List[QuoteProvider]]


@dataclass
class CallResult:
    provider: QuoteProvider
    quote: Optional[Quote] = None
    timed_out: bool = False


def is_usable(quote: Quote) -> bool:
    """A provider answer counts only with a positive integer output."""
    try:
        return int(quote.dest_amount) > 0
    except (TypeError, ValueError):
        return False


def rank_key(quote: Quote) -> Tuple[int, int, float]:
    """Best first: larger output, then higher liquidity score, then lower price impact."""
    return (-int(quote.dest_amount), -quote.liquidity_score, quote.price_impact_percent)


def best_quote(quotes: Iterable[Quote]) -> Optional[Quote]:
    ranked = sorted(quotes, key=rank_key)
    return ranked[0] if ranked else None


async def call_provider(provider: QuoteProvider, request: TradeRequest, timeout_s: float) -> CallResult:
    """Run one provider under a timeout; failures of any kind become a null result."""
    try:
        quote = await asyncio.wait_for(provider.quote(request), timeout=timeout_s)
    except asyncio.TimeoutError:
        logger.info("Provider %s timed out after %.1fs", provider.name, timeout_s)
        return CallResult(provider, timed_out=True)
    except Exception as exc:
        logger.info("Provider %s failed: %s", provider.name, exc)
        return CallResult(provider)

    if quote is None:
        logger.debug("Provider %s returned no quote", provider.name)
        return CallResult(provider)
    if not is_usable(quote):
        logger.info("Provider %s returned unusable amount %r", provider.name, quote.dest_amount)
        return CallResult(provider)
    return CallResult(provider, quote=quote)


def _keep(remaining: Sequence[QuoteProvider], keep: Iterable[QuoteProvider]) -> List[QuoteProvider]:
    """Subset of ``remaining`` in its original order."""
    wanted = {id(provider) for provider in keep}
    return [provider for provider in remaining if id(provider) in wanted]


class RaceTier:
    """Start the first ``size`` providers together and adopt the best answer.

    Every contender settles or hits the tier timeout before ranking, so the
    winner does not depend on which provider happened to answer first.
    """

    name = "race"

    def __init__(self, size: int, timeout_s: float) -> None:
        self.size = size
        self.timeout_s = timeout_s

    async def __call__(self, remaining: Sequence[QuoteProvider], request: TradeRequest) -> TierResult:
        contenders = list(remaining[: self.size])
        if not contenders:
            return None, list(remaining)

        results = await asyncio.gather(
            *(call_provider(provider, request, self.timeout_s) for provider in contenders)
        )
        timed_out = [result.provider for result in results if result.timed_out]
        winner = best_quote(result.quote for result in results if result.quote is not None)
        if winner is not None:
            logger.info("Race tier won by %s", winner.provider_id)
        return winner, _keep(remaining, [*timed_out, *remaining[self.size:]])


class SequentialTier:
    """Try providers one at a time, stopping at the first success."""

    name = "sequential"

    def __init__(self, timeout_s: float) -> None:
        self.timeout_s = timeout_s

    async def __call__(self, remaining: Sequence[QuoteProvider], request: TradeRequest) -> TierResult:
        timed_out: List[QuoteProvider] = []
        for index, provider in enumerate(remaining):
            result = await call_provider(provider, request, self.timeout_s)
            if result.quote is not None:
                logger.info("Sequential tier answered by %s", provider.name)
                return result.quote, _keep(remaining, [*timed_out, *remaining[index + 1:]])
            if result.timed_out:
                timed_out.append(provider)
        return None, _keep(remaining, timed_out)


class ExhaustiveTier:
    """Ask every remaining provider at once, wait for all of them and rank."""

    name = "exhaustive"

    def __init__(self, timeout_s: float) -> None:
        self.timeout_s = timeout_s

    async def __call__(self, remaining: Sequence[QuoteProvider], request: TradeRequest) -> TierResult:
        if not remaining:
            return None, []
        results = await asyncio.gather(
            *(call_provider(provider, request, self.timeout_s) for provider in remaining)
        )
        winner = best_quote(result.quote for result in results if result.quote is not None)
        if winner is not None:
            logger.info("Exhaustive tier won by %s out of %d providers", winner.provider_id, len(results))
        return winner, _keep(remaining, [result.provider for result in results if result.timed_out])