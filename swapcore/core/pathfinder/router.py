"""
Route discovery through a single AMM family.

For a trade we build a small, bounded set of candidate paths (direct, one
intermediate, two intermediates), price each one with the router's
``getAmountsOut`` and pick the best. Liquidity reverts are answered with
smaller probes and a discounted extrapolation; when nothing prices at all we
fall back to the constant-product formula on pool reserves. Only when no
candidate has pools does the pathfinder give up.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ...config import settings
from ..chains import AmmConfig, is_native, normalize_address
from ..errors import ContractRevertError, RpcError, UnsupportedChainError
from ..models import MAX_HOPS, Pool, Route, RouteSource
from .abi import is_liquidity_revert
from .amm import AmmReader, pair_key
from .slippage import price_impact_percent

logger = logging.getLogger(__name__)

# amount_in is divided by these to get probe sizes (50%, 10%, 1%)
PROBE_DIVISORS = (2, 10, 100)

Path = Tuple[str, ...]


def build_candidate_paths(token_in: str, token_out: str, intermediates: Sequence[str]) -> List[Path]:
    """Direct pair, then one hop through each intermediate, then ordered pairs of intermediates."""
    token_in, token_out = token_in.lower(), token_out.lower()
    middles = [token for token in intermediates if token.lower() not in (token_in, token_out)]

    paths: List[Path] = [(token_in, token_out)]
    paths.extend((token_in, middle, token_out) for middle in middles)
    if MAX_HOPS >= 3:
        for index, first in enumerate(middles):
            for second in middles[index + 1:]:
                paths.append((token_in, first, second, token_out))
    return paths


def extrapolation_factor(amount_in: int, probe_amount: int) -> int:
    """Percent kept when scaling a probe result up to the full amount.

    The larger the gap between probe and real size, the more the curve's
    convexity is likely to bite.
    """
    if amount_in <= 2 * probe_amount:
        return 95
    if amount_in <= 10 * probe_amount:
        return 90
    return 75


def constant_product_out(amount_in: int, reserve_in: int, reserve_out: int, fee_numerator: int, fee_denominator: int) -> int:
    if amount_in <= 0 or reserve_in <= 0 or reserve_out <= 0:
        return 0
    amount_with_fee = amount_in * fee_numerator
    return amount_with_fee * reserve_out // (reserve_in * fee_denominator + amount_with_fee)


@dataclass
class _Candidate:
    path: Path
    pools: Optional[List[Pool]] = None
    output: int = 0
    amounts: Tuple[int, ...] = ()
    source: Optional[RouteSource] = None
    failures: List[str] = field(default_factory=list)

    @property
    def priced(self) -> bool:
        return self.source is not None and self.output > 0

    @property
    def aggregate_liquidity(self) -> int:
        return sum(pool.liquidity for pool in self.pools or [])


class Pathfinder:
    """Finds the best route for a trade across the AMM deployments it was given."""

    def __init__(
        self,
        readers: Mapping[int, AmmReader],
        *,
        reserve_haircut_percent: Optional[int] = None,
    ) -> None:
        self.readers: Dict[int, AmmReader] = dict(readers)
        haircut = settings.reserve_estimate_haircut_percent if reserve_haircut_percent is None else reserve_haircut_percent
        if not 0 <= haircut < 100:
            raise ValueError("reserve_haircut_percent must be in [0, 100)")
        self.reserve_haircut_percent = haircut

    def supports(self, chain_id: int) -> bool:
        return chain_id in self.readers

    def reader_for(self, chain_id: int) -> AmmReader:
        reader = self.readers.get(chain_id)
        if reader is None:
            raise UnsupportedChainError(chain_id)
        return reader

    @staticmethod
    def wrap(token: str, config: AmmConfig) -> str:
        return config.wrapped_native.lower() if is_native(token) else normalize_address(token)

    async def find_best_route(self, token_in: str, token_out: str, amount_in: int, chain_id: int) -> Optional[Route]:
        reader = self.reader_for(chain_id)
        config = reader.config
        token_in = self.wrap(token_in, config)
        token_out = self.wrap(token_out, config)
        if token_in == token_out or amount_in <= 0:
            return None

        paths = build_candidate_paths(token_in, token_out, config.intermediates)
        pool_tasks: Dict[Tuple[str, str], "asyncio.Future[Optional[Pool]]"] = {}

        try:
            candidates = await asyncio.gather(
                *(self._evaluate(reader, path, amount_in, pool_tasks) for path in paths)
            )
        finally:
            for task in pool_tasks.values():
                if not task.done():
                    task.cancel()

        priced = [candidate for candidate in candidates if candidate.priced]
        if not priced:
            priced = [
                candidate
                for candidate in (self._reserve_estimate(candidate, amount_in, config) for candidate in candidates)
                if candidate.priced
            ]
            if priced:
                logger.info(
                    "No router quote on chain %s for %s -> %s; using reserve estimate",
                    chain_id,
                    token_in,
                    token_out,
                )

        if not priced:
            logger.debug("No route on chain %s for %s -> %s", chain_id, token_in, token_out)
            return None

        routes = [self._to_route(candidate, amount_in) for candidate in priced]
        return min(routes, key=lambda route: (-route.expected_output, route.price_impact_percent))

    async def _load_pool(
        self,
        reader: AmmReader,
        token_a: str,
        token_b: str,
        pool_tasks: Dict[Tuple[str, str], "asyncio.Future[Optional[Pool]]"],
    ) -> Optional[Pool]:
        key = pair_key(token_a, token_b)
        task = pool_tasks.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch_pool(reader, token_a, token_b))
            pool_tasks[key] = task
        return await asyncio.shield(task)

    @staticmethod
    async def _fetch_pool(reader: AmmReader, token_a: str, token_b: str) -> Optional[Pool]:
        try:
            return await reader.get_pool(token_a, token_b)
        except (RpcError, ValueError) as exc:
            logger.debug("Pool lookup %s/%s failed: %s", token_a, token_b, exc)
            return None

    async def _evaluate(
        self,
        reader: AmmReader,
        path: Path,
        amount_in: int,
        pool_tasks: Dict[Tuple[str, str], "asyncio.Future[Optional[Pool]]"],
    ) -> _Candidate:
        candidate = _Candidate(path=path)

        pools = await asyncio.gather(
            *(self._load_pool(reader, a, b, pool_tasks) for a, b in zip(path, path[1:]))
        )
        if any(pool is None for pool in pools):
            return candidate
        candidate.pools = list(pools)

        try:
            amounts = await reader.get_amounts_out(amount_in, path)
        except ContractRevertError as exc:
            candidate.failures.append(str(exc))
            if is_liquidity_revert(exc.reason):
                await self._probe(reader, candidate, amount_in)
            return candidate
        except (RpcError, ValueError) as exc:
            candidate.failures.append(str(exc))
            return candidate

        if amounts and amounts[-1] > 0:
            candidate.output = amounts[-1]
            candidate.amounts = tuple(amounts)
            candidate.source = RouteSource.ROUTER
        return candidate

    async def _probe(self, reader: AmmReader, candidate: _Candidate, amount_in: int) -> None:
        probe_amounts = [amount_in // divisor for divisor in PROBE_DIVISORS]
        probe_amounts = [amount for amount in probe_amounts if amount > 0]
        if not probe_amounts:
            return

        results = await asyncio.gather(
            *(reader.get_amounts_out(amount, candidate.path) for amount in probe_amounts),
            return_exceptions=True,
        )
        for probe_amount, result in sorted(zip(probe_amounts, results), key=lambda item: -item[0]):
            if isinstance(result, BaseException):
                if isinstance(result, (RpcError, ValueError)):
                    continue
                raise result
            if not result or result[-1] <= 0:
                continue
            factor = extrapolation_factor(amount_in, probe_amount)
            candidate.output = result[-1] * amount_in * factor // (probe_amount * 100)
            candidate.amounts = ()
            candidate.source = RouteSource.PROBE
            logger.debug(
                "Extrapolated %s from probe of %s (factor %s%%)",
                "->".join(candidate.path),
                probe_amount,
                factor,
            )
            return

    def _reserve_estimate(self, candidate: _Candidate, amount_in: int, config: AmmConfig) -> _Candidate:
        if not candidate.pools:
            return candidate

        amount = amount_in
        for token, pool in zip(candidate.path, candidate.pools):
            reserve_in, reserve_out = pool.reserves_for(token)
            amount = constant_product_out(amount, reserve_in, reserve_out, config.fee_numerator, config.fee_denominator)
            if amount <= 0:
                return candidate

        candidate.output = amount * (100 - self.reserve_haircut_percent) // 100
        candidate.amounts = ()
        candidate.source = RouteSource.RESERVES
        return candidate

    @staticmethod
    def _to_route(candidate: _Candidate, amount_in: int) -> Route:
        liquidity = candidate.aggregate_liquidity
        return Route(
            path=candidate.path,
            expected_output=candidate.output,
            price_impact_percent=price_impact_percent(amount_in, liquidity),
            aggregate_liquidity=liquidity,
            amounts=candidate.amounts,
            source=candidate.source,
            pair_addresses=tuple(pool.pair_address for pool in candidate.pools or []),
        )
