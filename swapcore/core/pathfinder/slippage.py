"""Price impact and dynamic slippage heuristics for on-chain routes."""

BASE_SLIPPAGE_PERCENT = 0.5
MAX_SLIPPAGE_PERCENT = 50.0
FEE_ON_TRANSFER_EXTRA = 15.0
LOW_LIQUIDITY_EXTRA = 10.0

# (price impact above, extra slippage), checked highest first
IMPACT_BRACKETS = (
    (50.0, 20.0),
    (20.0, 10.0),
    (10.0, 5.0),
    (5.0, 2.0),
)


def price_impact_percent(amount_in: int, total_liquidity: int) -> float:
    """Trade size relative to aggregate pool depth, as a percentage capped at 100."""
    if total_liquidity <= 0:
        return 100.0
    impact = (amount_in * 10_000 // total_liquidity) / 100
    return min(impact, 100.0)


def is_low_liquidity(aggregate_liquidity: int, threshold: int) -> bool:
    return aggregate_liquidity < threshold


def dynamic_slippage(
    price_impact: float,
    *,
    fee_on_transfer: bool = False,
    low_liquidity: bool = False,
) -> float:
    slippage = BASE_SLIPPAGE_PERCENT

    for bound, extra in IMPACT_BRACKETS:
        if price_impact > bound:
            slippage += extra
            break

    if fee_on_transfer:
        slippage += FEE_ON_TRANSFER_EXTRA
    if low_liquidity:
        slippage += LOW_LIQUIDITY_EXTRA

    return min(slippage, MAX_SLIPPAGE_PERCENT)
