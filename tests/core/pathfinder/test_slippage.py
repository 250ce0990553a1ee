import pytest

from swapcore.core.pathfinder.slippage import (
    BASE_SLIPPAGE_PERCENT,
    MAX_SLIPPAGE_PERCENT,
    dynamic_slippage,
    is_low_liquidity,
    price_impact_percent,
)


def test_price_impact_is_relative_to_liquidity():
    assert price_impact_percent(1000, 1_000_000) == pytest.approx(0.1)
    assert price_impact_percent(500_000, 1_000_000) == pytest.approx(50.0)


def test_price_impact_caps_at_100():
    assert price_impact_percent(10**9, 1000) == 100.0
    assert price_impact_percent(1, 0) == 100.0


def test_low_liquidity_threshold():
    assert is_low_liquidity(999, 1000)
    assert not is_low_liquidity(1000, 1000)


def test_base_slippage_for_small_trades():
    assert dynamic_slippage(0.1) == BASE_SLIPPAGE_PERCENT


def test_slippage_grows_with_price_impact():
    values = [dynamic_slippage(impact) for impact in (1, 6, 11, 21, 51)]
    assert values == sorted(values)
    assert values == [0.5, 2.5, 5.5, 10.5, 20.5]


def test_risk_flags_add_slippage():
    assert dynamic_slippage(0, fee_on_transfer=True) == pytest.approx(15.5)
    assert dynamic_slippage(0, low_liquidity=True) == pytest.approx(10.5)


def test_worst_case_stays_within_cap():
    worst = dynamic_slippage(90, fee_on_transfer=True, low_liquidity=True)
    assert worst == pytest.approx(45.5)
    assert worst <= MAX_SLIPPAGE_PERCENT
