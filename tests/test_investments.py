from datetime import date

import pytest

from investments import (
    CATALOG,
    capacity,
    expected_return,
    portfolio_summary,
    position_roi,
    recommend,
    recommended_amounts,
    risk_profile,
    roi,
    sip_projection,
)
from models import InvestmentGoal, InvestmentType, PortfolioPosition, RiskTier


def _allocations(options) -> list[tuple[str, float]]:
    return [(o.key, o.recommended_allocation) for o in options]


def _position(units: float, buy: float, current: float) -> PortfolioPosition:
    return PortfolioPosition(
        investment_type=InvestmentType.stocks,
        name="Large Cap Stocks",
        units=units,
        buy_price=buy,
        current_price=current,
        purchase_date=date(2025, 6, 1),
    )


def test_recommend_conservative() -> None:
    options = recommend("conservative", 5000)
    assert _allocations(options) == [
        ("fixed_deposit", 40),
        ("government_bonds", 30),
        ("gold", 20),
        ("balanced_mutual_funds", 10),
        ("index_funds", 0),
    ]


def test_recommend_moderate_drops_options_above_available_amount() -> None:
    options = recommend(RiskTier.moderate, 5000)
    assert _allocations(options) == [
        ("government_bonds", 25),
        ("gold", 25),
        ("fixed_deposit", 20),
        ("balanced_mutual_funds", 15),
        ("index_funds", 15),
        ("large_cap_stocks", 0),
    ]
    assert "reits" not in {o.key for o in options}


def test_recommend_aggressive_uses_whole_catalog() -> None:
    options = recommend("aggressive", 20000)
    assert len(options) == len(CATALOG)
    assert _allocations(options) == [
        ("balanced_mutual_funds", 20),
        ("index_funds", 20),
        ("gold", 15),
        ("large_cap_stocks", 15),
        ("fixed_deposit", 10),
        ("government_bonds", 10),
        ("mid_small_cap_stocks", 5),
        ("reits", 5),
        ("crypto", 0),
    ]


def test_recommend_renormalizes_after_minimum_filter() -> None:
    options = recommend("conservative", 800)
    assert _allocations(options) == [
        ("gold", 67),
        ("balanced_mutual_funds", 33),
        ("index_funds", 0),
    ]
    assert sum(o.recommended_allocation for o in options) == 100


def test_recommend_nothing_affordable_is_empty() -> None:
    assert recommend("aggressive", 100) == []


def test_recommend_all_zero_weights_kept() -> None:
    crypto = next(o for o in CATALOG if o.key == "crypto")
    options = recommend("aggressive", 1000, catalog=[crypto])
    assert _allocations(options) == [("crypto", 0)]


def test_recommend_is_independent_of_catalog_order() -> None:
    forward = dict(_allocations(recommend("aggressive", 20000)))
    backward = dict(
        _allocations(recommend("aggressive", 20000, catalog=tuple(reversed(CATALOG))))
    )
    assert forward == backward


def test_recommend_retirement_goal_boosts_funds_and_stocks() -> None:
    options = recommend("conservative", 5000, goal=InvestmentGoal.retirement)
    assert _allocations(options) == [
        ("fixed_deposit", 36),
        ("government_bonds", 27),
        ("gold", 18),
        ("balanced_mutual_funds", 14),
        ("index_funds", 5),
    ]


def test_recommend_short_term_goal_drops_illiquid_options() -> None:
    options = recommend("moderate", 5000, goal="short_term")
    assert _allocations(options) == [
        ("government_bonds", 31),
        ("gold", 31),
        ("balanced_mutual_funds", 19),
        ("index_funds", 19),
        ("large_cap_stocks", 0),
    ]


def test_recommend_does_not_mutate_catalog() -> None:
    recommend("aggressive", 20000)
    assert all(o.recommended_allocation == 0 for o in CATALOG)


def test_recommend_rejects_unknown_tier() -> None:
    with pytest.raises(ValueError):
        recommend("reckless", 5000)


def test_recommended_amounts_round_half_up() -> None:
    amounts = recommended_amounts(recommend("conservative", 5000), 1234)
    assert amounts == {
        "Fixed Deposit (FD)": 494,
        "Government Bonds": 370,
        "Digital Gold / Gold ETF": 247,
        "Balanced Mutual Funds": 123,
        "Index Funds": 0,
    }


def test_risk_profile_lookup() -> None:
    profile = risk_profile("moderate")
    assert profile.title == "Moderate Investor"
    assert len(profile.characteristics) == 4
    assert risk_profile(RiskTier.aggressive).title == "Aggressive Investor"
    with pytest.raises(ValueError):
        risk_profile("unknown")


def test_capacity() -> None:
    result = capacity(5000, 15, 200)
    assert result.investment_budget == 750
    assert result.available_to_invest == 550
    assert result.monthly_investment_capacity == 750
    assert result.currently_invested == 200


def test_capacity_never_negative() -> None:
    assert capacity(0, 15, 0).available_to_invest == 0
    assert capacity(1000, 10, 500).available_to_invest == 0


def test_roi() -> None:
    result = roi(1000, 1250)
    assert result.profit == 250
    assert result.profit_percentage == 25
    assert result.roi == result.profit_percentage
    assert roi(1000, 800).roi == -20


def test_roi_zero_invested() -> None:
    result = roi(0, 0)
    assert (result.roi, result.profit, result.profit_percentage) == (0, 0, 0)
    assert roi(0, 50).roi == 0


def test_position_metrics() -> None:
    position = _position(units=10, buy=100, current=120)
    assert position.total_invested == 1000
    assert position.current_value == 1200
    assert position_roi(position).roi == pytest.approx(20)


def test_portfolio_summary() -> None:
    summary = portfolio_summary(
        [_position(10, 100, 120), _position(5, 200, 150)]
    )
    assert summary.total_invested == 2000
    assert summary.current_value == 1950
    assert summary.total_profit == -50
    assert summary.overall_roi == pytest.approx(-2.5)
    assert summary.position_count == 2

    empty = portfolio_summary([])
    assert empty.overall_roi == 0
    assert empty.position_count == 0


def test_expected_return_compounds_annually() -> None:
    assert expected_return(1000, 10, 2) == pytest.approx(1210)
    assert expected_return(1000, 0, 5) == 1000


def test_sip_projection() -> None:
    result = sip_projection(1000, 12, 1)
    assert result.total_invested == 12000
    assert result.total_value == pytest.approx(12809.33, rel=1e-6)
    assert result.estimated_returns == pytest.approx(809.33, rel=1e-4)


def test_sip_projection_zero_rate() -> None:
    result = sip_projection(1000, 0, 2)
    assert result.total_value == 24000
    assert result.estimated_returns == 0
