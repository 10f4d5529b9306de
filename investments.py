import math
from dataclasses import replace
from types import MappingProxyType
from typing import Iterable, Optional, Sequence, Union

from models import (
    InvestmentCapacity,
    InvestmentGoal,
    InvestmentOption,
    InvestmentType,
    Liquidity,
    PortfolioPosition,
    PortfolioSummary,
    RiskLevel,
    RiskProfile,
    RiskTier,
    RoiResult,
    SipProjection,
)
from rounding import round_half_up

CATALOG: tuple[InvestmentOption, ...] = (
    InvestmentOption(
        key="fixed_deposit",
        type=InvestmentType.fixed_deposit,
        name="Fixed Deposit (FD)",
        description="Guaranteed returns with capital protection from banks",
        risk_level=RiskLevel.low,
        expected_return="6-7% p.a.",
        min_investment=1000,
        liquidity=Liquidity.low,
        time_horizon="1-5 years",
        pros=("Guaranteed returns", "Capital protection", "No market risk"),
        cons=("Low returns", "Penalty on premature withdrawal", "Fixed lock-in period"),
    ),
    InvestmentOption(
        key="government_bonds",
        type=InvestmentType.bonds,
        name="Government Bonds",
        description="Debt securities issued by government, very safe",
        risk_level=RiskLevel.low,
        expected_return="7-8% p.a.",
        min_investment=1000,
        liquidity=Liquidity.medium,
        time_horizon="3-10 years",
        pros=("Low risk", "Stable returns", "Government backed"),
        cons=("Lower returns than equity", "Interest rate risk", "Long lock-in"),
    ),
    InvestmentOption(
        key="gold",
        type=InvestmentType.gold,
        name="Digital Gold / Gold ETF",
        description="Hedge against inflation, safe haven asset",
        risk_level=RiskLevel.low,
        expected_return="8-10% p.a.",
        min_investment=500,
        liquidity=Liquidity.high,
        time_horizon="3-5 years",
        pros=("Inflation hedge", "High liquidity", "Safe haven"),
        cons=("No regular income", "Price volatility", "Storage costs (physical)"),
    ),
    InvestmentOption(
        key="balanced_mutual_funds",
        type=InvestmentType.mutual_funds,
        name="Balanced Mutual Funds",
        description="Mix of equity and debt, professionally managed",
        risk_level=RiskLevel.medium,
        expected_return="10-12% p.a.",
        min_investment=500,
        liquidity=Liquidity.high,
        time_horizon="3-5 years",
        pros=("Professional management", "Diversification", "Balanced risk"),
        cons=("Management fees", "Market risk", "Exit load"),
    ),
    InvestmentOption(
        key="index_funds",
        type=InvestmentType.mutual_funds,
        name="Index Funds",
        description="Low-cost funds tracking market indices like Nifty 50",
        risk_level=RiskLevel.medium,
        expected_return="12-15% p.a.",
        min_investment=500,
        liquidity=Liquidity.high,
        time_horizon="5-10 years",
        pros=("Low expense ratio", "Market returns", "Passive investing"),
        cons=("Market risk", "No alpha generation", "Volatility"),
    ),
    InvestmentOption(
        key="large_cap_stocks",
        type=InvestmentType.stocks,
        name="Large Cap Stocks",
        description="Established companies with market cap > ₹20,000 Cr",
        risk_level=RiskLevel.medium,
        expected_return="12-15% p.a.",
        min_investment=1000,
        liquidity=Liquidity.high,
        time_horizon="5-10 years",
        pros=("High liquidity", "Dividend income", "Capital appreciation"),
        cons=("Market volatility", "Requires research", "Company-specific risk"),
    ),
    InvestmentOption(
        key="mid_small_cap_stocks",
        type=InvestmentType.stocks,
        name="Mid & Small Cap Stocks",
        description="Higher growth potential with higher risk",
        risk_level=RiskLevel.high,
        expected_return="15-20% p.a.",
        min_investment=1000,
        liquidity=Liquidity.medium,
        time_horizon="7-10 years",
        pros=(
            "High growth potential",
            "Multi-bagger opportunities",
            "Market inefficiencies",
        ),
        cons=("High volatility", "Lower liquidity", "Higher risk"),
    ),
    InvestmentOption(
        key="reits",
        type=InvestmentType.real_estate,
        name="REITs (Real Estate Investment Trusts)",
        description="Invest in real estate without buying property",
        risk_level=RiskLevel.medium,
        expected_return="10-14% p.a.",
        min_investment=10000,
        liquidity=Liquidity.medium,
        time_horizon="5-10 years",
        pros=("Regular income", "Real estate exposure", "Professional management"),
        cons=("Market risk", "Interest rate sensitivity", "Lower liquidity"),
    ),
    InvestmentOption(
        key="crypto",
        type=InvestmentType.crypto,
        name="Cryptocurrency (Bitcoin, Ethereum)",
        description="High risk, high reward digital assets",
        risk_level=RiskLevel.high,
        expected_return="Variable (20-100%+ or loss)",
        min_investment=500,
        liquidity=Liquidity.high,
        time_horizon="3-5 years",
        pros=("High growth potential", "24/7 trading", "Decentralized"),
        cons=("Extremely volatile", "Regulatory uncertainty", "High risk of loss"),
    ),
)

# Weights are keyed by catalog key so reordering CATALOG cannot shift them.
# Options admitted by a tier but absent here are listed with weight 0.
TIER_WEIGHTS = MappingProxyType(
    {
        RiskTier.conservative: MappingProxyType(
            {
                "fixed_deposit": 40,
                "government_bonds": 30,
                "gold": 20,
                "balanced_mutual_funds": 10,
            }
        ),
        RiskTier.moderate: MappingProxyType(
            {
                "fixed_deposit": 20,
                "government_bonds": 25,
                "gold": 25,
                "balanced_mutual_funds": 15,
                "index_funds": 15,
            }
        ),
        RiskTier.aggressive: MappingProxyType(
            {
                "fixed_deposit": 10,
                "government_bonds": 10,
                "gold": 15,
                "balanced_mutual_funds": 20,
                "index_funds": 20,
                "large_cap_stocks": 15,
                "mid_small_cap_stocks": 5,
                "reits": 5,
            }
        ),
    }
)

RETIREMENT_BOOST = 5
RETIREMENT_BOOST_TYPES = (InvestmentType.mutual_funds, InvestmentType.stocks)

RISK_PROFILES = MappingProxyType(
    {
        RiskTier.conservative: RiskProfile(
            title="Conservative Investor",
            description=(
                "Prioritizes capital preservation and stable returns over high growth"
            ),
            characteristics=(
                "Low risk tolerance",
                "Prefers guaranteed returns",
                "Focuses on capital protection",
                "Suitable for near-term goals",
            ),
        ),
        RiskTier.moderate: RiskProfile(
            title="Moderate Investor",
            description="Balanced approach between growth and stability",
            characteristics=(
                "Medium risk tolerance",
                "Mix of debt and equity",
                "Long-term wealth creation",
                "Can handle moderate volatility",
            ),
        ),
        RiskTier.aggressive: RiskProfile(
            title="Aggressive Investor",
            description="Seeks maximum growth with higher risk acceptance",
            characteristics=(
                "High risk tolerance",
                "Equity-focused portfolio",
                "Long investment horizon",
                "Can handle market volatility",
            ),
        ),
    }
)


def _admitted(option: InvestmentOption, tier: RiskTier) -> bool:
    if tier == RiskTier.conservative:
        return option.risk_level == RiskLevel.low or (
            option.risk_level == RiskLevel.medium
            and option.type == InvestmentType.mutual_funds
        )
    if tier == RiskTier.moderate:
        return option.risk_level in (RiskLevel.low, RiskLevel.medium)
    return True


def _normalize(weights: Sequence[float]) -> list[int]:
    """Scale weights to whole percentages that sum to exactly 100.

    Largest-remainder rounding; an all-zero input stays all zero.
    """
    total = math.fsum(weights)
    if total <= 0:
        return [0] * len(weights)
    exact = [weight / total * 100 for weight in weights]
    shares = [math.floor(value) for value in exact]
    shortfall = 100 - sum(shares)
    by_remainder = sorted(
        range(len(exact)), key=lambda i: exact[i] - shares[i], reverse=True
    )
    for i in by_remainder[:shortfall]:
        shares[i] += 1
    return shares


def recommend(
    risk_tier: Union[RiskTier, str],
    available_amount: float,
    goal: Optional[Union[InvestmentGoal, str]] = None,
    catalog: Sequence[InvestmentOption] = CATALOG,
) -> list[InvestmentOption]:
    tier = RiskTier(risk_tier)
    goal = InvestmentGoal(goal) if goal is not None else None
    weights = TIER_WEIGHTS[tier]

    options = [
        replace(option, recommended_allocation=weights.get(option.key, 0))
        for option in catalog
        if _admitted(option, tier)
    ]

    if goal == InvestmentGoal.retirement:
        options = [
            replace(
                option,
                recommended_allocation=option.recommended_allocation + RETIREMENT_BOOST,
            )
            if option.type in RETIREMENT_BOOST_TYPES
            else option
            for option in options
        ]
    elif goal == InvestmentGoal.short_term:
        options = [option for option in options if option.liquidity != Liquidity.low]

    options = [option for option in options if option.min_investment <= available_amount]

    shares = _normalize([option.recommended_allocation for option in options])
    options = [
        replace(option, recommended_allocation=share)
        for option, share in zip(options, shares)
    ]
    return sorted(options, key=lambda option: option.recommended_allocation, reverse=True)


def recommended_amounts(
    recommendations: Iterable[InvestmentOption], total_amount: float
) -> dict[str, float]:
    return {
        option.name: round_half_up(total_amount * option.recommended_allocation / 100)
        for option in recommendations
    }


def risk_profile(risk_tier: Union[RiskTier, str]) -> RiskProfile:
    return RISK_PROFILES[RiskTier(risk_tier)]


def capacity(
    income: float, investment_pct: float, already_invested: float = 0
) -> InvestmentCapacity:
    budget = income * investment_pct / 100
    return InvestmentCapacity(
        total_income=income,
        investment_budget=budget,
        investment_percentage=investment_pct,
        currently_invested=already_invested,
        available_to_invest=max(0, budget - already_invested),
        monthly_investment_capacity=budget,
    )


def roi(total_invested: float, current_value: float) -> RoiResult:
    profit = current_value - total_invested
    profit_percentage = profit / total_invested * 100 if total_invested > 0 else 0
    return RoiResult(roi=profit_percentage, profit=profit, profit_percentage=profit_percentage)


def position_roi(position: PortfolioPosition) -> RoiResult:
    return roi(position.total_invested, position.current_value)


def portfolio_summary(positions: Iterable[PortfolioPosition]) -> PortfolioSummary:
    total_invested = 0.0
    current_value = 0.0
    count = 0
    for position in positions:
        total_invested += position.total_invested
        current_value += position.current_value
        count += 1
    overall = roi(total_invested, current_value)
    return PortfolioSummary(
        total_invested=total_invested,
        current_value=current_value,
        total_profit=overall.profit,
        overall_roi=overall.roi,
        position_count=count,
    )


def expected_return(amount: float, annual_rate_pct: float, years: float) -> float:
    return amount * (1 + annual_rate_pct / 100) ** years


def sip_projection(
    monthly_amount: float, annual_rate_pct: float, years: float
) -> SipProjection:
    months = years * 12
    monthly_rate = annual_rate_pct / 12 / 100
    total_invested = monthly_amount * months
    if monthly_rate == 0:
        future_value = total_invested
    else:
        future_value = (
            monthly_amount
            * (((1 + monthly_rate) ** months - 1) / monthly_rate)
            * (1 + monthly_rate)
        )
    return SipProjection(
        total_invested=total_invested,
        estimated_returns=future_value - total_invested,
        total_value=future_value,
    )
