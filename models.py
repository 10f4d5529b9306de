from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Mapping, Optional


class Frequency(str, Enum):
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"
    yearly = "yearly"


class MonthDayPolicy(str, Enum):
    roll_forward = "roll_forward"
    snap_to_end = "snap_to_end"


class RiskTier(str, Enum):
    conservative = "conservative"
    moderate = "moderate"
    aggressive = "aggressive"


class RiskLevel(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class Liquidity(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class InvestmentType(str, Enum):
    stocks = "stocks"
    bonds = "bonds"
    mutual_funds = "mutual_funds"
    real_estate = "real_estate"
    crypto = "crypto"
    fixed_deposit = "fixed_deposit"
    gold = "gold"


class InvestmentGoal(str, Enum):
    wealth_creation = "wealth_creation"
    retirement = "retirement"
    short_term = "short_term"
    balanced = "balanced"


class AlertSeverity(str, Enum):
    warning = "warning"
    danger = "danger"
    critical = "critical"


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    total: float
    difference: float
    errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class BudgetTemplate:
    id: str
    name: str
    description: str
    icon: str
    recommended: str
    allocations: Mapping[str, float]


@dataclass(frozen=True)
class BudgetAlert:
    category: str
    budgeted: float
    spent: float
    percentage: int
    severity: AlertSeverity


@dataclass(frozen=True)
class RecurringExpenseRule:
    id: int
    amount: float
    category: str
    frequency: Frequency
    start_date: date
    next_occurrence: date
    description: Optional[str] = None
    end_date: Optional[date] = None
    is_active: bool = True
    month_day_policy: MonthDayPolicy = MonthDayPolicy.roll_forward


@dataclass(frozen=True)
class Expense:
    rule_id: Optional[int]
    amount: float
    category: str
    description: str
    date: date


@dataclass(frozen=True)
class InvestmentOption:
    key: str
    type: InvestmentType
    name: str
    description: str
    risk_level: RiskLevel
    expected_return: str
    min_investment: float
    liquidity: Liquidity
    time_horizon: str
    pros: tuple[str, ...] = ()
    cons: tuple[str, ...] = ()
    recommended_allocation: float = 0


@dataclass(frozen=True)
class RiskProfile:
    title: str
    description: str
    characteristics: tuple[str, ...]


@dataclass(frozen=True)
class InvestmentCapacity:
    total_income: float
    investment_budget: float
    investment_percentage: float
    currently_invested: float
    available_to_invest: float
    monthly_investment_capacity: float


@dataclass(frozen=True)
class RoiResult:
    roi: float
    profit: float
    profit_percentage: float


@dataclass(frozen=True)
class SipProjection:
    total_invested: float
    estimated_returns: float
    total_value: float


@dataclass(frozen=True)
class PortfolioPosition:
    investment_type: InvestmentType
    name: str
    units: float
    buy_price: float
    current_price: float
    purchase_date: date
    id: Optional[int] = None

    @property
    def total_invested(self) -> float:
        return self.units * self.buy_price

    @property
    def current_value(self) -> float:
        return self.units * self.current_price


@dataclass(frozen=True)
class PortfolioSummary:
    total_invested: float
    current_value: float
    total_profit: float
    overall_roi: float
    position_count: int


@dataclass(frozen=True)
class Goal:
    name: str
    target_amount: float
    deadline: date
    category: str
    current_amount: float = 0
    description: Optional[str] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class GoalProgress:
    goal: Goal
    progress: float
    remaining: float
