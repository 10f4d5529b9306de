from datetime import date
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from models import (
    Frequency,
    Goal,
    InvestmentType,
    MonthDayPolicy,
    PortfolioPosition,
    RecurringExpenseRule,
    RiskTier,
)


Percentage = Annotated[float, Field(ge=0, allow_inf_nan=False)]


class BudgetAllocationIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    allocations: dict[str, Percentage] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_categories(self) -> "BudgetAllocationIn":
        for category in self.allocations:
            if not category.strip():
                raise ValueError("Category key must not be empty")
        return self


class RecurringExpenseIn(BaseModel):
    amount: float = Field(..., gt=0)
    category: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=200)
    frequency: Frequency
    start_date: date
    end_date: Optional[date] = None
    next_occurrence: Optional[date] = None
    is_active: bool = True
    month_day_policy: MonthDayPolicy = MonthDayPolicy.roll_forward

    @model_validator(mode="after")
    def _check_dates(self) -> "RecurringExpenseIn":
        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("End date must not be before start date")
        if self.next_occurrence is not None and self.next_occurrence < self.start_date:
            raise ValueError("Next occurrence must not be before start date")
        return self

    def to_rule(self, rule_id: int) -> RecurringExpenseRule:
        return RecurringExpenseRule(
            id=rule_id,
            amount=self.amount,
            category=self.category,
            description=self.description,
            frequency=self.frequency,
            start_date=self.start_date,
            end_date=self.end_date,
            next_occurrence=self.next_occurrence or self.start_date,
            is_active=self.is_active,
            month_day_policy=self.month_day_policy,
        )


class PortfolioPositionIn(BaseModel):
    investment_type: InvestmentType
    name: str = Field(..., min_length=1, max_length=120)
    units: float = Field(..., gt=0)
    buy_price: float = Field(..., gt=0)
    current_price: float = Field(..., ge=0)
    purchase_date: date

    def to_position(self, position_id: Optional[int] = None) -> PortfolioPosition:
        return PortfolioPosition(
            id=position_id,
            investment_type=self.investment_type,
            name=self.name,
            units=self.units,
            buy_price=self.buy_price,
            current_price=self.current_price,
            purchase_date=self.purchase_date,
        )


class GoalIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    target_amount: float = Field(..., gt=0)
    current_amount: float = Field(default=0, ge=0)
    deadline: date
    category: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)

    def to_goal(self, goal_id: Optional[int] = None) -> Goal:
        return Goal(
            id=goal_id,
            name=self.name,
            target_amount=self.target_amount,
            current_amount=self.current_amount,
            deadline=self.deadline,
            category=self.category,
            description=self.description,
        )


class RiskToleranceIn(BaseModel):
    risk_tolerance: RiskTier
