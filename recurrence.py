import logging
from datetime import date, datetime, timedelta
from typing import Iterable, Optional, Union
from zoneinfo import ZoneInfo

from config import get_settings
from models import Expense, Frequency, MonthDayPolicy, RecurringExpenseRule
from store import ExpenseStore

logger = logging.getLogger(__name__)

DateLike = Union[date, datetime]

FREQUENCY_LABELS = {
    Frequency.daily: "Daily",
    Frequency.weekly: "Weekly",
    Frequency.monthly: "Monthly",
    Frequency.yearly: "Yearly",
}

# average occurrences per month
MONTHLY_FACTORS = {
    Frequency.daily: 30.44,
    Frequency.weekly: 4.35,
    Frequency.monthly: 1.0,
    Frequency.yearly: 1 / 12,
}


def local_today() -> date:
    settings = get_settings()
    tz = ZoneInfo(settings.timezone)
    return datetime.now(tz).date()


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def days_in_month(year: int, month: int) -> int:
    if month == 12:
        next_month = date(year + 1, 1, 1)
    else:
        next_month = date(year, month + 1, 1)
    return (next_month - date(year, month, 1)).days


def _add_months(base: date, months: int, *, policy: MonthDayPolicy) -> date:
    total_months = base.month - 1 + months
    year = base.year + total_months // 12
    month = total_months % 12 + 1

    dim = days_in_month(year, month)
    if base.day <= dim:
        return date(year, month, base.day)
    if policy == MonthDayPolicy.snap_to_end:
        return date(year, month, dim)
    # roll the surplus days into the following month: Jan 31 -> Mar 3
    return date(year, month, dim) + timedelta(days=base.day - dim)


def next_occurrence(
    anchor: DateLike,
    frequency: Union[Frequency, str],
    policy: MonthDayPolicy = MonthDayPolicy.roll_forward,
) -> date:
    frequency = Frequency(frequency)
    anchor = _as_date(anchor)
    if frequency == Frequency.daily:
        return anchor + timedelta(days=1)
    if frequency == Frequency.weekly:
        return anchor + timedelta(weeks=1)
    if frequency == Frequency.monthly:
        return _add_months(anchor, 1, policy=policy)
    return _add_months(anchor, 12, policy=policy)


def is_due(
    next_date: DateLike,
    end_date: Optional[DateLike] = None,
    as_of: Optional[DateLike] = None,
) -> bool:
    occurrence = _as_date(next_date)
    today = _as_date(as_of) if as_of is not None else local_today()
    if occurrence > today:
        return False
    if end_date is not None and occurrence > _as_date(end_date):
        return False
    return True


def frequency_label(frequency: Union[Frequency, str]) -> str:
    return FREQUENCY_LABELS[Frequency(frequency)]


def monthly_equivalent(amount: float, frequency: Union[Frequency, str]) -> float:
    return amount * MONTHLY_FACTORS[Frequency(frequency)]


def recurring_statistics(rules: Iterable[RecurringExpenseRule]) -> dict[str, object]:
    total = 0.0
    by_category: dict[str, float] = {}
    active_count = 0
    paused_count = 0

    for rule in rules:
        if not rule.is_active:
            paused_count += 1
            continue
        active_count += 1
        monthly = monthly_equivalent(rule.amount, rule.frequency)
        total += monthly
        by_category[rule.category] = by_category.get(rule.category, 0.0) + monthly

    items = sorted(by_category.items(), key=lambda x: x[1], reverse=True)
    breakdown = [
        {
            "category": category,
            "amount": amount,
            "percent": (amount / total * 100) if total > 0 else 0,
        }
        for category, amount in items
    ]
    return {
        "total_monthly": total,
        "breakdown": breakdown,
        "rule_counts": {
            "active": active_count,
            "paused": paused_count,
            "total": active_count + paused_count,
        },
    }


class RecurringExpenseGenerator:
    def __init__(self, store: ExpenseStore) -> None:
        self.store = store

    def generate_due(self, as_of: Optional[DateLike] = None) -> int:
        today = _as_date(as_of) if as_of is not None else local_today()
        count = 0
        for rule in self.store.active_rules():
            if not rule.is_active:
                continue
            if not is_due(rule.next_occurrence, rule.end_date, today):
                continue
            try:
                with self.store.transaction():
                    self._generate_occurrence(rule)
            except Exception:
                logger.exception(
                    f"recurring_generate_failed: rule_id={rule.id} "
                    f"occurrence={rule.next_occurrence}"
                )
                continue
            count += 1
        logger.info(f"recurring_generate: as_of={today} advanced={count}")
        return count

    def _generate_occurrence(self, rule: RecurringExpenseRule) -> None:
        occurrence = rule.next_occurrence
        if self.store.has_expense(rule.id, occurrence):
            logger.warning(
                f"recurring_generate_duplicate: rule_id={rule.id} occurrence={occurrence}"
            )
        else:
            description = (
                f"{rule.description} (Auto-generated)"
                if rule.description
                else "Recurring expense (Auto-generated)"
            )
            self.store.add_expense(
                Expense(
                    rule_id=rule.id,
                    amount=rule.amount,
                    category=rule.category,
                    description=description,
                    date=occurrence,
                )
            )
        self.store.advance(
            rule.id, next_occurrence(occurrence, rule.frequency, rule.month_day_policy)
        )
