import math
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from config import get_settings
from models import AlertSeverity, BudgetAlert, BudgetTemplate, ValidationResult
from rounding import round_half_up

TOTAL_TOLERANCE = 0.01
MIN_INVESTMENT_PCT = 10
MIN_SAVINGS_PCT = 5

ALERT_THRESHOLD = 0.8
DANGER_PCT = 100
CRITICAL_PCT = 120

CATEGORIES = (
    "mortgage",
    "entertainment",
    "travel",
    "food",
    "health",
    "utilities",
    "transportation",
    "shopping",
    "education",
    "investment",
    "savings",
)

DEFAULT_ALLOCATION = MappingProxyType(
    {
        "mortgage": 25,
        "entertainment": 15,
        "travel": 10,
        "food": 15,
        "health": 10,
        "investment": 15,
        "savings": 10,
    }
)


def _template(
    template_id: str,
    name: str,
    description: str,
    icon: str,
    recommended: str,
    allocations: dict[str, float],
) -> BudgetTemplate:
    return BudgetTemplate(
        id=template_id,
        name=name,
        description=description,
        icon=icon,
        recommended=recommended,
        allocations=MappingProxyType(
            {category: allocations.get(category, 0) for category in CATEGORIES}
        ),
    )


# Every bundled template except "custom" totals 100 and meets the
# investment/savings minimums.
TEMPLATES: tuple[BudgetTemplate, ...] = (
    _template(
        "conservative",
        "Conservative",
        "Focus on savings and stability with minimal discretionary spending",
        "🛡️",
        "For those prioritizing emergency funds and debt reduction",
        {
            "mortgage": 28,
            "entertainment": 4,
            "travel": 3,
            "food": 14,
            "health": 8,
            "utilities": 10,
            "transportation": 7,
            "shopping": 4,
            "education": 4,
            "investment": 10,
            "savings": 8,
        },
    ),
    _template(
        "balanced",
        "Balanced",
        "50/30/20 rule - balanced approach to needs, wants, and savings",
        "⚖️",
        "Popular choice for sustainable long-term financial health",
        {
            "mortgage": 25,
            "entertainment": 7,
            "travel": 6,
            "food": 14,
            "health": 7,
            "utilities": 9,
            "transportation": 7,
            "shopping": 6,
            "education": 3,
            "investment": 10,
            "savings": 6,
        },
    ),
    _template(
        "growth",
        "Growth",
        "Aggressive savings and investment for wealth building",
        "📈",
        "For high earners focused on maximizing wealth accumulation",
        {
            "mortgage": 25,
            "entertainment": 6,
            "travel": 5,
            "food": 12,
            "health": 7,
            "utilities": 8,
            "transportation": 6,
            "shopping": 5,
            "education": 4,
            "investment": 15,
            "savings": 7,
        },
    ),
    _template(
        "custom",
        "Custom",
        "Start from scratch and create your own budget allocation",
        "✏️",
        "For those with specific financial goals and preferences",
        {},
    ),
)

_TEMPLATES_BY_ID = {template.id: template for template in TEMPLATES}


def list_templates() -> list[BudgetTemplate]:
    return list(TEMPLATES)


def get_template(template_id: str) -> Optional[BudgetTemplate]:
    return _TEMPLATES_BY_ID.get(template_id)


def apply_template(
    template_id: str, categories: Optional[Iterable[str]] = None
) -> Optional[dict[str, float]]:
    """Return a fresh allocation built from a template, or None if unknown.

    With ``categories`` the result holds exactly those keys; any the template
    does not define are set to 0.
    """
    template = get_template(template_id)
    if template is None:
        return None
    if categories is None:
        return dict(template.allocations)
    return {category: template.allocations.get(category, 0) for category in categories}


def default_allocation() -> dict[str, float]:
    return dict(DEFAULT_ALLOCATION)


def validate_allocation(allocation: Mapping[str, float]) -> ValidationResult:
    total = math.fsum(allocation.values())
    errors: list[str] = []
    if not abs(total - 100) < TOTAL_TOLERANCE:
        errors.append("Total budget must equal 100%")
    if not allocation.get("investment", 0) >= MIN_INVESTMENT_PCT:
        errors.append(f"Investment must be at least {MIN_INVESTMENT_PCT}%")
    if not allocation.get("savings", 0) >= MIN_SAVINGS_PCT:
        errors.append(f"Savings must be at least {MIN_SAVINGS_PCT}%")
    return ValidationResult(
        valid=not errors,
        total=total,
        difference=100 - total,
        errors=tuple(errors),
    )


def investment_percentage(allocation: Optional[Mapping[str, float]]) -> float:
    if allocation:
        value = allocation.get("investment")
        if value:
            return value
    return get_settings().default_investment_pct


def budget_alerts(
    budgeted: Mapping[str, float], spent: Mapping[str, float]
) -> list[BudgetAlert]:
    alerts: list[BudgetAlert] = []
    for category, budget in budgeted.items():
        if budget <= 0:
            continue
        amount = spent.get(category, 0)
        ratio = amount / budget
        if ratio < ALERT_THRESHOLD:
            continue
        percentage = int(round_half_up(amount * 100 / budget))
        if percentage >= CRITICAL_PCT:
            severity = AlertSeverity.critical
        elif percentage >= DANGER_PCT:
            severity = AlertSeverity.danger
        else:
            severity = AlertSeverity.warning
        alerts.append(
            BudgetAlert(
                category=category,
                budgeted=budget,
                spent=amount,
                percentage=percentage,
                severity=severity,
            )
        )
    return sorted(alerts, key=lambda alert: alert.percentage, reverse=True)


def budget_health_score(
    income: float,
    total_expenses: float,
    budgeted: Mapping[str, float],
    spent: Mapping[str, float],
    investment_pct: float,
) -> int:
    score = 100

    overspent = [c for c, budget in budgeted.items() if spent.get(c, 0) > budget]
    score -= len(overspent) * 5

    saved = income - total_expenses
    savings_rate = (saved / income * 100) if income > 0 else 0
    if savings_rate >= 10:
        score += 10
    if savings_rate >= 20:
        score += 10

    if investment_pct >= 15:
        score += 10
    if investment_pct >= 25:
        score += 10

    # no emergency fund: less than three months of income saved
    if saved < income * 3:
        score -= 20

    return max(0, min(100, score))


def health_label(score: int) -> str:
    if score >= 75:
        return "Excellent"
    if score >= 50:
        return "Good"
    if score >= 25:
        return "Fair"
    return "Needs Improvement"
