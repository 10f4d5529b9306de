import copy
from contextlib import contextmanager
from dataclasses import replace
from datetime import date
from typing import ContextManager, Iterator, Optional, Protocol

from models import Expense, PortfolioPosition, RecurringExpenseRule


class ExpenseStore(Protocol):
    def active_rules(self) -> list[RecurringExpenseRule]: ...

    def has_expense(self, rule_id: int, occurrence: date) -> bool: ...

    def add_expense(self, expense: Expense) -> None: ...

    def advance(self, rule_id: int, next_occurrence: date) -> None: ...

    def transaction(self) -> ContextManager[None]: ...


class InMemoryStore:
    def __init__(self) -> None:
        self.rules: dict[int, RecurringExpenseRule] = {}
        self.expenses: list[Expense] = []
        self.allocations: dict[int, dict[str, float]] = {}
        self.positions: dict[int, PortfolioPosition] = {}
        self._next_position_id = 1

    @contextmanager
    def transaction(self) -> Iterator[None]:
        snapshot = (
            dict(self.rules),
            list(self.expenses),
            copy.deepcopy(self.allocations),
            dict(self.positions),
            self._next_position_id,
        )
        try:
            yield
        except Exception:
            (
                self.rules,
                self.expenses,
                self.allocations,
                self.positions,
                self._next_position_id,
            ) = snapshot
            raise

    def add_rule(self, rule: RecurringExpenseRule) -> RecurringExpenseRule:
        self.rules[rule.id] = rule
        return rule

    def get_rule(self, rule_id: int) -> Optional[RecurringExpenseRule]:
        return self.rules.get(rule_id)

    def set_active(self, rule_id: int, is_active: bool) -> None:
        rule = self.rules.get(rule_id)
        if rule is None:
            raise ValueError("Rule not found")
        self.rules[rule_id] = replace(rule, is_active=is_active)

    def delete_rule(self, rule_id: int) -> None:
        if self.rules.pop(rule_id, None) is None:
            raise ValueError("Rule not found")

    def active_rules(self) -> list[RecurringExpenseRule]:
        rules = [rule for rule in self.rules.values() if rule.is_active]
        return sorted(rules, key=lambda rule: (rule.next_occurrence, rule.id))

    def has_expense(self, rule_id: int, occurrence: date) -> bool:
        return any(
            expense.rule_id == rule_id and expense.date == occurrence
            for expense in self.expenses
        )

    def add_expense(self, expense: Expense) -> None:
        self.expenses.append(expense)

    def advance(self, rule_id: int, next_occurrence: date) -> None:
        rule = self.rules.get(rule_id)
        if rule is None:
            raise ValueError("Rule not found")
        if next_occurrence <= rule.next_occurrence:
            raise ValueError("Next occurrence can only move forward")
        self.rules[rule_id] = replace(rule, next_occurrence=next_occurrence)

    def save_allocation(self, user_id: int, allocation: dict[str, float]) -> None:
        self.allocations[user_id] = dict(allocation)

    def get_allocation(self, user_id: int) -> Optional[dict[str, float]]:
        allocation = self.allocations.get(user_id)
        return dict(allocation) if allocation is not None else None

    def add_position(self, position: PortfolioPosition) -> PortfolioPosition:
        stored = replace(position, id=self._next_position_id)
        self.positions[stored.id] = stored
        self._next_position_id += 1
        return stored

    def delete_position(self, position_id: int) -> None:
        if self.positions.pop(position_id, None) is None:
            raise ValueError("Investment not found")

    def list_positions(self) -> list[PortfolioPosition]:
        return list(self.positions.values())
