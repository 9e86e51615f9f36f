from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional

from go_dutch.core.balances import MemberBalance, compute_balances
from go_dutch.core.consistency import DEFAULT_TOLERANCE, is_consistent
from go_dutch.core.errors import InvalidExpense, InvalidMeeting
from go_dutch.core.split import split_amount
from go_dutch.core.transfers import Transfer, resolve_transfers

logger = logging.getLogger(__name__)

# Matches the name columns of the storage schema.
MAX_NAME_LENGTH = 100


def _unique_names(names: Iterable[str]) -> tuple[str, ...]:
    out: list[str] = []
    for n in names:
        n = (n or "").strip()
        if n and n not in out:
            out.append(n)
    return tuple(out)


@dataclass(frozen=True)
class Expense:
    date: date
    description: str
    amount: int
    payer: str
    applied_to: tuple[str, ...]
    memo: str = ""
    id: Optional[int] = None

    def __post_init__(self) -> None:
        description = (self.description or "").strip()
        if not description:
            raise InvalidExpense("Description must not be empty.")
        payer = (self.payer or "").strip()
        if not payer:
            raise InvalidExpense("Payer must be set.")
        applied_to = _unique_names(self.applied_to)
        too_long = [n for n in (payer, *applied_to) if len(n) > MAX_NAME_LENGTH]
        if too_long:
            raise InvalidExpense(f"Names are limited to {MAX_NAME_LENGTH} characters.")
        # Validates amount and member count.
        split_amount(self.amount, len(applied_to))

        object.__setattr__(self, "description", description)
        object.__setattr__(self, "payer", payer)
        object.__setattr__(self, "applied_to", applied_to)
        object.__setattr__(self, "memo", (self.memo or "").strip())

    @property
    def split_amount(self) -> float:
        return split_amount(self.amount, len(self.applied_to))


@dataclass(frozen=True)
class SettlementReport:
    per_member: Mapping[str, MemberBalance]
    total_expenses: int
    total_splits: float
    consistent: bool
    transfers: list[Transfer]


def compute_settlement(
    members: Iterable[str],
    expenses: Iterable[Expense],
    *,
    tolerance: float = DEFAULT_TOLERANCE,
) -> SettlementReport:
    sheet = compute_balances(members, expenses)
    return SettlementReport(
        per_member=sheet.per_member,
        total_expenses=sheet.total_expenses,
        total_splits=sheet.total_splits,
        consistent=is_consistent(sheet.total_expenses, sheet.total_splits, tolerance),
        transfers=resolve_transfers(sheet.net()),
    )


@dataclass
class Meeting:
    """
    A meeting snapshot: members by name plus the expenses to settle.

    Expenses are validated against the current members before they enter.
    Removing a member later does not touch existing expenses; their shares
    are skipped during settlement.
    """

    name: str
    start_date: date
    end_date: date
    members: list[str] = field(default_factory=list)
    expenses: list[Expense] = field(default_factory=list)
    id: Optional[int] = None

    def __post_init__(self) -> None:
        self.members = list(self._checked_members(self.members))
        self.expenses = list(self.expenses)

    @staticmethod
    def _checked_members(names: Iterable[str]) -> tuple[str, ...]:
        out: list[str] = []
        for raw in names:
            name = (raw or "").strip()
            if not name:
                raise InvalidMeeting("Member name must not be empty.")
            if len(name) > MAX_NAME_LENGTH:
                raise InvalidMeeting(f"Member names are limited to {MAX_NAME_LENGTH} characters.")
            if name in out:
                raise InvalidMeeting(f"Member {name!r} is listed twice.")
            out.append(name)
        return tuple(out)

    def set_members(self, names: Iterable[str]) -> None:
        members = self._checked_members(names)
        removed = set(self.members) - set(members)
        self.members = list(members)
        if removed:
            dangling = [
                e.id for e in self.expenses if e.payer in removed or removed.intersection(e.applied_to)
            ]
            if dangling:
                logger.warning(
                    "Meeting %s: removed members %s are still referenced by expenses %s",
                    self.id,
                    sorted(removed),
                    dangling,
                )

    def add_member(self, name: str) -> None:
        self.set_members([*self.members, name])

    def validate_expense(self, expense: Expense) -> None:
        if expense.payer not in self.members:
            raise InvalidExpense(f"Payer {expense.payer!r} is not a member of this meeting.")
        unknown = [n for n in expense.applied_to if n not in self.members]
        if unknown:
            raise InvalidExpense(f"Not members of this meeting: {', '.join(unknown)}.")

    def _index_of(self, expense_id: int) -> int:
        for i, e in enumerate(self.expenses):
            if e.id == expense_id:
                return i
        raise KeyError(expense_id)

    def add_expense(self, expense: Expense) -> Expense:
        self.validate_expense(expense)
        if expense.id is None:
            next_id = max((e.id or 0 for e in self.expenses), default=0) + 1
            expense = replace(expense, id=next_id)
        self.expenses.append(expense)
        return expense

    def update_expense(self, expense_id: int, expense: Expense) -> Expense:
        i = self._index_of(expense_id)
        self.validate_expense(expense)
        expense = replace(expense, id=expense_id)
        self.expenses[i] = expense
        return expense

    def remove_expense(self, expense_id: int) -> Expense:
        return self.expenses.pop(self._index_of(expense_id))

    def compute_settlement(self, *, tolerance: float = DEFAULT_TOLERANCE) -> SettlementReport:
        return compute_settlement(self.members, self.expenses, tolerance=tolerance)
