from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from go_dutch.core.meeting import Expense


@dataclass(frozen=True)
class MemberBalance:
    name: str
    paid: int
    owed: float
    balance: float  # positive is owed money by the group, negative owes the group


@dataclass(frozen=True)
class BalanceSheet:
    per_member: Mapping[str, MemberBalance]
    total_expenses: int
    total_splits: float

    def net(self) -> dict[str, float]:
        return {name: b.balance for name, b in self.per_member.items()}


def compute_balances(members: Iterable[str], expenses: Iterable[Expense]) -> BalanceSheet:
    # name -> [paid, owed]; insertion order follows the member list.
    acc: dict[str, list] = {name: [0, 0.0] for name in members}

    total_expenses = 0
    total_splits = 0.0
    for e in expenses:
        total_expenses += e.amount
        if e.payer in acc:
            acc[e.payer][0] += e.amount
        share = e.split_amount
        for name in e.applied_to:
            # Names no longer in the meeting are skipped and do not count as split.
            if name in acc:
                acc[name][1] += share
                total_splits += share

    per_member = {
        name: MemberBalance(name=name, paid=paid, owed=owed, balance=paid - owed)
        for name, (paid, owed) in acc.items()
    }
    return BalanceSheet(
        per_member=MappingProxyType(per_member),
        total_expenses=total_expenses,
        total_splits=total_splits,
    )
