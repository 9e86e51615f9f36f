from __future__ import annotations

from go_dutch.core.errors import InvalidExpense


def split_amount(amount: int, count: int) -> float:
    """
    Per-member share of one expense.

    Real division, no rounding: 1000 over 3 members is 333.333...
    Rounding happens only when transfers are resolved.
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise InvalidExpense("Amount must be a whole number.")
    if amount <= 0:
        raise InvalidExpense("Amount must be positive.")
    if count <= 0:
        raise InvalidExpense("Pick at least one member to split with.")
    return amount / count
