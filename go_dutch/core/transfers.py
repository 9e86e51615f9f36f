from __future__ import annotations

import logging
import math
from collections import deque
from collections.abc import Mapping
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Transfer:
    from_name: str  # debtor
    to_name: str  # creditor
    amount: int


def round_half_up(value: float) -> int:
    # -2.5 -> -2 and 2.5 -> 3, unlike the builtin round().
    return int(math.floor(value + 0.5))


def resolve_transfers(balances: Mapping[str, float]) -> list[Transfer]:
    """
    Greedy largest-first settlement.

    Balances are rounded to whole units and split into creditors (> 0) and
    debtors (< 0). Both queues are sorted by magnitude, descending and stable,
    then the fronts are paired until one queue runs out. A partially used entry
    stays at the front; the queues are never re-sorted.
    """
    creditors: list[list] = []  # [name, to_receive]
    debtors: list[list] = []  # [name, to_pay]

    for name, balance in balances.items():
        rounded = round_half_up(balance)
        if rounded > 0:
            creditors.append([name, rounded])
        elif rounded < 0:
            debtors.append([name, -rounded])

    creditors.sort(key=lambda x: x[1], reverse=True)
    debtors.sort(key=lambda x: x[1], reverse=True)

    cq = deque(creditors)
    dq = deque(debtors)
    out: list[Transfer] = []
    while cq and dq:
        creditor = cq[0]
        debtor = dq[0]
        amt = min(creditor[1], debtor[1])
        if amt > 0:
            out.append(Transfer(from_name=debtor[0], to_name=creditor[0], amount=amt))
        creditor[1] -= amt
        debtor[1] -= amt
        if debtor[1] == 0:
            dq.popleft()
        if creditor[1] == 0:
            cq.popleft()

    residual = [(name, amt) for name, amt in (*cq, *dq)]
    if residual:
        logger.warning("Unmatched settlement residual dropped: %s", residual)
    return out
