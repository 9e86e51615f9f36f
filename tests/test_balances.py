from datetime import date

import pytest

from go_dutch.core.balances import compute_balances
from go_dutch.core.meeting import Expense


def _expense(amount, payer, applied_to):
    return Expense(
        date=date(2026, 5, 1),
        description="Dinner",
        amount=amount,
        payer=payer,
        applied_to=tuple(applied_to),
    )


def test_paid_owed_and_balance_per_member():
    sheet = compute_balances(
        ["A", "B", "C"],
        [
            _expense(3000, "A", ["A", "B", "C"]),
            _expense(600, "B", ["B", "C"]),
        ],
    )

    a, b, c = sheet.per_member["A"], sheet.per_member["B"], sheet.per_member["C"]
    assert (a.paid, a.owed, a.balance) == (3000, 1000, 2000)
    assert (b.paid, b.owed, b.balance) == (600, 1300, -700)
    assert (c.paid, c.owed, c.balance) == (0, 1300, -1300)
    assert sheet.total_expenses == 3600
    assert sheet.total_splits == pytest.approx(3600)


def test_member_order_is_kept():
    sheet = compute_balances(["Cid", "Ann", "Bob"], [])
    assert list(sheet.per_member) == ["Cid", "Ann", "Bob"]
    assert sheet.net() == {"Cid": 0, "Ann": 0, "Bob": 0}


def test_balances_sum_to_zero():
    sheet = compute_balances(
        ["A", "B", "C", "D"],
        [
            _expense(1000, "A", ["A", "B", "C"]),
            _expense(777, "D", ["A", "B", "C", "D"]),
            _expense(5, "C", ["B", "D"]),
        ],
    )
    assert sum(sheet.net().values()) == pytest.approx(0, abs=1e-9)


def test_unknown_payer_is_skipped():
    sheet = compute_balances(["A", "B"], [_expense(1000, "Ghost", ["A", "B"])])

    assert sheet.per_member["A"].paid == 0
    assert sheet.per_member["A"].owed == 500
    assert sheet.total_expenses == 1000
    assert "Ghost" not in sheet.per_member


def test_unknown_applied_member_is_skipped_and_not_counted_as_split():
    sheet = compute_balances(["A", "B"], [_expense(900, "A", ["A", "B", "Gone"])])

    assert sheet.per_member["A"].owed == 300
    assert sheet.per_member["B"].owed == 300
    assert sheet.total_expenses == 900
    assert sheet.total_splits == 600


def test_no_members_gives_empty_sheet():
    sheet = compute_balances([], [_expense(100, "A", ["A"])])
    assert dict(sheet.per_member) == {}
    assert sheet.total_expenses == 100
    assert sheet.total_splits == 0


def test_per_member_is_read_only():
    sheet = compute_balances(["A"], [])
    with pytest.raises(TypeError):
        sheet.per_member["B"] = sheet.per_member["A"]
