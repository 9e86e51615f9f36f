from datetime import date

import pytest

from go_dutch.bot.parsing import (
    parse_amount,
    parse_date,
    parse_expense_args,
    parse_expense_id,
    parse_meeting_args,
    split_args,
)
from go_dutch.bot.render import MAX_MESSAGE, fit_lines, render_expenses, render_roster, render_settlement
from go_dutch.bot.text import format_amount
from go_dutch.core.meeting import Expense, Meeting, SettlementReport


def _meeting():
    m = Meeting(name="Jeju <trip>", start_date=date(2026, 5, 1), end_date=date(2026, 5, 3), members=["A", "B", "C"])
    m.add_expense(
        Expense(
            date=date(2026, 5, 1),
            description="Dinner",
            amount=1000,
            payer="A",
            applied_to=("A", "B", "C"),
            memo="card",
        )
    )
    return m


def test_parse_meeting_args():
    args = parse_meeting_args("Jeju | 2026-05-01 | 2026-05-03 | Ann, Bob ,, Cid")
    assert args.name == "Jeju"
    assert args.start_date == date(2026, 5, 1)
    assert args.end_date == date(2026, 5, 3)
    assert args.members == ["Ann", "Bob", "Cid"]

    with pytest.raises(ValueError):
        parse_meeting_args("Jeju | 2026-05-01")
    with pytest.raises(ValueError, match="YYYY-MM-DD"):
        parse_meeting_args("Jeju | 05/01 | 2026-05-03 | Ann")


def test_parse_expense_args():
    args = parse_expense_args(split_args("2026-05-01 | Dinner | 30,000원 | Ann | * | paid by card"))
    assert args.amount == 30000
    assert args.applied_to is None
    assert args.memo == "paid by card"

    args = parse_expense_args(split_args("2026-05-01|Taxi|1200|Bob|Ann, Bob"))
    assert args.applied_to == ["Ann", "Bob"]
    assert args.memo == ""

    with pytest.raises(ValueError):
        parse_expense_args(split_args("2026-05-01 | Taxi"))


def test_parse_scalars():
    assert split_args(None) == []
    assert split_args("  ") == []
    assert parse_amount("1,234,567") == 1234567
    with pytest.raises(ValueError):
        parse_amount("abc")
    with pytest.raises(ValueError, match="positive"):
        parse_amount("-500")
    with pytest.raises(ValueError, match="positive"):
        parse_amount(" -1,000")
    assert parse_date(" 2026-01-31 ") == date(2026, 1, 31)
    assert parse_expense_id("#12") == 12
    with pytest.raises(ValueError):
        parse_expense_id("twelve")


def test_format_amount():
    assert format_amount(1000) == "1,000"
    assert format_amount(1000 / 3) == "333.33"
    assert format_amount(2000 / 3, signed=True) == "+666.67"
    assert format_amount(-1000.0, signed=True) == "-1,000"
    assert format_amount(-1e-12) == "0"


def test_render_expenses_escapes_and_lists():
    text = render_expenses(_meeting())
    assert "Jeju &lt;trip&gt;" in text
    assert "#1 2026-05-01 Dinner: 1,000" in text
    assert "333.33 each" in text
    assert "<i>card</i>" in text


def test_render_settlement():
    m = _meeting()
    text = render_settlement(m, m.compute_settlement())

    assert "+666.67 (receives)" in text
    assert "-333.33 (pays)" in text
    assert "B → A: 333" in text
    assert "C → A: 333" in text
    assert "✓ match" in text
    assert "<b>Shares:</b> 1,000" in text


def test_fit_lines_keeps_whole_lines():
    assert fit_lines(["aa", "bb"], 10) == ["aa", "bb"]
    assert fit_lines(["aaaa"] * 5, 16) == ["aaaa", "… 4 more"]
    assert fit_lines(["a", "b", "c"], 3, sep=", ") == ["… 3 more"]


def test_render_settlement_fits_large_meeting():
    names = [f"Member{i:02d}" for i in range(80)]
    m = Meeting(name="Camp", start_date=date(2026, 5, 1), end_date=date(2026, 5, 3), members=names)
    m.add_expense(
        Expense(date=date(2026, 5, 1), description="Lodge", amount=800_000, payer=names[0], applied_to=tuple(names))
    )
    report = m.compute_settlement()
    assert len(report.transfers) == 79

    text = render_settlement(m, report)
    assert len(text) <= MAX_MESSAGE
    assert text.count("<pre>") == text.count("</pre>") == 2
    assert "more" in text
    assert "Member01 → Member00: 10,000" in text
    assert "<b>Expenses:</b> 800,000" in text
    assert "<b>Check:</b> ✓ match" in text


def test_render_expenses_fits_many_entries():
    m = Meeting(name="Long trip", start_date=date(2026, 5, 1), end_date=date(2026, 5, 3), members=["A", "B", "C"])
    for i in range(60):
        m.add_expense(
            Expense(
                date=date(2026, 5, 1),
                description=f"Snack {i}",
                amount=1000,
                payer="A",
                applied_to=("A", "B", "C"),
                memo="bought at the corner store near the station",
            )
        )

    text = render_expenses(m)
    assert len(text) <= MAX_MESSAGE
    assert text.count("<i>") == text.count("</i>")
    assert "#1 2026-05-01 Snack 0: 1,000" in text
    assert "#60 " not in text
    assert "more" in text
    assert text.endswith("<b>Total:</b> 60,000")


def test_render_roster_fits_many_names():
    text = render_roster([f"Person {i}" for i in range(1000)])
    assert len(text) <= MAX_MESSAGE
    assert text.startswith("<b>Members</b>\nPerson 0\n")
    assert text.splitlines()[-1].startswith("… ")


def test_shares_total_rounds_half_up():
    m = Meeting(name="Odd", start_date=date(2026, 5, 1), end_date=date(2026, 5, 1))
    report = SettlementReport(per_member={}, total_expenses=3, total_splits=2.5, consistent=True, transfers=[])

    text = render_settlement(m, report)
    assert "<b>Shares:</b> 3" in text
    assert "No members." in text
    assert "Nothing to settle." in text
