from __future__ import annotations

from collections.abc import Sequence

from go_dutch.bot.text import esc, format_amount, format_date, user_label
from go_dutch.core.meeting import Meeting, SettlementReport
from go_dutch.core.transfers import round_half_up
from go_dutch.db.models import User

MAX_MESSAGE = 4096
# Room left for the member list in a meeting header.
HEADER_MEMBERS_BUDGET = 600


def more_marker(count: int) -> str:
    return f"… {count} more"


def fit_lines(lines: Sequence[str], budget: int, *, sep: str = "\n") -> list[str]:
    """
    Whole lines that fit into `budget` characters once joined with `sep`.

    Lines are never cut, so markup inside a line stays balanced. When some
    lines do not fit, a "… N more" marker takes their place.
    """
    if len(sep.join(lines)) <= budget:
        return list(lines)

    reserve = len(sep) + len(more_marker(len(lines)))
    out: list[str] = []
    used = 0
    for line in lines:
        extra = len(line) + (len(sep) if out else 0)
        if used + extra > budget - reserve:
            break
        out.append(line)
        used += extra
    out.append(more_marker(len(lines) - len(out)))
    return out


def render_meeting_header(meeting: Meeting) -> str:
    names = fit_lines([esc(n) for n in meeting.members], HEADER_MEMBERS_BUDGET, sep=", ")
    members = ", ".join(names) or "<i>no members</i>"
    return (
        f"<b>{esc(meeting.name)}</b>\n"
        f"{format_date(meeting.start_date)} ~ {format_date(meeting.end_date)}\n"
        f"Members: {members}"
    )


def render_expenses(meeting: Meeting) -> str:
    entries: list[str] = []
    for e in meeting.expenses:
        entry = (
            f"#{e.id} {format_date(e.date)} {esc(e.description)}: {format_amount(e.amount)}\n"
            f"    paid by {esc(e.payer)}, {format_amount(e.split_amount)} each for "
            f"{esc(', '.join(e.applied_to))}"
        )
        if e.memo:
            entry += f"\n    <i>{esc(e.memo)}</i>"
        entries.append(entry)
    if not entries:
        entries = ["No expenses yet."]

    total = sum(e.amount for e in meeting.expenses)
    head = f"{render_meeting_header(meeting)}\n\n"
    foot = f"\n\n<b>Total:</b> {format_amount(total)}"
    entries = fit_lines(entries, MAX_MESSAGE - len(head) - len(foot))
    return head + "\n".join(entries) + foot


def render_settlement(meeting: Meeting, report: SettlementReport) -> str:
    lines_bal: list[str] = []
    for b in report.per_member.values():
        if b.balance > 0:
            state = " (receives)"
        elif b.balance < 0:
            state = " (pays)"
        else:
            state = ""
        lines_bal.append(
            esc(
                f"{b.name:<10} paid {format_amount(b.paid):>10}  share {format_amount(b.owed):>10}  "
                f"{format_amount(b.balance, signed=True)}{state}"
            )
        )
    if not lines_bal:
        lines_bal = ["No members."]

    lines_settle = [esc(f"{t.from_name} → {t.to_name}: {format_amount(t.amount)}") for t in report.transfers]
    if not lines_settle:
        lines_settle = ["Nothing to settle."]

    status = "✓ match" if report.consistent else "✗ mismatch"
    head = f"{render_meeting_header(meeting)}\n\n<b>Balances:</b>\n<pre>"
    middle = "</pre>\n<b>Transfers:</b>\n<pre>"
    foot = (
        "</pre>\n"
        f"<b>Expenses:</b> {format_amount(report.total_expenses)}\n"
        f"<b>Shares:</b> {format_amount(round_half_up(report.total_splits))}\n"
        f"<b>Check:</b> {status}"
    )

    # Both blocks share what is left; transfers are kept to at most half of it.
    room = MAX_MESSAGE - len(head) - len(middle) - len(foot)
    settle_room = min(len("\n".join(lines_settle)), room // 2)
    lines_bal = fit_lines(lines_bal, room - settle_room)
    bal_text = "\n".join(lines_bal)
    lines_settle = fit_lines(lines_settle, room - len(bal_text))
    return head + bal_text + middle + "\n".join(lines_settle) + foot


def render_roster(names: Sequence[str]) -> str:
    title = "<b>Members</b>\n"
    return title + "\n".join(fit_lines([esc(n) for n in names], MAX_MESSAGE - len(title)))


def render_users(users: Sequence[User]) -> str:
    title = "<b>Users</b>\n"
    lines = [f"#{u.id} {esc(user_label(u))} ({u.role.value})" for u in users]
    if not lines:
        lines = ["No users."]
    return title + "\n".join(fit_lines(lines, MAX_MESSAGE - len(title)))
