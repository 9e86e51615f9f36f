from __future__ import annotations

import html
from datetime import date

from go_dutch.db.models import User

HELP_TEXT = (
    "<b>Go Dutch</b>: split shared expenses of a meeting.\n\n"
    "<b>Roster</b>\n"
    "/members - your saved members\n"
    "/member_add Name\n"
    "/member_del Name\n\n"
    "<b>Meetings</b>\n"
    "/meeting_new Name | 2026-05-01 | 2026-05-03 | Ann, Bob, Cid\n"
    "/meetings - pick the active meeting\n"
    "/meeting_edit Name | start | end | members\n"
    "/meeting_del\n\n"
    "<b>Expenses</b> (active meeting)\n"
    "/expense 2026-05-01 | Dinner | 30,000 | Ann | * | memo\n"
    "  <i>* splits between all members, or list names: Ann, Bob</i>\n"
    "/expenses\n"
    "/expense_edit 3 | date | description | amount | payer | members | memo\n"
    "/expense_del 3\n\n"
    "/settle - who pays whom\n\n"
    "<b>Admin</b>\n"
    "/users\n"
    "/user_del 7\n"
    "/user_role 7 | admin"
)


def esc(s: str) -> str:
    return html.escape(s, quote=False)


def user_label(u: User) -> str:
    if u.username:
        return f"@{u.username}"
    if u.first_name:
        return u.first_name
    return str(u.tg_user_id)


def format_amount(amount: float, *, signed: bool = False) -> str:
    # Whole units as "1,000"; fractional shares keep two decimals.
    value = round(float(amount), 2)
    if value == 0:
        return "0"
    text = f"{value:,.2f}"
    if text.endswith(".00"):
        text = text[:-3]
    if signed and value > 0:
        text = "+" + text
    return text


def format_date(d: date) -> str:
    return d.isoformat()
