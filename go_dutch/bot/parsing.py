from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import Optional

ALL_MEMBERS = "*"


@dataclass(frozen=True)
class MeetingArgs:
    name: str
    start_date: date
    end_date: date
    members: list[str]


@dataclass(frozen=True)
class ExpenseArgs:
    spent_on: date
    description: str
    amount: int
    payer: str
    applied_to: Optional[list[str]]  # None means every member of the meeting
    memo: str


def split_args(text: Optional[str]) -> list[str]:
    if not text or not text.strip():
        return []
    return [p.strip() for p in text.split("|")]


def parse_date(s: str) -> date:
    try:
        return date.fromisoformat(s.strip())
    except ValueError:
        raise ValueError(f"Bad date {s!r}. Use YYYY-MM-DD.") from None


def parse_amount(s: str) -> int:
    # Thousands separators and currency signs are ignored: "30,000원" -> 30000.
    if (s or "").strip().startswith("-"):
        raise ValueError("Amount must be positive.")
    digits = re.sub(r"[^\d]", "", s or "")
    if not digits:
        raise ValueError("Enter the amount as a whole number.")
    return int(digits)


def parse_names(s: str) -> list[str]:
    return [n.strip() for n in (s or "").split(",") if n.strip()]


def parse_meeting_args(text: Optional[str]) -> MeetingArgs:
    parts = split_args(text)
    if len(parts) != 4:
        raise ValueError("Usage: Name | start date | end date | member, member, ...")
    name, start, end, members = parts
    return MeetingArgs(
        name=name,
        start_date=parse_date(start),
        end_date=parse_date(end),
        members=parse_names(members),
    )


def parse_expense_args(parts: list[str]) -> ExpenseArgs:
    if len(parts) not in (5, 6):
        raise ValueError("Usage: date | description | amount | payer | members or * | memo (optional)")
    spent_on, description, amount, payer, applied = parts[:5]
    memo = parts[5] if len(parts) == 6 else ""
    return ExpenseArgs(
        spent_on=parse_date(spent_on),
        description=description,
        amount=parse_amount(amount),
        payer=payer,
        applied_to=None if applied == ALL_MEMBERS else parse_names(applied),
        memo=memo,
    )


def parse_expense_id(s: str) -> int:
    s = (s or "").strip().lstrip("#")
    if not s.isdigit():
        raise ValueError("Give the expense number, as shown in /expenses.")
    return int(s)
