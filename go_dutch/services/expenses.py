from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace
from datetime import date
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from go_dutch.core import meeting as core
from go_dutch.db.models import Expense, ExpenseSplit
from go_dutch.services.meetings import load_meeting


async def create_expense(
    session: AsyncSession,
    *,
    user_id: int,
    meeting_id: int,
    spent_on: date,
    description: str,
    amount: int,
    payer: str,
    applied_to: Iterable[str],
    memo: Optional[str] = None,
) -> Optional[core.Expense]:
    snapshot = await load_meeting(session, user_id=user_id, meeting_id=meeting_id)
    if snapshot is None:
        return None
    draft = core.Expense(
        date=spent_on,
        description=description,
        amount=amount,
        payer=payer,
        applied_to=tuple(applied_to),
        memo=memo or "",
    )
    snapshot.validate_expense(draft)

    row = Expense(
        meeting_id=meeting_id,
        spent_on=draft.date,
        description=draft.description,
        amount=draft.amount,
        payer=draft.payer,
        memo=draft.memo,
    )
    session.add(row)
    await session.flush()

    session.add_all([ExpenseSplit(expense_id=row.id, member_name=n) for n in draft.applied_to])
    await session.flush()
    return replace(draft, id=row.id)


async def update_expense(
    session: AsyncSession,
    *,
    user_id: int,
    meeting_id: int,
    expense_id: int,
    spent_on: date,
    description: str,
    amount: int,
    payer: str,
    applied_to: Iterable[str],
    memo: Optional[str] = None,
) -> Optional[core.Expense]:
    snapshot = await load_meeting(session, user_id=user_id, meeting_id=meeting_id)
    if snapshot is None:
        return None
    draft = core.Expense(
        date=spent_on,
        description=description,
        amount=amount,
        payer=payer,
        applied_to=tuple(applied_to),
        memo=memo or "",
    )
    try:
        updated = snapshot.update_expense(expense_id, draft)
    except KeyError:
        return None

    row = await session.scalar(select(Expense).where(Expense.id == expense_id, Expense.meeting_id == meeting_id))
    row.spent_on = updated.date
    row.description = updated.description
    row.amount = updated.amount
    row.payer = updated.payer
    row.memo = updated.memo

    await session.execute(delete(ExpenseSplit).where(ExpenseSplit.expense_id == expense_id))
    session.add_all([ExpenseSplit(expense_id=expense_id, member_name=n) for n in updated.applied_to])
    await session.flush()
    return updated


async def delete_expense(session: AsyncSession, *, user_id: int, meeting_id: int, expense_id: int) -> bool:
    snapshot = await load_meeting(session, user_id=user_id, meeting_id=meeting_id)
    if snapshot is None:
        return False
    try:
        snapshot.remove_expense(expense_id)
    except KeyError:
        return False
    await session.execute(delete(Expense).where(Expense.id == expense_id, Expense.meeting_id == meeting_id))
    return True


async def list_expenses(session: AsyncSession, *, user_id: int, meeting_id: int) -> list[core.Expense]:
    snapshot = await load_meeting(session, user_id=user_id, meeting_id=meeting_id)
    if snapshot is None:
        return []
    return list(snapshot.expenses)
