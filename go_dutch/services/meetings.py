from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from datetime import date
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from go_dutch.core import meeting as core
from go_dutch.core.errors import InvalidMeeting
from go_dutch.db.models import Expense, ExpenseSplit, Meeting, MeetingMember
from go_dutch.services.members import ensure_roster_members

MAX_MEETING_NAME_LENGTH = 255


def _check_header(name: str, start_date: date, end_date: date) -> str:
    name = (name or "").strip()
    if not name:
        raise InvalidMeeting("Meeting name must not be empty.")
    if len(name) > MAX_MEETING_NAME_LENGTH:
        raise InvalidMeeting(f"Meeting name is limited to {MAX_MEETING_NAME_LENGTH} characters.")
    if start_date > end_date:
        raise InvalidMeeting("Start date must not be after end date.")
    return name


async def create_meeting(
    session: AsyncSession,
    *,
    user_id: int,
    name: str,
    start_date: date,
    end_date: date,
    members: Iterable[str],
) -> Meeting:
    name = _check_header(name, start_date, end_date)
    snapshot = core.Meeting(name=name, start_date=start_date, end_date=end_date, members=list(members))

    m = Meeting(user_id=user_id, name=name, start_date=start_date, end_date=end_date)
    session.add(m)
    await session.flush()

    session.add_all([MeetingMember(meeting_id=m.id, member_name=n) for n in snapshot.members])
    await ensure_roster_members(session, user_id=user_id, names=snapshot.members)
    return m


async def get_meeting(session: AsyncSession, *, user_id: int, meeting_id: int) -> Optional[Meeting]:
    return await session.scalar(select(Meeting).where(Meeting.id == meeting_id, Meeting.user_id == user_id))


async def list_meetings(session: AsyncSession, *, user_id: int) -> list[Meeting]:
    res = await session.scalars(
        select(Meeting).where(Meeting.user_id == user_id).order_by(Meeting.created_at.desc(), Meeting.id.desc())
    )
    return list(res)


async def update_meeting(
    session: AsyncSession,
    *,
    user_id: int,
    meeting_id: int,
    name: str,
    start_date: date,
    end_date: date,
    members: Iterable[str],
) -> Optional[Meeting]:
    name = _check_header(name, start_date, end_date)
    snapshot = await load_meeting(session, user_id=user_id, meeting_id=meeting_id)
    if snapshot is None:
        return None
    # Expenses of removed members stay as they are.
    snapshot.set_members(members)

    m = await get_meeting(session, user_id=user_id, meeting_id=meeting_id)
    m.name = name
    m.start_date = start_date
    m.end_date = end_date

    await session.execute(delete(MeetingMember).where(MeetingMember.meeting_id == meeting_id))
    session.add_all([MeetingMember(meeting_id=meeting_id, member_name=n) for n in snapshot.members])
    await ensure_roster_members(session, user_id=user_id, names=snapshot.members)
    return m


async def delete_meeting(session: AsyncSession, *, user_id: int, meeting_id: int) -> bool:
    # Expenses and their splits go with it (ON DELETE CASCADE).
    res = await session.execute(delete(Meeting).where(Meeting.id == meeting_id, Meeting.user_id == user_id))
    return bool(res.rowcount)


async def load_meeting(session: AsyncSession, *, user_id: int, meeting_id: int) -> Optional[core.Meeting]:
    m = await get_meeting(session, user_id=user_id, meeting_id=meeting_id)
    if m is None:
        return None

    member_names = (
        await session.scalars(
            select(MeetingMember.member_name)
            .where(MeetingMember.meeting_id == meeting_id)
            .order_by(MeetingMember.id.asc())
        )
    ).all()

    expense_rows = (
        await session.scalars(
            select(Expense).where(Expense.meeting_id == meeting_id).order_by(Expense.spent_on.asc(), Expense.id.asc())
        )
    ).all()

    split_rows = (
        await session.execute(
            select(ExpenseSplit.expense_id, ExpenseSplit.member_name)
            .join(Expense, Expense.id == ExpenseSplit.expense_id)
            .where(Expense.meeting_id == meeting_id)
            .order_by(ExpenseSplit.id.asc())
        )
    ).all()

    splits_by_expense: dict[int, list[str]] = defaultdict(list)
    for expense_id, member_name in split_rows:
        splits_by_expense[int(expense_id)].append(member_name)

    expenses = [
        core.Expense(
            id=e.id,
            date=e.spent_on,
            description=e.description,
            amount=int(e.amount),
            payer=e.payer,
            applied_to=tuple(splits_by_expense.get(e.id, ())),
            memo=e.memo or "",
        )
        for e in expense_rows
    ]
    return core.Meeting(
        id=m.id,
        name=m.name,
        start_date=m.start_date,
        end_date=m.end_date,
        members=list(member_names),
        expenses=expenses,
    )
