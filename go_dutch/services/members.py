from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from go_dutch.core.errors import DuplicateMember, InvalidMeeting
from go_dutch.core.meeting import MAX_NAME_LENGTH
from go_dutch.db.models import RosterMember


async def list_roster(session: AsyncSession, *, user_id: int) -> list[RosterMember]:
    res = await session.scalars(
        select(RosterMember).where(RosterMember.user_id == user_id).order_by(RosterMember.name.asc())
    )
    return list(res)


async def add_roster_member(session: AsyncSession, *, user_id: int, name: str) -> RosterMember:
    name = (name or "").strip()
    if not name:
        raise InvalidMeeting("Enter a name.")
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidMeeting(f"Names are limited to {MAX_NAME_LENGTH} characters.")
    existing = await session.scalar(
        select(RosterMember).where(RosterMember.user_id == user_id, RosterMember.name == name)
    )
    if existing is not None:
        raise DuplicateMember(f"{name} is already in your roster.")
    m = RosterMember(user_id=user_id, name=name)
    session.add(m)
    await session.flush()
    return m


async def delete_roster_member(session: AsyncSession, *, user_id: int, name: str) -> bool:
    # Meetings keep their own copy of the name.
    res = await session.execute(
        delete(RosterMember).where(RosterMember.user_id == user_id, RosterMember.name == name.strip())
    )
    return bool(res.rowcount)


async def ensure_roster_members(session: AsyncSession, *, user_id: int, names: Iterable[str]) -> None:
    names = list(names)
    if not names:
        return
    known = set(
        (
            await session.scalars(
                select(RosterMember.name).where(RosterMember.user_id == user_id, RosterMember.name.in_(names))
            )
        ).all()
    )
    missing = [n for n in dict.fromkeys(names) if n not in known]
    session.add_all([RosterMember(user_id=user_id, name=n) for n in missing])
    await session.flush()
