from __future__ import annotations

from collections.abc import Collection
from datetime import datetime, timezone
from typing import Optional

from aiogram.types import User as TgUser
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from go_dutch.core.errors import InvalidUser
from go_dutch.db.models import User, UserRole


async def ensure_user(session: AsyncSession, *, tg_user: TgUser, admin_tg_ids: Collection[int] = ()) -> User:
    username = tg_user.username.lower() if tg_user.username else None
    first_name = tg_user.first_name if tg_user.first_name else None

    user = await get_user_by_tg_id(session, tg_user_id=tg_user.id)
    if user is None:
        user = User(tg_user_id=tg_user.id, username=username, first_name=first_name, role=UserRole.USER)
        session.add(user)
    else:
        user.username = username
        user.first_name = first_name
        user.last_login = datetime.now(timezone.utc)
    # Configured admins are promoted on sight; nobody is demoted here.
    if tg_user.id in admin_tg_ids:
        user.role = UserRole.ADMIN
    await session.flush()
    return user


async def get_user_by_tg_id(session: AsyncSession, *, tg_user_id: int) -> Optional[User]:
    return await session.scalar(select(User).where(User.tg_user_id == tg_user_id))


async def list_users(session: AsyncSession) -> list[User]:
    res = await session.scalars(select(User).order_by(User.created_at.desc(), User.id.desc()))
    return list(res)


async def delete_user(session: AsyncSession, *, actor_id: int, user_id: int) -> bool:
    if actor_id == user_id:
        raise InvalidUser("You cannot delete your own account.")
    # Roster, meetings and their expenses go with the user (ON DELETE CASCADE).
    res = await session.execute(delete(User).where(User.id == user_id))
    return bool(res.rowcount)


async def set_role(session: AsyncSession, *, user_id: int, role: str) -> Optional[User]:
    try:
        new_role = UserRole((role or "").strip().lower())
    except ValueError:
        raise InvalidUser("Role must be user or admin.") from None
    user = await session.scalar(select(User).where(User.id == user_id))
    if user is None:
        return None
    user.role = new_role
    await session.flush()
    return user
