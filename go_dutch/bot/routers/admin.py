from __future__ import annotations

from aiogram import Bot, Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from go_dutch.bot.render import render_users
from go_dutch.bot.text import esc, user_label
from go_dutch.bot.utils import answer_error
from go_dutch.db.models import User, UserRole
from go_dutch.services.users import delete_user, list_users, set_role

router = Router(name=__name__)


def _is_admin(user_db: User) -> bool:
    return user_db.role == UserRole.ADMIN


def _parse_user_id(raw: str) -> int:
    raw = raw.strip().lstrip("#")
    if not raw.isdigit():
        raise ValueError("User id must be a number, see /users.")
    return int(raw)


@router.message(Command("users"))
async def users_cmd(message: Message, bot: Bot, session: AsyncSession, user_db: User, reply_ttl: float) -> None:
    if not _is_admin(user_db):
        await answer_error(message, bot, "This command is for admins only.", delay_seconds=reply_ttl)
        return
    await message.answer(render_users(await list_users(session)))


@router.message(Command("user_del"))
async def user_del_cmd(
    message: Message,
    command: CommandObject,
    bot: Bot,
    session: AsyncSession,
    user_db: User,
    reply_ttl: float,
) -> None:
    if not _is_admin(user_db):
        await answer_error(message, bot, "This command is for admins only.", delay_seconds=reply_ttl)
        return
    try:
        user_id = _parse_user_id(command.args or "")
        deleted = await delete_user(session, actor_id=user_db.id, user_id=user_id)
    except ValueError as e:
        await answer_error(message, bot, str(e), delay_seconds=reply_ttl)
        return
    if not deleted:
        await answer_error(message, bot, f"User #{user_id} not found.", delay_seconds=reply_ttl)
        return
    await message.answer(f"User #{user_id} deleted along with their roster and meetings.")


@router.message(Command("user_role"))
async def user_role_cmd(
    message: Message,
    command: CommandObject,
    bot: Bot,
    session: AsyncSession,
    user_db: User,
    reply_ttl: float,
) -> None:
    if not _is_admin(user_db):
        await answer_error(message, bot, "This command is for admins only.", delay_seconds=reply_ttl)
        return
    raw_id, _, role = (command.args or "").partition("|")
    try:
        user = await set_role(session, user_id=_parse_user_id(raw_id), role=role)
    except ValueError as e:
        await answer_error(message, bot, str(e), delay_seconds=reply_ttl)
        return
    if user is None:
        await answer_error(message, bot, f"User #{raw_id.strip()} not found.", delay_seconds=reply_ttl)
        return
    await message.answer(f"{esc(user_label(user))} is now <b>{user.role.value}</b>.")
