from __future__ import annotations

from aiogram import Bot, Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from go_dutch.bot.render import render_roster
from go_dutch.bot.text import esc
from go_dutch.bot.utils import answer_error
from go_dutch.db.models import User
from go_dutch.services.members import add_roster_member, delete_roster_member, list_roster

router = Router(name=__name__)


@router.message(Command("members"))
async def members_cmd(message: Message, session: AsyncSession, user_db: User) -> None:
    roster = await list_roster(session, user_id=user_db.id)
    if not roster:
        await message.answer("Your roster is empty. Add someone with /member_add Name.")
        return
    await message.answer(render_roster([m.name for m in roster]))


@router.message(Command("member_add"))
async def member_add_cmd(
    message: Message,
    command: CommandObject,
    bot: Bot,
    session: AsyncSession,
    user_db: User,
    reply_ttl: float,
) -> None:
    try:
        m = await add_roster_member(session, user_id=user_db.id, name=command.args or "")
    except ValueError as e:
        await answer_error(message, bot, str(e), delay_seconds=reply_ttl)
        return
    await message.answer(f"Added <b>{esc(m.name)}</b>.")


@router.message(Command("member_del"))
async def member_del_cmd(
    message: Message,
    command: CommandObject,
    bot: Bot,
    session: AsyncSession,
    user_db: User,
    reply_ttl: float,
) -> None:
    name = (command.args or "").strip()
    if not await delete_roster_member(session, user_id=user_db.id, name=name):
        await answer_error(message, bot, f"{name or 'That name'} is not in your roster.", delay_seconds=reply_ttl)
        return
    await message.answer(f"Removed <b>{esc(name)}</b> from the roster. Existing meetings keep the name.")
