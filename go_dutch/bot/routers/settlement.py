from __future__ import annotations

from aiogram import Bot, Router
from aiogram.filters import Command, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from go_dutch.bot.keyboards import close_keyboard
from go_dutch.bot.render import render_settlement
from go_dutch.bot.text import HELP_TEXT
from go_dutch.bot.utils import answer_error, get_active_meeting_id
from go_dutch.db.models import User
from go_dutch.services.ledger import compute_meeting_settlement

router = Router(name=__name__)


@router.message(CommandStart())
@router.message(Command("help"))
async def help_cmd(message: Message) -> None:
    await message.answer(HELP_TEXT)


@router.message(Command("settle"))
async def settle_cmd(
    message: Message,
    bot: Bot,
    session: AsyncSession,
    user_db: User,
    state: FSMContext,
    reply_ttl: float,
    tolerance: float,
) -> None:
    meeting_id = await get_active_meeting_id(state)
    result = None
    if meeting_id is not None:
        result = await compute_meeting_settlement(
            session,
            user_id=user_db.id,
            meeting_id=meeting_id,
            tolerance=tolerance,
        )
    if result is None:
        await answer_error(message, bot, "Pick a meeting first: /meetings or /meeting_new.", delay_seconds=reply_ttl)
        return

    await message.answer(
        render_settlement(result.meeting, result.report),
        reply_markup=close_keyboard(initiator_user_id=message.from_user.id),
    )
