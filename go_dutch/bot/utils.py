from __future__ import annotations

import asyncio
from typing import Optional

from aiogram import Bot
from aiogram.exceptions import TelegramBadRequest, TelegramForbiddenError
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

ACTIVE_MEETING_KEY = "meeting_id"


async def safe_delete_message(bot: Bot, *, chat_id: int, message_id: int) -> bool:
    try:
        await bot.delete_message(chat_id=chat_id, message_id=message_id)
        return True
    except (TelegramBadRequest, TelegramForbiddenError):
        return False


def delete_later(bot: Bot, *, chat_id: int, message_id: int, delay_seconds: float) -> None:
    async def _job() -> None:
        await asyncio.sleep(delay_seconds)
        await safe_delete_message(bot, chat_id=chat_id, message_id=message_id)

    asyncio.create_task(_job())


async def answer_error(message: Message, bot: Bot, text: str, *, delay_seconds: float) -> None:
    msg = await message.answer(f"⚠️ {text}")
    delete_later(bot, chat_id=msg.chat.id, message_id=msg.message_id, delay_seconds=delay_seconds)


async def get_active_meeting_id(state: FSMContext) -> Optional[int]:
    data = await state.get_data()
    mid = data.get(ACTIVE_MEETING_KEY)
    return int(mid) if mid else None


async def set_active_meeting_id(state: FSMContext, meeting_id: Optional[int]) -> None:
    await state.update_data({ACTIVE_MEETING_KEY: meeting_id})
