from __future__ import annotations

import asyncio
import logging

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramUnauthorizedError
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.types import BotCommand

from go_dutch.bot.middlewares import DbSessionMiddleware, UpsertUserMiddleware
from go_dutch.bot.routers import all_routers
from go_dutch.config import settings
from go_dutch.db.session import SessionMaker
from go_dutch.logging import configure_logging

logger = logging.getLogger(__name__)

COMMANDS = [
    BotCommand(command="meetings", description="Pick the active meeting"),
    BotCommand(command="meeting_new", description="Create a meeting"),
    BotCommand(command="expense", description="Add an expense"),
    BotCommand(command="expenses", description="List expenses"),
    BotCommand(command="settle", description="Who pays whom"),
    BotCommand(command="members", description="Your saved members"),
    BotCommand(command="help", description="All commands"),
]


async def main() -> None:
    configure_logging(settings.log_level)

    bot = Bot(
        token=settings.bot_token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )
    try:
        try:
            me = await bot.get_me()
        except TelegramUnauthorizedError as e:
            logger.error("Telegram Unauthorized. Check BOT_TOKEN in .env (BotFather token). %s", e)
            raise

        dp = Dispatcher(storage=MemoryStorage())

        dp.update.middleware(DbSessionMiddleware(SessionMaker))
        dp.message.middleware(UpsertUserMiddleware(settings.admin_tg_ids))
        dp.callback_query.middleware(UpsertUserMiddleware(settings.admin_tg_ids))

        dp.workflow_data.update(
            {
                "reply_ttl": settings.reply_ttl_seconds,
                "tolerance": settings.consistency_tolerance,
            }
        )

        for r in all_routers():
            dp.include_router(r)

        await bot.set_my_commands(COMMANDS)

        logger.info("Starting bot as @%s", me.username)
        await dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())
    finally:
        await bot.session.close()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
