from __future__ import annotations

from collections.abc import Collection
from typing import Any, Awaitable, Callable

from aiogram import BaseMiddleware
from aiogram.types import CallbackQuery, Message, TelegramObject
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from go_dutch.services.users import ensure_user


class DbSessionMiddleware(BaseMiddleware):
    def __init__(self, sessionmaker: async_sessionmaker[AsyncSession]) -> None:
        super().__init__()
        self._sessionmaker = sessionmaker

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        async with self._sessionmaker() as session:
            try:
                data["session"] = session
                result = await handler(event, data)
                await session.commit()
                return result
            except Exception:
                await session.rollback()
                raise


class UpsertUserMiddleware(BaseMiddleware):
    """Maps the Telegram sender to a ledger owner (`user_db`)."""

    def __init__(self, admin_tg_ids: Collection[int] = ()) -> None:
        super().__init__()
        self._admin_tg_ids = frozenset(admin_tg_ids)

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        session: AsyncSession = data["session"]

        tg_user = None
        if isinstance(event, (Message, CallbackQuery)):
            tg_user = event.from_user

        # Channels and other bots own nothing.
        if tg_user is None or tg_user.is_bot:
            return None

        data["user_db"] = await ensure_user(session, tg_user=tg_user, admin_tg_ids=self._admin_tg_ids)
        return await handler(event, data)
