from __future__ import annotations

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from go_dutch.bot.callbacks import CloseCb, ConfirmCb, PageCb, PickMeetingCb
from go_dutch.bot.text import format_date
from go_dutch.db.models import Meeting


def close_keyboard(*, initiator_user_id: int, text: str = "Close") -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    kb.row(
        InlineKeyboardButton(text=text, callback_data=CloseCb(initiator=initiator_user_id).pack()),
        width=1,
    )
    return kb.as_markup()


def meetings_keyboard(
    *,
    initiator_user_id: int,
    meetings: list[Meeting],
    page: int,
    per_page: int = 8,
) -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    start = page * per_page
    chunk = meetings[start : start + per_page]
    for m in chunk:
        kb.row(
            InlineKeyboardButton(
                text=f"{m.name} ({format_date(m.start_date)})",
                callback_data=PickMeetingCb(initiator=initiator_user_id, meeting_id=m.id).pack(),
            )
        )

    nav: list[InlineKeyboardButton] = []
    if page > 0:
        nav.append(
            InlineKeyboardButton(
                text="⬅️",
                callback_data=PageCb(initiator=initiator_user_id, page=page - 1).pack(),
            )
        )
    if start + per_page < len(meetings):
        nav.append(
            InlineKeyboardButton(
                text="➡️",
                callback_data=PageCb(initiator=initiator_user_id, page=page + 1).pack(),
            )
        )
    if nav:
        kb.row(*nav, width=len(nav))
    kb.row(
        InlineKeyboardButton(text="Close", callback_data=CloseCb(initiator=initiator_user_id).pack()),
        width=1,
    )
    return kb.as_markup()


def confirm_keyboard(*, initiator_user_id: int, action: str, target_id: int) -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    kb.row(
        InlineKeyboardButton(
            text="Cancel",
            callback_data=ConfirmCb(initiator=initiator_user_id, action=action, target_id=target_id, ok=False).pack(),
        ),
        InlineKeyboardButton(
            text="Delete",
            callback_data=ConfirmCb(initiator=initiator_user_id, action=action, target_id=target_id, ok=True).pack(),
        ),
        width=2,
    )
    return kb.as_markup()
