from __future__ import annotations

from aiogram.filters.callback_data import CallbackData


class CloseCb(CallbackData, prefix="close"):
    initiator: int


class PickMeetingCb(CallbackData, prefix="pickmt"):
    initiator: int
    meeting_id: int


class PageCb(CallbackData, prefix="page"):
    initiator: int
    page: int


class ConfirmCb(CallbackData, prefix="confirm"):
    initiator: int
    action: str  # meeting_del | expense_del
    target_id: int
    ok: bool
