from __future__ import annotations

from aiogram import Router

from go_dutch.bot.routers.admin import router as admin_router
from go_dutch.bot.routers.common_callbacks import router as common_callbacks_router
from go_dutch.bot.routers.expenses import router as expenses_router
from go_dutch.bot.routers.meetings import router as meetings_router
from go_dutch.bot.routers.roster import router as roster_router
from go_dutch.bot.routers.settlement import router as settlement_router


def all_routers() -> list[Router]:
    return [
        common_callbacks_router,
        roster_router,
        meetings_router,
        expenses_router,
        settlement_router,
        admin_router,
    ]
