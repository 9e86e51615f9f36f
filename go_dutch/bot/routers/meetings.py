from __future__ import annotations

from aiogram import Bot, F, Router
from aiogram.filters import Command, CommandObject
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message
from sqlalchemy.ext.asyncio import AsyncSession

from go_dutch.bot.callbacks import ConfirmCb, PageCb, PickMeetingCb
from go_dutch.bot.keyboards import confirm_keyboard, meetings_keyboard
from go_dutch.bot.parsing import parse_meeting_args
from go_dutch.bot.render import render_meeting_header
from go_dutch.bot.text import esc
from go_dutch.bot.utils import answer_error, get_active_meeting_id, safe_delete_message, set_active_meeting_id
from go_dutch.db.models import User
from go_dutch.services.meetings import create_meeting, delete_meeting, list_meetings, load_meeting, update_meeting

router = Router(name=__name__)

NO_ACTIVE = "Pick a meeting first: /meetings or /meeting_new."


@router.message(Command("meeting_new"))
async def meeting_new_cmd(
    message: Message,
    command: CommandObject,
    bot: Bot,
    session: AsyncSession,
    user_db: User,
    state: FSMContext,
    reply_ttl: float,
) -> None:
    try:
        args = parse_meeting_args(command.args)
        m = await create_meeting(
            session,
            user_id=user_db.id,
            name=args.name,
            start_date=args.start_date,
            end_date=args.end_date,
            members=args.members,
        )
    except ValueError as e:
        await answer_error(message, bot, str(e), delay_seconds=reply_ttl)
        return
    await set_active_meeting_id(state, m.id)
    snapshot = await load_meeting(session, user_id=user_db.id, meeting_id=m.id)
    await message.answer("Created and selected:\n" + render_meeting_header(snapshot))


@router.message(Command("meetings"))
async def meetings_cmd(message: Message, session: AsyncSession, user_db: User) -> None:
    meetings = await list_meetings(session, user_id=user_db.id)
    if not meetings:
        await message.answer("No meetings yet. Create one with /meeting_new.")
        return
    await message.answer(
        "<b>Meetings</b>\nPick the one to work on:",
        reply_markup=meetings_keyboard(initiator_user_id=message.from_user.id, meetings=meetings, page=0),
    )


@router.callback_query(PageCb.filter())
async def meetings_page_cb(callback: CallbackQuery, callback_data: PageCb, session: AsyncSession, user_db: User) -> None:
    if callback.from_user.id != callback_data.initiator:
        await callback.answer("This button is not for you.", show_alert=True)
        return
    meetings = await list_meetings(session, user_id=user_db.id)
    await callback.message.edit_reply_markup(
        reply_markup=meetings_keyboard(
            initiator_user_id=callback.from_user.id,
            meetings=meetings,
            page=callback_data.page,
        )
    )
    await callback.answer()


@router.callback_query(PickMeetingCb.filter())
async def pick_meeting_cb(
    callback: CallbackQuery,
    callback_data: PickMeetingCb,
    session: AsyncSession,
    user_db: User,
    state: FSMContext,
) -> None:
    if callback.from_user.id != callback_data.initiator:
        await callback.answer("This button is not for you.", show_alert=True)
        return
    snapshot = await load_meeting(session, user_id=user_db.id, meeting_id=callback_data.meeting_id)
    if snapshot is None:
        await callback.answer("That meeting is gone.", show_alert=True)
        return
    await set_active_meeting_id(state, snapshot.id)
    await callback.message.edit_text(
        "Selected:\n" + render_meeting_header(snapshot) + "\n\n/expenses · /expense · /settle"
    )
    await callback.answer()


@router.message(Command("meeting_edit"))
async def meeting_edit_cmd(
    message: Message,
    command: CommandObject,
    bot: Bot,
    session: AsyncSession,
    user_db: User,
    state: FSMContext,
    reply_ttl: float,
) -> None:
    meeting_id = await get_active_meeting_id(state)
    if meeting_id is None:
        await answer_error(message, bot, NO_ACTIVE, delay_seconds=reply_ttl)
        return
    try:
        args = parse_meeting_args(command.args)
        m = await update_meeting(
            session,
            user_id=user_db.id,
            meeting_id=meeting_id,
            name=args.name,
            start_date=args.start_date,
            end_date=args.end_date,
            members=args.members,
        )
    except ValueError as e:
        await answer_error(message, bot, str(e), delay_seconds=reply_ttl)
        return
    if m is None:
        await set_active_meeting_id(state, None)
        await answer_error(message, bot, NO_ACTIVE, delay_seconds=reply_ttl)
        return
    snapshot = await load_meeting(session, user_id=user_db.id, meeting_id=meeting_id)
    await message.answer("Updated:\n" + render_meeting_header(snapshot))


@router.message(Command("meeting_del"))
async def meeting_del_cmd(
    message: Message,
    bot: Bot,
    session: AsyncSession,
    user_db: User,
    state: FSMContext,
    reply_ttl: float,
) -> None:
    meeting_id = await get_active_meeting_id(state)
    snapshot = await load_meeting(session, user_id=user_db.id, meeting_id=meeting_id) if meeting_id else None
    if snapshot is None:
        await answer_error(message, bot, NO_ACTIVE, delay_seconds=reply_ttl)
        return
    await message.answer(
        f"Delete <b>{esc(snapshot.name)}</b> with its {len(snapshot.expenses)} expenses?",
        reply_markup=confirm_keyboard(
            initiator_user_id=message.from_user.id,
            action="meeting_del",
            target_id=snapshot.id,
        ),
    )


@router.callback_query(ConfirmCb.filter(F.action == "meeting_del"))
async def meeting_del_confirm_cb(
    callback: CallbackQuery,
    callback_data: ConfirmCb,
    bot: Bot,
    session: AsyncSession,
    user_db: User,
    state: FSMContext,
) -> None:
    if callback.from_user.id != callback_data.initiator:
        await callback.answer("This button is not for you.", show_alert=True)
        return
    if callback.message:
        await safe_delete_message(bot, chat_id=callback.message.chat.id, message_id=callback.message.message_id)
    if not callback_data.ok:
        await callback.answer("Cancelled.")
        return
    deleted = await delete_meeting(session, user_id=user_db.id, meeting_id=callback_data.target_id)
    if await get_active_meeting_id(state) == callback_data.target_id:
        await set_active_meeting_id(state, None)
    await callback.answer("Deleted." if deleted else "Already gone.")
