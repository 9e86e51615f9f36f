from __future__ import annotations

from typing import Optional

from aiogram import Bot, F, Router
from aiogram.filters import Command, CommandObject
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message
from sqlalchemy.ext.asyncio import AsyncSession

from go_dutch.bot.callbacks import ConfirmCb
from go_dutch.bot.keyboards import close_keyboard, confirm_keyboard
from go_dutch.bot.parsing import ExpenseArgs, parse_expense_args, parse_expense_id, split_args
from go_dutch.bot.render import render_expenses
from go_dutch.bot.text import esc, format_amount
from go_dutch.bot.utils import answer_error, get_active_meeting_id, safe_delete_message
from go_dutch.core.meeting import Meeting
from go_dutch.db.models import User
from go_dutch.services.expenses import create_expense, delete_expense, update_expense
from go_dutch.services.meetings import load_meeting

router = Router(name=__name__)

NO_ACTIVE = "Pick a meeting first: /meetings or /meeting_new."


def _applied_to(args: ExpenseArgs, meeting: Meeting) -> list[str]:
    return list(meeting.members) if args.applied_to is None else args.applied_to


async def _active_meeting(state: FSMContext, session: AsyncSession, user_db: User) -> Optional[Meeting]:
    meeting_id = await get_active_meeting_id(state)
    if meeting_id is None:
        return None
    return await load_meeting(session, user_id=user_db.id, meeting_id=meeting_id)


@router.message(Command("expense"))
async def expense_cmd(
    message: Message,
    command: CommandObject,
    bot: Bot,
    session: AsyncSession,
    user_db: User,
    state: FSMContext,
    reply_ttl: float,
) -> None:
    meeting = await _active_meeting(state, session, user_db)
    if meeting is None:
        await answer_error(message, bot, NO_ACTIVE, delay_seconds=reply_ttl)
        return
    try:
        args = parse_expense_args(split_args(command.args))
        e = await create_expense(
            session,
            user_id=user_db.id,
            meeting_id=meeting.id,
            spent_on=args.spent_on,
            description=args.description,
            amount=args.amount,
            payer=args.payer,
            applied_to=_applied_to(args, meeting),
            memo=args.memo,
        )
    except ValueError as err:
        await answer_error(message, bot, str(err), delay_seconds=reply_ttl)
        return
    await message.answer(
        f"Saved #{e.id} {esc(e.description)}: {format_amount(e.amount)}, "
        f"{format_amount(e.split_amount)} each for {len(e.applied_to)}."
    )


@router.message(Command("expenses"))
async def expenses_cmd(
    message: Message,
    bot: Bot,
    session: AsyncSession,
    user_db: User,
    state: FSMContext,
    reply_ttl: float,
) -> None:
    meeting = await _active_meeting(state, session, user_db)
    if meeting is None:
        await answer_error(message, bot, NO_ACTIVE, delay_seconds=reply_ttl)
        return
    await message.answer(
        render_expenses(meeting),
        reply_markup=close_keyboard(initiator_user_id=message.from_user.id),
    )


@router.message(Command("expense_edit"))
async def expense_edit_cmd(
    message: Message,
    command: CommandObject,
    bot: Bot,
    session: AsyncSession,
    user_db: User,
    state: FSMContext,
    reply_ttl: float,
) -> None:
    meeting = await _active_meeting(state, session, user_db)
    if meeting is None:
        await answer_error(message, bot, NO_ACTIVE, delay_seconds=reply_ttl)
        return
    try:
        parts = split_args(command.args)
        if not parts:
            raise ValueError("Usage: number | date | description | amount | payer | members or * | memo")
        expense_id = parse_expense_id(parts[0])
        args = parse_expense_args(parts[1:])
        e = await update_expense(
            session,
            user_id=user_db.id,
            meeting_id=meeting.id,
            expense_id=expense_id,
            spent_on=args.spent_on,
            description=args.description,
            amount=args.amount,
            payer=args.payer,
            applied_to=_applied_to(args, meeting),
            memo=args.memo,
        )
    except ValueError as err:
        await answer_error(message, bot, str(err), delay_seconds=reply_ttl)
        return
    if e is None:
        await answer_error(message, bot, "No such expense in this meeting.", delay_seconds=reply_ttl)
        return
    await message.answer(f"Updated #{e.id} {esc(e.description)}: {format_amount(e.amount)}.")


@router.message(Command("expense_del"))
async def expense_del_cmd(
    message: Message,
    command: CommandObject,
    bot: Bot,
    session: AsyncSession,
    user_db: User,
    state: FSMContext,
    reply_ttl: float,
) -> None:
    meeting = await _active_meeting(state, session, user_db)
    if meeting is None:
        await answer_error(message, bot, NO_ACTIVE, delay_seconds=reply_ttl)
        return
    try:
        expense_id = parse_expense_id(command.args or "")
    except ValueError as err:
        await answer_error(message, bot, str(err), delay_seconds=reply_ttl)
        return
    expense = next((e for e in meeting.expenses if e.id == expense_id), None)
    if expense is None:
        await answer_error(message, bot, "No such expense in this meeting.", delay_seconds=reply_ttl)
        return
    await message.answer(
        f"Delete #{expense.id} {esc(expense.description)} ({format_amount(expense.amount)})?",
        reply_markup=confirm_keyboard(
            initiator_user_id=message.from_user.id,
            action="expense_del",
            target_id=expense.id,
        ),
    )


@router.callback_query(ConfirmCb.filter(F.action == "expense_del"))
async def expense_del_confirm_cb(
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
    meeting_id = await get_active_meeting_id(state)
    deleted = meeting_id is not None and await delete_expense(
        session,
        user_id=user_db.id,
        meeting_id=meeting_id,
        expense_id=callback_data.target_id,
    )
    await callback.answer("Deleted." if deleted else "Already gone.")
