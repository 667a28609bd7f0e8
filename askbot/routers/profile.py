"""
askbot/routers/profile.py
-------------------------
Small questionnaire showing the prompt helpers injected by PromptMiddleware:
• /profile – asks name (prompt), age (prompt + validate + transform),
  a free-form bio (wait) and a confirmation button (wait_with_action)
• /cancel  – answered normally when nothing is pending
• PromptCancelError – reported to the user when a question times out
"""
from __future__ import annotations

import logging

from aiogram import Bot, F, Router
from aiogram.filters import Command, ExceptionTypeFilter
from aiogram.types import CallbackQuery, ErrorEvent, Message
from aiogram.utils.formatting import Bold, Text

from askbot.errors import PromptCancelError
from askbot.keyboards import confirm_menu
from askbot.sending import answer

router = Router()
logger = logging.getLogger(__name__)

ASK_TIMEOUT = 120


def is_age(msg: Message) -> bool:
    return bool(msg.text) and msg.text.strip().isdigit() and 0 < int(msg.text) < 130


@router.message(Command("profile"))
async def cmd_profile(msg: Message, prompt, wait, wait_with_action):
    name = await prompt(
        Text("What's your ", Bold("name"), "?"),
        event="message",
        validate=lambda m: bool(m.text),
        transform=lambda m: m.text.strip(),
        timeout=ASK_TIMEOUT,
    )

    age = await prompt(
        Text("Nice to meet you, ", name, "! How old are you?"),
        event="message",
        validate=is_age,
        transform=lambda m: int(m.text),
        on_validate_error="❌ Please send your age as a number.",
        timeout=ASK_TIMEOUT,
    )

    await msg.answer("Tell me a bit about yourself (any text).")
    bio = await wait("message", validate=lambda m: bool(m.text), transform=lambda m: m.text)

    summary = Text(Bold(name), f", {age}\n", bio)
    call, sent = await wait_with_action(
        "callback_query",
        lambda: msg.answer(**summary.as_kwargs(), reply_markup=confirm_menu().as_markup()),
        validate=lambda c: c.data in ("profile:save", "profile:restart"),
        timeout=ASK_TIMEOUT,
    )
    await call.answer()
    await sent.edit_reply_markup(reply_markup=None)

    if call.data == "profile:restart":
        await msg.answer("Okay, send /profile to start again.")
        return

    logger.info("Profile saved for %s", msg.from_user.id)
    await msg.answer("✅ Profile saved!")


@router.message(Command("cancel"))
async def cmd_cancel(msg: Message):
    await msg.answer("Nothing to cancel.")


@router.callback_query(F.data.startswith("profile:"))
async def stale_button(call: CallbackQuery):
    await call.answer("This questionnaire is no longer active.")


@router.errors(ExceptionTypeFilter(PromptCancelError))
async def prompt_cancelled(event: ErrorEvent, bot: Bot):
    update = event.update
    if update.event_type not in ("message", "callback_query"):
        return
    reason = event.exception.reason
    text = "⌛ Time is up, send /profile to try again." if reason == "timeout" else "Previous question dropped."
    await answer(bot, update.event, text)
