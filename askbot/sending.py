"""Outgoing messages bound to the conversation an update came from."""
from __future__ import annotations

from typing import Any, Dict, Optional

from aiogram import Bot
from aiogram.types import CallbackQuery, Message
from aiogram.utils.formatting import Text

from .pending import Content


def chat_id_of(event: Message | CallbackQuery) -> Optional[int]:
    if isinstance(event, CallbackQuery):
        if event.message is not None:
            return event.message.chat.id
        return event.from_user.id
    chat = getattr(event, "chat", None)
    return chat.id if chat is not None else None


def message_kwargs(content: Content, params: Dict[str, Any]) -> Dict[str, Any]:
    """Build ``send_message`` keyword arguments for plain or formatted text."""
    if isinstance(content, Text):
        # entities carry the formatting; they win over params' parse_mode
        return {**params, **content.as_kwargs()}
    return {**params, "text": content}


async def answer(bot: Bot, event: Message | CallbackQuery, content: Content, **params: Any) -> Message:
    chat_id = chat_id_of(event)
    if chat_id is None:
        raise ValueError(f"Cannot reply to {type(event).__name__}: no chat to send to")
    return await bot.send_message(chat_id=chat_id, **message_kwargs(content, params))
