from __future__ import annotations

from typing import Any

Key = int


def resolve_key(event: Any, fallback: Key = 0) -> Key:
    """Map a Message / CallbackQuery to the conversation key it belongs to.

    Falls back to ``sender_chat`` for channel posts and anonymous admins,
    then to ``fallback`` when the update carries no sender at all.
    """
    user = getattr(event, "from_user", None)
    if user is not None:
        return user.id
    sender_chat = getattr(event, "sender_chat", None)
    if sender_chat is not None:
        return sender_chat.id
    return fallback
