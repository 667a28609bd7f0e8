"""Update kinds the prompt registry intercepts."""
from __future__ import annotations

from typing import FrozenSet, Iterable, Optional, Union

from aiogram.types import Update
from aiogram.types.update import UpdateTypeLookupError

EVENTS = (
    "message",
    "edited_message",
    "channel_post",
    "edited_channel_post",
    "callback_query",
)

EventFilter = Union[str, Iterable[str]]


def event_kind(update: Update) -> Optional[str]:
    """Return the update kind when it is one the registry handles."""
    try:
        kind = update.event_type
    except UpdateTypeLookupError:
        return None
    return kind if kind in EVENTS else None


def normalize_events(event: Optional[EventFilter]) -> Optional[FrozenSet[str]]:
    """Turn ``"message"`` or ``["message", "callback_query"]`` into a frozenset.

    ``None`` means "accept every supported kind".
    """
    if event is None:
        return None
    kinds = frozenset([event] if isinstance(event, str) else event)
    if not kinds:
        raise ValueError("Event filter must name at least one update kind")
    unknown = kinds.difference(EVENTS)
    if unknown:
        raise ValueError(f"Unsupported update kinds: {sorted(unknown)}")
    return kinds
