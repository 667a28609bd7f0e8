"""The unit of suspended state: one outstanding prompt per conversation."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, FrozenSet, Optional, Union

from aiogram.utils.formatting import Text

Validator = Callable[[Any], Union[bool, Awaitable[bool]]]
Transformer = Callable[[Any], Any]
ValidateErrorHandler = Callable[..., Any]
Content = Union[str, Text]


class _NoAction:
    def __repr__(self) -> str:
        return "NO_ACTION"


# Marks prompts not created by wait_with_action; None is a legal action result.
NO_ACTION: Any = _NoAction()


@dataclass(eq=False)
class PendingPrompt:
    future: asyncio.Future
    events: Optional[FrozenSet[str]] = None
    validate: Optional[Validator] = None
    on_validate_error: Optional[Union[str, ValidateErrorHandler]] = None
    transform: Optional[Transformer] = None
    text: Optional[Content] = None
    send_params: Dict[str, Any] = field(default_factory=dict)
    action_return: Any = NO_ACTION
    expires_at: Optional[float] = None
    timer: Optional[asyncio.TimerHandle] = None
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    @property
    def has_action(self) -> bool:
        return self.action_return is not NO_ACTION

    def accepts(self, kind: str) -> bool:
        return self.events is None or kind in self.events

    def settle(self, value: Any) -> bool:
        """Deliver ``value`` to the waiting caller. Returns False if already settled."""
        if self.future.done():
            return False
        self.future.set_result(value)
        return True

    def fail(self, exc: BaseException) -> bool:
        if self.future.done():
            return False
        self.future.set_exception(exc)
        return True
