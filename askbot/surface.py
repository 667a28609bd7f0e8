"""
askbot/surface.py
-----------------
The functions handlers call. A PromptContext is bound to one incoming
update (its conversation key, its chat and the bot) and exposes:

• prompt(text, ...)                    – send ``text``, wait for the answer
• wait(event=None, ...)                – wait without sending anything
• wait_with_action(event, action, ...) – run ``action``, then wait;
                                         returns (answer, action result)

Each call replaces any prompt still pending for the same conversation.
"""
from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, Tuple, Union

from aiogram import Bot

from .events import EventFilter, normalize_events
from .identity import Key
from .pending import Content, Transformer, ValidateErrorHandler, Validator
from .sending import answer

if TYPE_CHECKING:
    from .registry import PromptRegistry


class PromptContext:
    def __init__(self, registry: "PromptRegistry", key: Key, event: Any, bot: Bot):
        self.registry = registry
        self.key = key
        self.event = event
        self.bot = bot

    async def prompt(
        self,
        text: Content,
        *,
        event: Optional[EventFilter] = None,
        validate: Optional[Validator] = None,
        transform: Optional[Transformer] = None,
        on_validate_error: Optional[Union[str, ValidateErrorHandler]] = None,
        timeout: Optional[float] = None,
        **send_params: Any,
    ) -> Any:
        """Send ``text`` and return the user's next accepted update.

        Extra keyword arguments are passed to ``Bot.send_message`` and are
        reused when the question is asked again after a rejected answer.
        """
        events = normalize_events(event)
        options = self.registry.options(
            validate=validate,
            transform=transform,
            on_validate_error=on_validate_error,
            timeout=timeout,
            send_params=send_params,
        )
        await answer(self.bot, self.event, text, **options.send_params)
        future = self.registry.register(self.key, options, events=events, text=text)
        return await future

    async def wait(
        self,
        event: Optional[EventFilter] = None,
        *,
        validate: Optional[Validator] = None,
        transform: Optional[Transformer] = None,
        on_validate_error: Optional[Union[str, ValidateErrorHandler]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Return the next accepted update from this conversation."""
        events = normalize_events(event)
        options = self.registry.options(
            validate=validate,
            transform=transform,
            on_validate_error=on_validate_error,
            timeout=timeout,
        )
        future = self.registry.register(self.key, options, events=events)
        return await future

    async def wait_with_action(
        self,
        event: Optional[EventFilter],
        action: Callable[[], Union[Any, Awaitable[Any]]],
        *,
        validate: Optional[Validator] = None,
        transform: Optional[Transformer] = None,
        on_validate_error: Optional[Union[str, ValidateErrorHandler]] = None,
        timeout: Optional[float] = None,
    ) -> Tuple[Any, Any]:
        """Run ``action`` first, then wait; returns ``(answer, action_result)``."""
        events = normalize_events(event)
        options = self.registry.options(
            validate=validate,
            transform=transform,
            on_validate_error=on_validate_error,
            timeout=timeout,
        )
        action_return = action()
        if inspect.isawaitable(action_return):
            action_return = await action_return
        future = self.registry.register(
            self.key, options, events=events, action_return=action_return
        )
        return await future
