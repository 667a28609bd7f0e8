"""
askbot/validation.py
--------------------
Validator call plus the retry decision for answers that fail it.

A failed answer never settles the prompt. Depending on the prompt the user
gets the custom error text, a custom handler runs, the original question
is asked again, or nothing happens and the user has to try again.
"""
from __future__ import annotations

import inspect
import logging
from typing import Any, Awaitable, Callable

from .pending import PendingPrompt

log = logging.getLogger(__name__)

Send = Callable[..., Awaitable[Any]]


async def run_validator(prompt: PendingPrompt, event: Any) -> bool:
    if prompt.validate is None:
        return True
    try:
        result = prompt.validate(event)
        if inspect.isawaitable(result):
            result = await result
    except Exception:
        # a crashing validator is treated as a rejected answer
        log.exception("Prompt validator raised; treating the answer as invalid")
        return False
    return bool(result)


async def retry(prompt: PendingPrompt, event: Any, send: Send) -> None:
    handler = prompt.on_validate_error

    if isinstance(handler, str):
        await send(handler, **prompt.send_params)
    elif handler is not None:
        args = (event, prompt.action_return) if prompt.has_action else (event,)
        result = handler(*args)
        if inspect.isawaitable(result):
            await result
    elif prompt.text is not None:
        await send(prompt.text, **prompt.send_params)
