"""Turns an accepted answer into the value the waiting caller receives."""
from __future__ import annotations

import inspect
from typing import Any

from .pending import PendingPrompt
from .timeouts import TimeoutSupervisor


async def deliverable(prompt: PendingPrompt, event: Any) -> Any:
    """Apply the prompt's transform and pair the result with the action return."""
    value = event
    if prompt.transform is not None:
        value = prompt.transform(event)
        if inspect.isawaitable(value):
            value = await value
    if prompt.has_action:
        return value, prompt.action_return
    return value


def finish(prompt: PendingPrompt, value: Any) -> bool:
    TimeoutSupervisor.disarm(prompt)
    return prompt.settle(value)
