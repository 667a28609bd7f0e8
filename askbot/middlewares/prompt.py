from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject, Update

from ..events import event_kind

if TYPE_CHECKING:
    from ..registry import PromptRegistry

logger = logging.getLogger(__name__)


class PromptMiddleware(BaseMiddleware):
    """Outer update middleware: answers pending prompts, injects prompt helpers.

    Updates that answer (or expire) a pending prompt stop here; everything
    else reaches the routers with ``prompt``, ``wait`` and
    ``wait_with_action`` in the handler data.
    """

    def __init__(self, registry: "PromptRegistry"):
        self.registry = registry

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        if not isinstance(event, Update) or event_kind(event) is None:
            return await handler(event, data)

        bot = data["bot"]
        result = await self.registry.feed(event, bot)
        if result.consumed:
            logger.debug("Update %s consumed by prompt (%s)", event.update_id, result.value)
            return None

        ctx = self.registry.bind(event.event, bot)
        data["prompt"] = ctx.prompt
        data["wait"] = ctx.wait
        data["wait_with_action"] = ctx.wait_with_action
        return await handler(event, data)
