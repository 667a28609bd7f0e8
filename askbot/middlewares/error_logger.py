import logging

from aiogram import BaseMiddleware

from ..errors import PromptCancelError

logger = logging.getLogger(__name__)


class ErrorLogger(BaseMiddleware):
    async def __call__(self, handler, event, data):
        try:
            return await handler(event, data)
        except PromptCancelError as exc:
            logger.info("Prompt cancelled (%s) while handling update", exc.reason)
            raise
        except Exception as exc:      # noqa: BLE001
            logger.exception("Unhandled error: %s", exc)
            raise
