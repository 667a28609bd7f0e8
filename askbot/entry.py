"""
askbot/entry.py
---------------
Bootstrap script for the example bot: wires the prompt registry and the
routers, then starts polling.
Keep this file tiny: all prompt logic lives in the registry.
"""
from __future__ import annotations

import asyncio

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode

from askbot import runtime as r
from askbot.config import settings
from askbot.logger import configure_logging, logger
from askbot.middlewares import ErrorLogger
from askbot.registry import PromptRegistry
from askbot.routers.profile import router as profile_router


def build_dispatcher(registry: PromptRegistry) -> Dispatcher:
    dp = Dispatcher()
    # ErrorLogger must wrap the prompt middleware to see cancelled prompts
    dp.update.outer_middleware(ErrorLogger())
    registry.setup(dp)
    dp.include_router(profile_router)
    return dp


async def main() -> None:
    configure_logging()
    settings.validate()

    bot = Bot(
        settings.BOT_TOKEN,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )
    r.registry = r.build_registry()
    dp = build_dispatcher(r.registry)

    logger.info("Starting polling (timeout strategy: %s)", r.registry.timeout_strategy.value)
    try:
        await dp.start_polling(bot)
    finally:
        await bot.session.close()
        logger.info("Bot stopped")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
