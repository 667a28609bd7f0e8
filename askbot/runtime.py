from __future__ import annotations

from typing import Optional

from askbot.config import settings
from askbot.options import PromptOptions
from askbot.registry import PromptRegistry

# Shared instances -----------------------------------------------------------

# Will be created on startup in askbot.entry, once settings are validated
registry: Optional[PromptRegistry] = None


def build_registry() -> PromptRegistry:
    return PromptRegistry(
        defaults=PromptOptions(timeout=settings.prompt_timeout),
        timeout_strategy=settings.PROMPT_TIMEOUT_STRATEGY,
        fallback_key=settings.prompt_fallback_key,
    )
