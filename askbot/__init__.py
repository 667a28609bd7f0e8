"""Conversational prompt / wait helpers for aiogram bots."""

from .errors import PromptCancelError, PromptError
from .events import EVENTS
from .matching import MatchResult
from .middlewares.prompt import PromptMiddleware
from .options import NO_TIMEOUT, PromptOptions
from .registry import PromptRegistry
from .store import PromptStore
from .surface import PromptContext
from .timeouts import TimeoutStrategy

__all__ = [
    "EVENTS",
    "MatchResult",
    "NO_TIMEOUT",
    "PromptCancelError",
    "PromptContext",
    "PromptError",
    "PromptMiddleware",
    "PromptOptions",
    "PromptRegistry",
    "PromptStore",
    "TimeoutStrategy",
]
