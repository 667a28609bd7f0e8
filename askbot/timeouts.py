"""
askbot/timeouts.py
------------------
Per-prompt expiry. Two strategies, chosen once per registry:

• on-answer – only a deadline is stored; expiry is noticed when the next
  update for that conversation arrives (see askbot.matching)
• on-timer  – a loop timer fires at the deadline and cancels the prompt
  without waiting for any update
"""
from __future__ import annotations

import asyncio
import logging
import math
from enum import Enum
from typing import Optional

from .errors import CancelReason, PromptCancelError
from .identity import Key
from .pending import PendingPrompt
from .store import PromptStore

log = logging.getLogger(__name__)


class TimeoutStrategy(str, Enum):
    ON_ANSWER = "on-answer"
    ON_TIMER = "on-timer"


class TimeoutSupervisor:
    def __init__(self, store: PromptStore, strategy: TimeoutStrategy | str = TimeoutStrategy.ON_ANSWER):
        self.store = store
        self.strategy = TimeoutStrategy(strategy)

    def arm(self, key: Key, prompt: PendingPrompt, timeout: Optional[float]) -> None:
        if timeout is None or math.isinf(timeout):
            return
        loop = asyncio.get_running_loop()
        prompt.expires_at = loop.time() + timeout
        if self.strategy is TimeoutStrategy.ON_TIMER:
            prompt.timer = loop.call_later(timeout, self.expire, key, "timeout", prompt)

    def rearm(self, key: Key, prompt: PendingPrompt) -> None:
        """Restart the timer of a disarmed prompt for whatever time it has left."""
        if self.strategy is not TimeoutStrategy.ON_TIMER or prompt.expires_at is None:
            return
        loop = asyncio.get_running_loop()
        remaining = max(prompt.expires_at - loop.time(), 0)
        prompt.timer = loop.call_later(remaining, self.expire, key, "timeout", prompt)

    @staticmethod
    def disarm(prompt: PendingPrompt) -> None:
        if prompt.timer is not None:
            prompt.timer.cancel()
            prompt.timer = None

    def expire(
        self,
        key: Key,
        reason: CancelReason = "timeout",
        prompt: Optional[PendingPrompt] = None,
    ) -> bool:
        """Reject the pending prompt for ``key`` with PromptCancelError.

        When ``prompt`` is given, only that exact entry is expired. Returns
        False (and logs) if there is nothing left to expire.
        """
        current = self.store.get(key)
        if current is None or (prompt is not None and current is not prompt):
            log.warning("Expiry (%s) fired for %s but its prompt is no longer pending", reason, key)
            return False

        self.disarm(current)
        self.store.delete(key)
        current.fail(PromptCancelError(reason))
        log.info("Prompt for %s cancelled: %s", key, reason)
        return True
