"""
askbot/matching.py
------------------
Decides what an incoming update means for the conversation's pending prompt.

Checks run in a fixed order so unrelated updates never count against a
prompt: no prompt → event filter → lazy expiry → candidate answer.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional

from .pending import PendingPrompt
from .timeouts import TimeoutStrategy


class MatchResult(str, Enum):
    NO_PROMPT = "no_prompt"        # nothing pending for this key
    NOT_MATCHED = "not_matched"    # kind filtered out; prompt untouched
    EXPIRED = "expired"            # deadline passed (on-answer strategy)
    CANDIDATE = "candidate"        # go on to validation
    REJECTED = "rejected"          # failed validation; prompt stays pending
    RESOLVED = "resolved"          # caller received the answer

    @property
    def consumed(self) -> bool:
        """False when the update must continue to the normal handlers."""
        return self not in (MatchResult.NO_PROMPT, MatchResult.NOT_MATCHED)


def match(
    prompt: Optional[PendingPrompt],
    kind: str,
    now: float,
    strategy: TimeoutStrategy,
) -> MatchResult:
    if prompt is None:
        return MatchResult.NO_PROMPT

    if not prompt.accepts(kind):
        return MatchResult.NOT_MATCHED

    if (
        strategy is TimeoutStrategy.ON_ANSWER
        and prompt.expires_at is not None
        and prompt.expires_at < now
    ):
        return MatchResult.EXPIRED

    return MatchResult.CANDIDATE
