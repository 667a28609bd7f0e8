"""Exceptions delivered to callers waiting on a prompt."""
from __future__ import annotations

from typing import Literal

CancelReason = Literal["timeout", "cancel"]


class PromptError(Exception):
    """Base class for prompt registry errors."""


class PromptCancelError(PromptError):
    """The pending prompt was settled without an answer.

    ``reason`` is ``"timeout"`` when the prompt expired and ``"cancel"``
    when it was replaced by a newer prompt for the same conversation.
    """

    def __init__(self, reason: CancelReason = "cancel"):
        super().__init__(reason)
        self.reason = reason
