"""
askbot/registry.py
------------------
PromptRegistry owns the pending-prompt store and runs every supported
incoming update through matching → validation → resolution.

One registry per bot:

    registry = PromptRegistry(timeout_strategy="on-timer")
    registry.setup(dp)

Handlers then receive ``prompt``, ``wait`` and ``wait_with_action`` as
keyword arguments (see askbot.surface).
"""
from __future__ import annotations

import asyncio
import logging
from functools import partial
from typing import Any, MutableMapping, Optional, Union

from aiogram import Bot, Dispatcher
from aiogram.types import Update

from .errors import CancelReason, PromptCancelError
from .events import event_kind
from .identity import Key, resolve_key
from .matching import MatchResult, match
from .options import PromptOptions, merge_options
from .pending import NO_ACTION, Content, PendingPrompt
from .resolution import deliverable, finish
from .sending import answer
from .store import PromptStore
from .surface import PromptContext
from .timeouts import TimeoutStrategy, TimeoutSupervisor
from .validation import retry, run_validator

log = logging.getLogger(__name__)


class PromptRegistry:
    def __init__(
        self,
        store: Optional[Union[PromptStore, MutableMapping[Key, PendingPrompt]]] = None,
        defaults: Optional[PromptOptions] = None,
        timeout_strategy: Union[TimeoutStrategy, str] = TimeoutStrategy.ON_ANSWER,
        fallback_key: Key = 0,
        reject_superseded: bool = True,
    ):
        self.store = store if isinstance(store, PromptStore) else PromptStore(store)
        self.defaults = defaults or PromptOptions()
        self.timeouts = TimeoutSupervisor(self.store, timeout_strategy)
        self.fallback_key = fallback_key
        self.reject_superseded = reject_superseded

    @property
    def timeout_strategy(self) -> TimeoutStrategy:
        return self.timeouts.strategy

    # ------------------------------------------------------------------ #
    # wiring                                                             #
    # ------------------------------------------------------------------ #

    def setup(self, dispatcher: Dispatcher) -> None:
        """Intercept every update of ``dispatcher`` before its routers see it."""
        from .middlewares.prompt import PromptMiddleware

        dispatcher.update.outer_middleware(PromptMiddleware(self))

    def key_for(self, event: Any) -> Key:
        return resolve_key(event, self.fallback_key)

    def bind(self, event: Any, bot: Bot) -> PromptContext:
        return PromptContext(self, self.key_for(event), event, bot)

    # ------------------------------------------------------------------ #
    # registration                                                       #
    # ------------------------------------------------------------------ #

    def options(self, **overrides: Any) -> PromptOptions:
        return merge_options(self.defaults, PromptOptions(**overrides))

    def register(
        self,
        key: Key,
        options: PromptOptions,
        *,
        events=None,
        text: Optional[Content] = None,
        action_return: Any = NO_ACTION,
    ) -> asyncio.Future:
        """Store a new pending prompt for ``key`` and return its future."""
        loop = asyncio.get_running_loop()
        prompt = PendingPrompt(
            future=loop.create_future(),
            events=events,
            validate=options.validate,
            on_validate_error=options.on_validate_error,
            transform=options.transform,
            text=text,
            send_params=options.send_params,
            action_return=action_return,
        )

        previous = self.store.set(key, prompt)
        if previous is not None:
            self._supersede(key, previous)

        self.timeouts.arm(key, prompt, options.timeout)
        prompt.future.add_done_callback(partial(self._forget, key, prompt))
        log.debug("Prompt registered for %s (events=%s, timeout=%s)", key, events, options.timeout)
        return prompt.future

    def _supersede(self, key: Key, previous: PendingPrompt) -> None:
        TimeoutSupervisor.disarm(previous)
        if self.reject_superseded and previous.fail(PromptCancelError("cancel")):
            log.info("Prompt for %s replaced by a newer one; previous caller cancelled", key)
        else:
            log.debug("Prompt for %s replaced by a newer one", key)

    def _forget(self, key: Key, prompt: PendingPrompt, future: asyncio.Future) -> None:
        # the waiting task was cancelled: drop its entry so it can't swallow updates
        if future.cancelled() and self.store.is_current(key, prompt):
            TimeoutSupervisor.disarm(prompt)
            self.store.delete(key)
            log.debug("Prompt for %s dropped: waiter cancelled", key)

    def expire(self, key: Key, reason: CancelReason = "timeout") -> bool:
        return self.timeouts.expire(key, reason)

    # ------------------------------------------------------------------ #
    # dispatch                                                           #
    # ------------------------------------------------------------------ #

    async def feed(self, update: Update, bot: Bot) -> MatchResult:
        """Offer ``update`` to the pending prompt of its conversation.

        The result's ``consumed`` flag tells the caller whether normal
        handler processing must be skipped.
        """
        kind = event_kind(update)
        if kind is None:
            return MatchResult.NO_PROMPT

        event = update.event
        key = self.key_for(event)
        send = partial(answer, bot, event)
        loop = asyncio.get_running_loop()

        while True:
            prompt = self.store.get(key)
            result = match(prompt, kind, loop.time(), self.timeout_strategy)
            if not result.consumed:
                return result

            async with prompt.lock:
                # another update may have settled or replaced it meanwhile
                if not self.store.is_current(key, prompt):
                    continue
                if prompt.future.done():
                    TimeoutSupervisor.disarm(prompt)
                    self.store.delete(key)
                    continue

                result = match(prompt, kind, loop.time(), self.timeout_strategy)
                if result is MatchResult.EXPIRED:
                    self.timeouts.expire(key, "timeout", prompt)
                    return result

                if not await run_validator(prompt, event):
                    log.debug("Answer from %s rejected by validator", key)
                    await retry(prompt, event, send)
                    return MatchResult.REJECTED

                # accepted: the deadline no longer applies while the transform runs
                TimeoutSupervisor.disarm(prompt)
                try:
                    value = await deliverable(prompt, event)
                except Exception:
                    log.exception("Prompt transform raised; treating the answer as invalid")
                    self.timeouts.rearm(key, prompt)
                    await retry(prompt, event, send)
                    return MatchResult.REJECTED

                if not self.store.is_current(key, prompt):
                    continue

                self.store.delete(key)
                finish(prompt, value)
                log.debug("Prompt for %s resolved by %s", key, kind)
                return MatchResult.RESOLVED
