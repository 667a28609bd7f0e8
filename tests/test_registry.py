"""Tests for PromptRegistry matching, validation and resolution."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from aiogram.types import CallbackQuery, Message

from askbot.errors import PromptCancelError
from askbot.matching import MatchResult
from askbot.options import PromptOptions
from askbot.registry import PromptRegistry
from tests.factories import (
    USER_ID,
    callback_update,
    cancel,
    edited_update,
    make_message,
    message_update,
    sent_texts,
    until_pending,
)


def context(registry: PromptRegistry, bot: AsyncMock, user_id: int = USER_ID):
    return registry.bind(make_message("/start", user_id), bot)


class TestWait:
    async def test_resolves_on_next_update_of_any_kind(self, registry, bot):
        task = asyncio.create_task(context(registry, bot).wait())
        await until_pending(registry)

        result = await registry.feed(callback_update("go"), bot)

        assert result is MatchResult.RESOLVED
        answer = await task
        assert isinstance(answer, CallbackQuery)
        assert answer.data == "go"
        assert USER_ID not in registry.store

    async def test_event_filter_passes_other_kinds_through(self, registry, bot):
        task = asyncio.create_task(context(registry, bot).wait("message"))
        await until_pending(registry)

        assert await registry.feed(callback_update(), bot) is MatchResult.NOT_MATCHED
        assert await registry.feed(edited_update(), bot) is MatchResult.NOT_MATCHED
        assert not task.done()
        assert USER_ID in registry.store

        assert await registry.feed(message_update("answer"), bot) is MatchResult.RESOLVED
        assert (await task).text == "answer"

    async def test_event_filter_accepts_several_kinds(self, registry, bot):
        task = asyncio.create_task(
            context(registry, bot).wait(["message", "edited_message"])
        )
        await until_pending(registry)

        assert await registry.feed(edited_update("fixed"), bot) is MatchResult.RESOLVED
        assert (await task).text == "fixed"

    async def test_unknown_event_kind_is_rejected(self, registry, bot):
        with pytest.raises(ValueError):
            await context(registry, bot).wait("inline_query")
        assert len(registry.store) == 0

    async def test_resolved_prompt_is_not_matched_again(self, registry, bot):
        task = asyncio.create_task(context(registry, bot).wait())
        await until_pending(registry)

        assert await registry.feed(message_update("one"), bot) is MatchResult.RESOLVED
        assert await registry.feed(message_update("two"), bot) is MatchResult.NO_PROMPT
        assert (await task).text == "one"

    async def test_other_users_are_not_affected(self, registry, bot):
        task = asyncio.create_task(context(registry, bot).wait())
        await until_pending(registry)

        assert await registry.feed(message_update("x", user_id=7), bot) is MatchResult.NO_PROMPT
        assert not task.done()

        await registry.feed(message_update("mine"), bot)
        assert (await task).text == "mine"

    async def test_transform_round_trip(self, registry, bot):
        task = asyncio.create_task(
            context(registry, bot).wait(transform=lambda m: m.text)
        )
        await until_pending(registry)

        await registry.feed(message_update("hello"), bot)
        assert await task == "hello"

    async def test_async_validator_and_transform(self, registry, bot):
        async def validate(msg: Message) -> bool:
            await asyncio.sleep(0)
            return msg.text.isdigit()

        async def transform(msg: Message) -> int:
            await asyncio.sleep(0)
            return int(msg.text)

        task = asyncio.create_task(
            context(registry, bot).wait("message", validate=validate, transform=transform)
        )
        await until_pending(registry)

        assert await registry.feed(message_update("abc"), bot) is MatchResult.REJECTED
        assert await registry.feed(message_update("12"), bot) is MatchResult.RESOLVED
        assert await task == 12


class TestPrompt:
    async def test_sends_text_and_resends_it_on_invalid_answer(self, registry, bot):
        task = asyncio.create_task(
            context(registry, bot).prompt(
                "Your age?", validate=lambda m: m.text.isdigit(), reply_markup=None
            )
        )
        await until_pending(registry)
        assert sent_texts(bot) == ["Your age?"]

        assert await registry.feed(message_update("old"), bot) is MatchResult.REJECTED
        assert await registry.feed(message_update("older"), bot) is MatchResult.REJECTED
        assert not task.done()
        assert sent_texts(bot) == ["Your age?", "Your age?", "Your age?"]
        assert bot.send_message.await_args.kwargs["reply_markup"] is None

        assert await registry.feed(message_update("30"), bot) is MatchResult.RESOLVED
        assert (await task).text == "30"
        assert len(sent_texts(bot)) == 3

    async def test_custom_error_text_replaces_original(self, registry, bot):
        task = asyncio.create_task(
            context(registry, bot).prompt(
                "Your age?",
                validate=lambda m: m.text.isdigit(),
                on_validate_error="retry",
            )
        )
        await until_pending(registry)

        await registry.feed(message_update("a"), bot)
        await registry.feed(message_update("b"), bot)
        assert sent_texts(bot) == ["Your age?", "retry", "retry"]

        await registry.feed(message_update("5"), bot)
        await task

    async def test_error_handler_is_called_with_answer(self, registry, bot):
        handler = AsyncMock()
        task = asyncio.create_task(
            context(registry, bot).prompt(
                "Pick", validate=lambda m: False, on_validate_error=handler
            )
        )
        await until_pending(registry)

        update = message_update("nope")
        assert await registry.feed(update, bot) is MatchResult.REJECTED
        handler.assert_awaited_once_with(update.message)
        assert sent_texts(bot) == ["Pick"]
        await cancel(task)

    async def test_replies_go_to_the_answering_chat(self, registry, bot):
        task = asyncio.create_task(
            context(registry, bot).prompt("Name?", validate=lambda m: False)
        )
        await until_pending(registry)

        await registry.feed(callback_update(), bot)
        assert bot.send_message.await_args.kwargs["chat_id"] == USER_ID
        await cancel(task)

    async def test_defaults_are_merged_with_call_options(self, bot):
        registry = PromptRegistry(
            defaults=PromptOptions(
                validate=lambda m: m.text == "ok",
                send_params={"parse_mode": "HTML", "disable_notification": True},
            )
        )
        task = asyncio.create_task(
            context(registry, bot).prompt("<b>Sure?</b>", disable_notification=False)
        )
        await until_pending(registry)

        kwargs = bot.send_message.await_args.kwargs
        assert kwargs["parse_mode"] == "HTML"
        assert kwargs["disable_notification"] is False

        assert await registry.feed(message_update("no"), bot) is MatchResult.REJECTED
        assert await registry.feed(message_update("ok"), bot) is MatchResult.RESOLVED
        await task


class TestWaitWithAction:
    async def test_action_runs_before_registration(self, registry, bot):
        seen = []

        def action():
            seen.append(USER_ID in registry.store)
            return "sent"

        task = asyncio.create_task(
            context(registry, bot).wait_with_action("callback_query", action)
        )
        await until_pending(registry)
        assert seen == [False]

        await registry.feed(callback_update("yes"), bot)
        answer, action_return = await task
        assert answer.data == "yes"
        assert action_return == "sent"

    async def test_async_action_and_transform(self, registry, bot):
        sent = object()

        async def action():
            return sent

        task = asyncio.create_task(
            context(registry, bot).wait_with_action(
                "callback_query", action, transform=lambda c: c.data
            )
        )
        await until_pending(registry)

        await registry.feed(callback_update("no"), bot)
        assert await task == ("no", sent)

    async def test_none_action_result_is_still_paired(self, registry, bot):
        task = asyncio.create_task(
            context(registry, bot).wait_with_action(None, lambda: None)
        )
        await until_pending(registry)

        await registry.feed(message_update("x"), bot)
        answer, action_return = await task
        assert answer.text == "x"
        assert action_return is None

    async def test_error_handler_receives_action_return(self, registry, bot):
        calls = []

        def handler(*args):
            calls.append(args)

        task = asyncio.create_task(
            context(registry, bot).wait_with_action(
                "message", lambda: "menu", validate=lambda m: False, on_validate_error=handler
            )
        )
        await until_pending(registry)

        update = message_update("bad")
        await registry.feed(update, bot)
        assert calls == [(update.message, "menu")]
        await cancel(task)


class TestValidationFailures:
    async def test_silent_retry_without_text(self, registry, bot):
        task = asyncio.create_task(
            context(registry, bot).wait(validate=lambda m: m.text == "yes")
        )
        await until_pending(registry)

        assert await registry.feed(message_update("no"), bot) is MatchResult.REJECTED
        bot.send_message.assert_not_awaited()
        assert not task.done()
        await cancel(task)

    async def test_raising_validator_counts_as_invalid(self, registry, bot):
        task = asyncio.create_task(
            context(registry, bot).wait(validate=lambda m: int(m.text) > 0)
        )
        await until_pending(registry)

        assert await registry.feed(message_update("abc"), bot) is MatchResult.REJECTED
        assert USER_ID in registry.store
        assert await registry.feed(message_update("3"), bot) is MatchResult.RESOLVED
        assert (await task).text == "3"

    async def test_raising_transform_keeps_prompt_pending(self, registry, bot):
        task = asyncio.create_task(
            context(registry, bot).prompt("Number?", transform=lambda m: int(m.text))
        )
        await until_pending(registry)

        assert await registry.feed(message_update("abc"), bot) is MatchResult.REJECTED
        assert sent_texts(bot) == ["Number?", "Number?"]
        assert await registry.feed(message_update("7"), bot) is MatchResult.RESOLVED
        assert await task == 7


class TestSupersede:
    async def test_new_prompt_cancels_previous_caller(self, registry, bot):
        first = asyncio.create_task(context(registry, bot).wait())
        await until_pending(registry)
        old = registry.store.get(USER_ID)

        second = asyncio.create_task(context(registry, bot).wait("message"))
        for _ in range(10):
            await asyncio.sleep(0)
        assert registry.store.get(USER_ID) is not old
        assert len(registry.store) == 1

        with pytest.raises(PromptCancelError) as exc:
            await first
        assert exc.value.reason == "cancel"

        await registry.feed(message_update("hi"), bot)
        assert (await second).text == "hi"

    async def test_silent_drop_when_configured(self, bot):
        registry = PromptRegistry(reject_superseded=False)
        first = asyncio.create_task(context(registry, bot).wait())
        await until_pending(registry)
        old = registry.store.get(USER_ID)

        second = asyncio.create_task(context(registry, bot).wait())
        for _ in range(10):
            await asyncio.sleep(0)
        assert registry.store.get(USER_ID) is not old

        await registry.feed(message_update(), bot)
        await second
        assert not first.done()
        await cancel(first)


class TestStoreOwnership:
    async def test_supplied_mapping_is_used_as_is(self, bot):
        shared = {}
        registry = PromptRegistry(store=shared)
        task = asyncio.create_task(context(registry, bot).wait())
        await until_pending(registry)

        assert USER_ID in shared
        await registry.feed(message_update(), bot)
        await task
        assert shared == {}

    async def test_cancelled_waiter_releases_its_entry(self, registry, bot):
        task = asyncio.create_task(context(registry, bot).wait())
        await until_pending(registry)

        await cancel(task)
        with pytest.raises(asyncio.CancelledError):
            await task
        await asyncio.sleep(0)

        assert USER_ID not in registry.store
        assert await registry.feed(message_update(), bot) is MatchResult.NO_PROMPT


class TestConcurrentAnswers:
    async def test_prompt_resolves_exactly_once(self, registry, bot):
        async def slow_ok(msg):
            await asyncio.sleep(0.01)
            return True

        task = asyncio.create_task(context(registry, bot).wait(validate=slow_ok))
        await until_pending(registry)

        results = await asyncio.gather(
            registry.feed(message_update("first"), bot),
            registry.feed(message_update("second"), bot),
        )

        assert results == [MatchResult.RESOLVED, MatchResult.NO_PROMPT]
        assert (await task).text == "first"

    async def test_second_answer_goes_to_follow_up_prompt(self, registry, bot):
        ctx = context(registry, bot)

        async def flow():
            first = await ctx.wait(transform=lambda m: m.text)
            second = await ctx.wait(transform=lambda m: m.text)
            return first, second

        task = asyncio.create_task(flow())
        await until_pending(registry)

        await registry.feed(message_update("a"), bot)
        await until_pending(registry)
        await registry.feed(message_update("b"), bot)

        assert await task == ("a", "b")
