"""
Unit tests for tools/chat_hooks.py — ChatHookRegistry and prefix helpers.

Pure Python, no Discord dependency.
"""

import asyncio

from tools.chat_hooks import (
    ChatHookRegistry,
    message_text,
    prefix_predicate,
    strip_prefix,
)
from conftest import FakeMessage


class TestPrefixHelpers:

    def test_message_text_from_string(self):
        assert message_text("/ai hi") == "/ai hi"

    def test_message_text_from_message(self):
        assert message_text(FakeMessage("/ai hi")) == "/ai hi"

    def test_message_text_missing_content(self):
        assert message_text(object()) == ""

    def test_prefix_predicate(self):
        matches = prefix_predicate("/ai ")
        assert matches("/ai move") is True
        assert matches("/ai ") is True
        assert matches("/ai") is False
        assert matches(" /ai move") is False
        assert matches("/AI move") is False

    def test_strip_prefix_keeps_remainder_verbatim(self):
        assert strip_prefix("/ai   two  spaces ", "/ai ") == "  two  spaces "

    def test_strip_prefix_no_match(self):
        assert strip_prefix("hello", "/ai ") == "hello"


class TestRegistry:

    def test_no_hooks_consumes_nothing(self):
        registry = ChatHookRegistry()
        assert asyncio.run(registry.dispatch("/ai hello")) is False

    def test_first_matching_hook_consumes(self):
        registry = ChatHookRegistry()
        seen = []

        async def first(message):
            seen.append(("first", message))

        async def second(message):
            seen.append(("second", message))

        registry.register("first", prefix_predicate("/ai "), first)
        registry.register("second", lambda m: True, second)

        assert asyncio.run(registry.dispatch("/ai hello")) is True
        assert seen == [("first", "/ai hello")]

    def test_falls_through_to_later_hook(self):
        registry = ChatHookRegistry()
        seen = []

        async def catch_all(message):
            seen.append(message)

        registry.register("ai", prefix_predicate("/ai "), catch_all)
        registry.register("roll", prefix_predicate("/r "), catch_all)

        assert asyncio.run(registry.dispatch("/r 1d20")) is True
        assert seen == ["/r 1d20"]

    def test_non_matching_returns_false(self):
        registry = ChatHookRegistry()

        async def handler(message):
            raise AssertionError("should not run")

        registry.register("ai", prefix_predicate("/ai "), handler)
        assert asyncio.run(registry.dispatch("just chatting")) is False

    def test_reregister_replaces(self):
        registry = ChatHookRegistry()
        seen = []

        async def old(message):
            seen.append("old")

        async def new(message):
            seen.append("new")

        registry.register("ai", prefix_predicate("/ai "), old)
        registry.register("ai", prefix_predicate("/ai "), new)

        asyncio.run(registry.dispatch("/ai x"))
        assert registry.count == 1
        assert seen == ["new"]

    def test_unregister(self):
        registry = ChatHookRegistry()

        async def handler(message):
            pass

        registry.register("ai", prefix_predicate("/ai "), handler)
        assert registry.unregister("ai") is True
        assert registry.unregister("ai") is False
        assert registry.is_registered("ai") is False
        assert registry.match("/ai x") is None
