"""
ChatHooks — Predicate-filtered interception of inbound chat messages.

A hook is (name, predicate, handler). dispatch() offers a message to each
hook in registration order; the first matching hook consumes it and the
caller skips its default processing. Pure Python — no Discord imports, the
message object is whatever the host passes in.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

logger = logging.getLogger("ChatHooks")

Predicate = Callable[[Any], bool]
Handler = Callable[[Any], Awaitable[Any]]


def message_text(message: Any) -> str:
    """Text of a message: discord.Message.content, or the string itself."""
    if isinstance(message, str):
        return message
    return getattr(message, "content", "") or ""


def prefix_predicate(prefix: str) -> Predicate:
    """Match messages whose text starts with `prefix` (e.g. "/ai ")."""
    def _matches(message: Any) -> bool:
        return message_text(message).startswith(prefix)
    return _matches


def strip_prefix(text: str, prefix: str) -> str:
    """Remove the command prefix, passing the remainder through verbatim."""
    if text.startswith(prefix):
        return text[len(prefix):]
    return text


class ChatHookRegistry:
    """Ordered set of single-consumer chat hooks."""

    def __init__(self):
        self._hooks: Dict[str, Tuple[Predicate, Handler]] = {}

    def register(self, name: str, predicate: Predicate, handler: Handler) -> None:
        """Register a hook. Re-registering a name replaces the old hook."""
        if name in self._hooks:
            logger.info(f"Replacing chat hook '{name}'")
        self._hooks[name] = (predicate, handler)
        logger.info(f"Chat hook registered: {name}")

    def unregister(self, name: str) -> bool:
        removed = self._hooks.pop(name, None) is not None
        if removed:
            logger.info(f"Chat hook removed: {name}")
        return removed

    def is_registered(self, name: str) -> bool:
        return name in self._hooks

    @property
    def count(self) -> int:
        return len(self._hooks)

    def match(self, message: Any) -> Optional[str]:
        """Name of the first hook whose predicate accepts the message."""
        for name, (predicate, _handler) in self._hooks.items():
            if predicate(message):
                return name
        return None

    async def dispatch(self, message: Any) -> bool:
        """Run the first matching hook.

        Returns True when a hook consumed the message (suppress default
        handling), False when nothing matched.
        """
        name = self.match(message)
        if name is None:
            return False
        _predicate, handler = self._hooks[name]
        logger.debug(f"Chat hook '{name}' consumed message")
        await handler(message)
        return True
