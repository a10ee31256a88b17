"""
Chat surfaces — where the connector's output lands in Discord.

DiscordChatLog   the channel a /ai command was typed in
ModeratorLog     the moderator log channel; doubles as the notifier for
                 connected/disabled/busy notices
"""

import logging
from typing import Awaitable, Callable

import discord

logger = logging.getLogger("ChatSurfaces")

DISCORD_MESSAGE_LIMIT = 2000

NOTICE_ICONS = {
    "info": "ℹ️",
    "warn": "⚠️",
    "error": "❌",
}


def chunk_text(text: str, limit: int = DISCORD_MESSAGE_LIMIT):
    """Split text into pieces Discord will accept."""
    if len(text) <= limit:
        return [text]
    return [text[i : i + limit] for i in range(0, len(text), limit)]


async def send_chunked(channel, text: str, **kwargs):
    """Send a long message in 2000-char chunks. kwargs go to every send()."""
    for chunk in chunk_text(text):
        await channel.send(chunk, **kwargs)


class DiscordChatLog:
    """Posts connector output to one Discord channel."""

    def __init__(self, channel):
        self.channel = channel

    async def post(self, content: str, speaker: str = "") -> None:
        text = f"**{speaker}:** {content}" if speaker else content
        await send_chunked(self.channel, text, allowed_mentions=discord.AllowedMentions.none())


class ModeratorLog:
    """Chat log + notifier backed by the bot's moderator-log sender.

    `send` is bot.client.send_to_moderator_log, which already falls back to
    the local log when MODERATOR_LOG_CHANNEL_ID is unset.
    """

    def __init__(self, send: Callable[[str], Awaitable[None]]):
        self._send = send

    async def post(self, content: str, speaker: str = "") -> None:
        text = f"[{speaker}] {content}" if speaker else content
        await self._send(text)

    async def _notify(self, level: str, message: str) -> None:
        log = logger.warning if level == "warn" else getattr(logger, level)
        log(f"Notice: {message}")
        await self._send(f"{NOTICE_ICONS[level]} {message}")

    async def info(self, message: str) -> None:
        await self._notify("info", message)

    async def warn(self, message: str) -> None:
        await self._notify("warn", message)

    async def error(self, message: str) -> None:
        await self._notify("error", message)
