"""
Shared pytest fixtures for the AI Tool Agent connector test suite.

Recording doubles for the chat log, notifier and scene source, plus an
AsyncMock agent client, so connector tests never touch the network.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from agents.tool_agent_connector import ToolAgentConnector
from tools.chat_hooks import ChatHookRegistry


# ---------------------------------------------------------------------------
# Recording doubles (reusable classes)
# ---------------------------------------------------------------------------

class RecordingChat:
    """Chat log that keeps every post in order."""

    def __init__(self):
        self.posts = []

    async def post(self, content: str, speaker: str = ""):
        self.posts.append(content)


class RecordingNotifier:
    """Notifier that keeps (level, message) pairs."""

    def __init__(self):
        self.notices = []

    async def info(self, message):
        self.notices.append(("info", message))

    async def warn(self, message):
        self.notices.append(("warn", message))

    async def error(self, message):
        self.notices.append(("error", message))

    def of_level(self, level):
        return [m for lvl, m in self.notices if lvl == level]


class StaticScenes:
    """Scene source returning a fixed scene (or None)."""

    def __init__(self, scene=None):
        self.scene = scene

    async def active_scene(self):
        return self.scene


class FakeMessage:
    """Bare-minimum stand-in for a discord.Message."""

    def __init__(self, content, author_id=1, channel=None):
        self.content = content
        self.author = MagicMock()
        self.author.id = author_id
        self.channel = channel


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def cave_scene():
    return {
        "name": "Goblin Cave",
        "width": 4000,
        "height": 3000,
        "tokens": [{"name": "Goblin"}, {"name": "Hadrian"}, {"name": "Wolf"}],
    }


@pytest.fixture
def mock_agent_client():
    """MagicMock ToolAgentClient with healthy defaults."""
    client = MagicMock()
    client.base_url = "http://agent.test:8000"
    client.check_health = AsyncMock(return_value={"status": "ok"})
    client.parse_command = AsyncMock(return_value={"narrative": "Nothing happens", "foundry_commands": []})
    client.close = AsyncMock()
    return client


@pytest.fixture
def chat():
    return RecordingChat()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def hooks():
    return ChatHookRegistry()


@pytest.fixture
def connector(mock_agent_client, chat, notifier, hooks, cave_scene):
    return ToolAgentConnector(
        client=mock_agent_client,
        scenes=StaticScenes(cave_scene),
        chat=chat,
        notifier=notifier,
        hooks=hooks,
    )
