"""
Pydantic v2 data models — the contract between the bot and the AI Tool Agent.

SceneContext goes out with every /ai command; AgentResponse comes back.
"""

from models.tool_agent import (
    SceneSize,
    SceneContext,
    FoundryCommand,
    AgentResponse,
    CommandStatus,
    CommandOutcome,
)

__all__ = [
    "SceneSize",
    "SceneContext",
    "FoundryCommand",
    "AgentResponse",
    "CommandStatus",
    "CommandOutcome",
]
