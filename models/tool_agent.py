"""
AI Tool Agent schemas — scene context sent out, agent response read back.

The agent's reply is only rendered, never acted on, so AgentResponse is
lenient: unknown fields are kept and odd shapes degrade to
"nothing to show" instead of failing the command.
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class SceneSize(BaseModel):
    width: int = 0
    height: int = 0


class SceneContext(BaseModel):
    """Snapshot of the active scene, built fresh for every command."""

    scene_name: Optional[str] = Field(default=None, alias="sceneName")
    scene_active: bool = Field(default=False, alias="sceneActive")
    token_count: int = Field(default=0, alias="tokenCount")
    scene_size: Optional[SceneSize] = Field(default=None, alias="sceneSize")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_scene(cls, scene: Optional[Dict[str, Any]]) -> "SceneContext":
        """Map a scene record ({name, width, height, tokens}) to a context.

        No scene gives an empty context, which serializes to {}.
        """
        if not scene:
            return cls()
        tokens = scene.get("tokens") or []
        return cls(
            scene_name=scene.get("name"),
            scene_active=True,
            token_count=len(tokens),
            scene_size=SceneSize(
                width=scene.get("width") or 0,
                height=scene.get("height") or 0,
            ),
        )

    @property
    def is_empty(self) -> bool:
        return not self.scene_active

    def to_payload(self) -> Dict[str, Any]:
        """Wire form: camelCase keys, or {} when no scene is active."""
        if self.is_empty:
            return {}
        return self.model_dump(by_alias=True)


class FoundryCommand(BaseModel):
    """One suggested Foundry command. Displayed, never executed."""

    raw: str = ""

    @field_validator("raw", mode="before")
    @classmethod
    def coerce_raw(cls, v):
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    model_config = {"extra": "allow"}


class AgentResponse(BaseModel):
    """Reply from POST /parse_command."""

    narrative: str = ""
    foundry_commands: List[FoundryCommand] = Field(default_factory=list)

    @field_validator("narrative", mode="before")
    @classmethod
    def coerce_narrative(cls, v):
        if v is None:
            return ""
        return v if isinstance(v, str) else str(v)

    @field_validator("foundry_commands", mode="before")
    @classmethod
    def coerce_commands(cls, v):
        # Anything that isn't a list means "no commands to show".
        if not isinstance(v, list):
            return []
        return [c if isinstance(c, dict) else {"raw": c} for c in v]

    model_config = {"extra": "allow"}


class CommandStatus(str, Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    REJECTED = "rejected"


class CommandOutcome(BaseModel):
    """What happened to a single /ai command."""

    command: str
    status: CommandStatus
    response: Optional[AgentResponse] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == CommandStatus.COMPLETED
