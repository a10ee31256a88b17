"""
ToolAgentConnector — Forwards /ai chat commands to the external AI Tool Agent.

Flow for one command:
  /ai <text>  →  scene snapshot  →  POST /parse_command  →  narrative (+ command list) in chat

One command at a time: a second /ai while the first is waiting on the agent
gets a warning and is dropped, not queued. The agent's foundry_commands are
shown to the GM for review and never executed.

Collaborators are duck-typed so the connector can run against Discord,
the Foundry relay, or test doubles:
  chat      .post(content, speaker)           chat log for rendered output
  notifier  .info(msg) / .warn(msg) / .error(msg)   toast-style notices
  scenes    .active_scene() -> dict | None    {name, width, height, tokens}
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from agents.tools.tool_agent_client import ToolAgentClient
from agents.tools.tool_agent_errors import ToolAgentError
from models.tool_agent import (
    AgentResponse,
    CommandOutcome,
    CommandStatus,
    FoundryCommand,
    SceneContext,
)
from tools.chat_hooks import ChatHookRegistry, message_text, strip_prefix

logger = logging.getLogger('ToolAgentConnector')

SPEAKER = "AI Tool Agent"
COMMAND_PREFIX = "/ai "
HOOK_NAME = "ai-tool-agent"

BUSY_WARNING = "AI Tool Agent is already processing a command"
CONNECTED_NOTICE = "AI Tool Agent connected!"
DISABLED_NOTICE = "AI Tool Agent connection failed - module disabled"


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------
def format_processing(command: str) -> str:
    return f'⏳ *AI Tool Agent processing: "{command}"...*'


def format_narrative(narrative: str) -> str:
    return f"📖 **{narrative}**"


def format_commands(commands: List[FoundryCommand]) -> str:
    lines = ["**Commands to execute:**"]
    lines.extend(f"• `{cmd.raw}`" for cmd in commands)
    return "\n".join(lines)


def format_error(message: str) -> str:
    return f"❌ Error: {message}"


class ToolAgentConnector:
    """Bridges chat input and the AI Tool Agent service.

    Constructed once by the bot and handed to whatever needs it; there is
    no module-level instance. initialize() must succeed before any /ai
    input reaches handle_command().

    Args:
        client: ToolAgentClient (or anything with check_health/parse_command).
        scenes: Scene source for the context snapshot.
        chat: Default chat log for rendered output.
        notifier: Toast-style notices (connected, disabled, busy).
        hooks: Registry the /ai hook is registered on.
        prefix: Chat prefix that marks a command.
        author_filter: Optional extra predicate on the inbound message
            (e.g. GM only).
        chat_resolver: Optional message → chat log mapping so replies go
            back where the command came from.
    """

    def __init__(
        self,
        client: ToolAgentClient,
        scenes: Any,
        chat: Any,
        notifier: Any,
        hooks: ChatHookRegistry,
        prefix: str = COMMAND_PREFIX,
        author_filter: Optional[Callable[[Any], bool]] = None,
        chat_resolver: Optional[Callable[[Any], Any]] = None,
    ):
        self.client = client
        self.scenes = scenes
        self.chat = chat
        self.notifier = notifier
        self.hooks = hooks
        self.prefix = prefix
        self.author_filter = author_filter
        self.chat_resolver = chat_resolver

        self.is_processing = False
        self.enabled = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> bool:
        """Probe the agent; register the /ai hook only if it answers.

        Returns True when the connector is live.
        """
        logger.info("Initializing...")
        try:
            health = await self.check_health()
        except ToolAgentError as e:
            logger.error(f"Connection failed: {e}")
            self.enabled = False
            await self.notifier.warn(DISABLED_NOTICE)
            return False

        logger.info(f"Health check: {health}")
        await self.notifier.info(CONNECTED_NOTICE)

        self.hooks.register(HOOK_NAME, self._matches, self._on_chat_message)
        self.enabled = True
        logger.info(f"Ready! Use {self.prefix}<command>")
        return True

    async def close(self) -> None:
        """Drop the hook and the HTTP session."""
        self.hooks.unregister(HOOK_NAME)
        self.enabled = False
        await self.client.close()

    # ------------------------------------------------------------------
    # Agent calls
    # ------------------------------------------------------------------

    async def check_health(self) -> Any:
        """Single GET /health. Raises ToolAgentError on any failure."""
        return await self.client.check_health()

    async def get_scene_context(self) -> SceneContext:
        """Snapshot of the active scene; empty when none is active."""
        scene = await self.scenes.active_scene()
        return SceneContext.from_scene(scene)

    async def handle_command(self, command: str, chat: Any = None) -> CommandOutcome:
        """Run one command through the agent and render the reply.

        Rejected outright while another command is in flight. Failures are
        rendered as a chat error, never raised. The busy flag is always
        released.
        """
        if self.is_processing:
            logger.info(f"Rejected while busy: {command!r}")
            await self.notifier.warn(BUSY_WARNING)
            return CommandOutcome(command=command, status=CommandStatus.REJECTED)

        chat = chat or self.chat
        self.is_processing = True
        try:
            await chat.post(format_processing(command), speaker=SPEAKER)

            context = await self.get_scene_context()
            logger.info(f"Submitting command: {command!r} (scene: {context.scene_name})")
            result = await self.client.parse_command(command, context.to_payload())
            logger.info(f"AI Tool Agent response: {result}")

            response = AgentResponse.model_validate(result)
            await chat.post(format_narrative(response.narrative), speaker=SPEAKER)

            if response.foundry_commands:
                await chat.post(format_commands(response.foundry_commands), speaker=SPEAKER)

            return CommandOutcome(
                command=command,
                status=CommandStatus.COMPLETED,
                response=response,
            )

        except Exception as e:
            message = str(e) or type(e).__name__
            logger.error(f"AI Tool Agent error: {message}", exc_info=True)
            try:
                await chat.post(format_error(message), speaker=SPEAKER)
            except Exception as post_error:
                logger.error(f"Could not post error to chat: {post_error}", exc_info=True)
            return CommandOutcome(command=command, status=CommandStatus.FAILED, error=message)

        finally:
            self.is_processing = False

    # ------------------------------------------------------------------
    # Chat hook
    # ------------------------------------------------------------------

    def _matches(self, message: Any) -> bool:
        if not message_text(message).startswith(self.prefix):
            return False
        if self.author_filter is not None and not self.author_filter(message):
            return False
        return True

    async def _on_chat_message(self, message: Any) -> None:
        command = strip_prefix(message_text(message), self.prefix)
        chat = self.chat_resolver(message) if self.chat_resolver else None
        await self.handle_command(command, chat=chat)

    def status(self) -> Dict[str, Any]:
        """Connector state for the !agent status command."""
        return {
            'enabled': self.enabled,
            'processing': self.is_processing,
            'base_url': getattr(self.client, 'base_url', None),
            'prefix': self.prefix,
        }
