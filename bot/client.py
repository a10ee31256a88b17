"""
Foundry AI Tool Agent — Discord Bot Client

Core bot setup, event handling, and message routing. /ai messages are
intercepted by the chat-hook registry and forwarded to the AI Tool Agent;
everything else falls through to the !commands in bot/cogs/.
"""

import os
import asyncio
import logging
from collections import deque
import discord
from discord.ext import commands
from dotenv import load_dotenv

from agents.tool_agent_connector import ToolAgentConnector
from agents.tools.tool_agent_client import ToolAgentClient
from agents.tools.foundry_tool import FoundryClient, FoundrySceneSource
from bot.chat_surfaces import DiscordChatLog, ModeratorLog
from tools.chat_hooks import ChatHookRegistry

logger = logging.getLogger("ToolAgent_Bot")

# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------
load_dotenv()
DISCORD_TOKEN = os.getenv("DISCORD_BOT_TOKEN")
MODERATOR_LOG_CHANNEL_ID = os.getenv("MODERATOR_LOG_CHANNEL_ID")

# Only the DM may drive the agent when set
DM_DISCORD_USER_ID = os.getenv("DM_DISCORD_USER_ID")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------
if not os.path.exists("logs"):
    os.makedirs("logs")

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[
        logging.FileHandler("logs/tool_agent.log", encoding="utf-8"),
        logging.StreamHandler(),
    ],
)

# ---------------------------------------------------------------------------
# Discord Bot Instance
# ---------------------------------------------------------------------------
intents = discord.Intents.default()
intents.message_content = True
bot = commands.Bot(command_prefix="!", intents=intents, help_command=None)

# Recent message IDs; Discord can re-deliver on gateway reconnections
_seen_messages: deque = deque(maxlen=1000)
_connector_initialized = False


# ---------------------------------------------------------------------------
# Moderator Log Helper
# ---------------------------------------------------------------------------
async def send_to_moderator_log(content: str):
    """Send a message to the moderator log channel."""
    if not MODERATOR_LOG_CHANNEL_ID:
        logger.info(f"[moderator log] {content}")
        return
    try:
        channel = bot.get_channel(int(MODERATOR_LOG_CHANNEL_ID))
        if channel is None:
            logger.warning(f"Could not find moderator log channel {MODERATOR_LOG_CHANNEL_ID}")
            logger.info(f"[moderator log] {content}")
            return
        for i in range(0, len(content), 1900):
            chunk = str(content)[i : i + 1900]
            await channel.send(chunk, allowed_mentions=discord.AllowedMentions.none())
    except Exception as e:
        logger.error(f"Failed to send to moderator log: {e}")
        logger.info(f"[moderator log] {content}")


def _is_game_master(message) -> bool:
    """True when no DM is configured, or the author is the configured DM."""
    if not DM_DISCORD_USER_ID:
        return True
    return str(message.author.id) == str(DM_DISCORD_USER_ID)


# ---------------------------------------------------------------------------
# Services (constructed once, injected into cogs)
# ---------------------------------------------------------------------------
foundry_client = FoundryClient()
tool_agent_client = ToolAgentClient()
chat_hooks = ChatHookRegistry()
moderator_log = ModeratorLog(send_to_moderator_log)

tool_agent = ToolAgentConnector(
    client=tool_agent_client,
    scenes=FoundrySceneSource(foundry_client),
    chat=moderator_log,
    notifier=moderator_log,
    hooks=chat_hooks,
    author_filter=_is_game_master,
    chat_resolver=lambda message: DiscordChatLog(message.channel),
)

# Attach shared services to bot so cogs can access them via self.bot
bot.foundry_client = foundry_client
bot.tool_agent = tool_agent
bot.chat_hooks = chat_hooks
bot.send_to_moderator_log = send_to_moderator_log


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------
@bot.event
async def on_ready():
    global _connector_initialized
    logger.info(f"Logged in as {bot.user.name} ({bot.user.id})")

    # on_ready fires again after every gateway resume; initialize once
    if _connector_initialized:
        return
    _connector_initialized = True

    # Without Foundry, commands go out with an empty scene context
    if foundry_client.api_key:
        if await foundry_client.connect():
            logger.info(f"Foundry VTT connected: client={foundry_client.client_id}")
        else:
            logger.warning("Foundry VTT connection failed — /ai commands carry no scene context.")
    else:
        logger.info("Foundry VTT disabled (no API key set).")

    if DM_DISCORD_USER_ID:
        logger.info(f"/ai restricted to DM user {DM_DISCORD_USER_ID}")

    if await tool_agent.initialize():
        print(f"AI Tool Agent online at {tool_agent_client.base_url}. Use {tool_agent.prefix}<command>")
    else:
        print(f"AI Tool Agent unreachable at {tool_agent_client.base_url} — /ai disabled.")


@bot.event
async def on_message(message):
    if message.author == bot.user:
        return

    # Bot filter — ignore messages from other bots (MEE6, etc.)
    if message.author.bot:
        return

    if message.id in _seen_messages:
        return
    _seen_messages.append(message.id)

    # A consumed message never reaches the command handler
    if await chat_hooks.dispatch(message):
        return

    if message.content.startswith("!"):
        await bot.process_commands(message)


# ---------------------------------------------------------------------------
# Cog Loading & Entry Point
# ---------------------------------------------------------------------------
async def load_cogs():
    """Load all Cog extensions."""
    await bot.load_extension("bot.cogs.tool_agent_cog")
    logger.info("All Cogs loaded.")


async def main():
    """Async entry point — load cogs then start the bot."""
    try:
        async with bot:
            await load_cogs()
            await bot.start(DISCORD_TOKEN)
    finally:
        await tool_agent.close()
        await foundry_client.close()


def run():
    """Synchronous entry point for scripts."""
    if not DISCORD_TOKEN:
        print("Error: DISCORD_BOT_TOKEN not found via os.getenv")
        return
    asyncio.run(main())


if __name__ == "__main__":
    run()
