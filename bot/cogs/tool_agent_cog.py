"""
Tool Agent Cog — Status commands for the AI Tool Agent connector.

The /ai interception itself is a chat hook (see bot/client.py); these are
the GM's diagnostics around it.

Commands: !agent, !agent_ctx
"""

import json
import logging
import discord
from discord.ext import commands

from agents.tools.tool_agent_errors import ToolAgentError

logger = logging.getLogger("ToolAgent_Cog")


class ToolAgentCog(commands.Cog, name="AI Tool Agent"):
    """AI Tool Agent diagnostics — health and scene context."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot
        self.connector = bot.tool_agent

    # ------------------------------------------------------------------
    # !agent — health check
    # ------------------------------------------------------------------
    @commands.command(name="agent")
    async def agent_status_cmd(self, ctx):
        """Show AI Tool Agent reachability and connector state."""
        state = self.connector.status()

        try:
            health = await self.connector.check_health()
            reachable = True
        except ToolAgentError as e:
            logger.warning(f"Agent status probe failed: {e}")
            health = {"error": str(e)}
            reachable = False

        if reachable and state["enabled"]:
            color = discord.Color.green()
            overall = "Connected"
        elif reachable:
            color = discord.Color.orange()
            overall = "Reachable — connector disabled since startup"
        else:
            color = discord.Color.red()
            overall = "Unreachable"

        embed = discord.Embed(
            title="AI Tool Agent Status",
            description=overall,
            color=color,
        )
        embed.add_field(name="Agent URL", value=state["base_url"] or "N/A", inline=False)
        embed.add_field(name="Connector", value="Enabled" if state["enabled"] else "Disabled", inline=True)
        embed.add_field(name="Busy", value="Yes" if state["processing"] else "No", inline=True)
        embed.add_field(name="Prefix", value=f"`{state['prefix']}`", inline=True)
        embed.add_field(
            name="Health",
            value=f"```json\n{json.dumps(health, default=str)[:900]}\n```",
            inline=False,
        )
        await ctx.send(embed=embed)

    # ------------------------------------------------------------------
    # !agent_ctx — what the next /ai would send
    # ------------------------------------------------------------------
    @commands.command(name="agent_ctx")
    async def agent_context_cmd(self, ctx):
        """Show the scene context the next /ai command would carry."""
        try:
            context = await self.connector.get_scene_context()
        except Exception as e:
            logger.error(f"Scene context read failed: {e}", exc_info=True)
            await ctx.send(f"Could not read the active scene: {e}")
            return

        payload = context.to_payload()
        if not payload:
            await ctx.send("No active scene — /ai commands will send an empty context.")
            return
        await ctx.send(f"```json\n{json.dumps(payload, indent=2)}\n```")


async def setup(bot: commands.Bot):
    await bot.add_cog(ToolAgentCog(bot))
