"""
AI Tool Agent Connection Test

Run this to verify the AI Tool Agent is reachable and answers commands.
Usage: py scripts/probe_tool_agent.py ["command text"]
"""

import os
import sys
import json
import asyncio
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from agents.tools.tool_agent_client import ToolAgentClient
from agents.tools.tool_agent_errors import ToolAgentError


def pretty(data):
    """Pretty-print JSON data."""
    if isinstance(data, (dict, list)):
        return json.dumps(data, indent=2, default=str)[:2000]
    return str(data)[:2000]


async def main(command: str):
    print("=" * 60)
    print("  AI Tool Agent Connection Test")
    print("=" * 60)

    client = ToolAgentClient()
    print(f"\n📡 Agent URL: {client.base_url}")
    print(f"⏱️  Timeout:   {client.timeout or 'none'}")

    try:
        print(f"\n{'─' * 40}")
        print("TEST 1: GET /health")
        print(f"{'─' * 40}")
        try:
            health = await client.check_health()
            print(f"✅ Response:\n{pretty(health)}")
        except ToolAgentError as e:
            print(f"❌ Failed: {e}")
            return

        print(f"\n{'─' * 40}")
        print(f"TEST 2: POST /parse_command  ({command!r})")
        print(f"{'─' * 40}")
        try:
            result = await client.parse_command(command, {})
            print(f"✅ Response:\n{pretty(result)}")
        except ToolAgentError as e:
            print(f"❌ Failed: {e}")
    finally:
        await client.close()

    print(f"\n{'=' * 60}")
    print("  Connection test complete!")
    print(f"{'=' * 60}")


if __name__ == "__main__":
    text = " ".join(sys.argv[1:]) or "describe the scene"
    asyncio.run(main(text))
