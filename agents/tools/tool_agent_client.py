"""
AI Tool Agent Client — async HTTP client for the external command parser.

Architecture:
  Discord /ai  -->  ToolAgentConnector  --(HTTP/JSON)-->  AI Tool Agent

Endpoints:
  GET  /health          readiness probe, any JSON body
  POST /parse_command   {"command": str, "context": {...}}
                        -> {"narrative": str, "foundry_commands": [{"raw": str}]}

Configured from the environment:
  - TOOL_AGENT_URL: agent base URL (default: DEFAULT_TOOL_AGENT_URL)
  - TOOL_AGENT_TIMEOUT: optional total timeout in seconds (default: none)

Every call is a single attempt: one command, one request, one answer.
"""

import os
import json
import asyncio
import logging
from typing import Optional, Dict, Any

import aiohttp

from agents.tools.tool_agent_errors import (
    ToolAgentConnectionError,
    ToolAgentTimeoutError,
    ToolAgentStatusError,
    ToolAgentResponseError,
)

logger = logging.getLogger('ToolAgentClient')

DEFAULT_TOOL_AGENT_URL = "http://192.168.100.21:8000"


def _timeout_from_env() -> Optional[float]:
    raw = os.getenv('TOOL_AGENT_TIMEOUT', '').strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid TOOL_AGENT_TIMEOUT={raw!r} — no timeout applied.")
        return None
    return value if value > 0 else None


class ToolAgentClient:
    """Async client for the AI Tool Agent HTTP service.

    Usage:
        client = ToolAgentClient()
        health = await client.check_health()
        result = await client.parse_command("move the goblin", {"sceneName": "Cave"})
        await client.close()
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (
            base_url or os.getenv('TOOL_AGENT_URL') or DEFAULT_TOOL_AGENT_URL
        ).rstrip('/')
        self.timeout = timeout if timeout is not None else _timeout_from_env()
        self._session: Optional[aiohttp.ClientSession] = None

    # ------------------------------------------------------------------
    # Internal HTTP layer
    # ------------------------------------------------------------------

    def _headers(self) -> Dict[str, str]:
        return {'Content-Type': 'application/json'}

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def _raise_for_status(self, resp: aiohttp.ClientResponse) -> None:
        """Anything outside 2xx is a failed call."""
        if 200 <= resp.status < 300:
            return
        body = await resp.text(errors='replace')
        raise ToolAgentStatusError(resp.status, body)

    async def _read_json(self, resp: aiohttp.ClientResponse, path: str) -> Any:
        # The agent does not always label its replies application/json,
        # so decode the text ourselves instead of using resp.json().
        try:
            text = await resp.text()
            return json.loads(text)
        except UnicodeDecodeError as e:
            raise ToolAgentResponseError(f"Undecodable body from {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ToolAgentResponseError(f"Invalid JSON from {path}: {e}") from e

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[Dict] = None,
    ) -> Any:
        """Execute a single HTTP request and return the decoded JSON body."""
        session = self._get_session()
        url = f"{self.base_url}{path}"
        client_timeout = aiohttp.ClientTimeout(total=self.timeout)

        try:
            if method == 'GET':
                async with session.get(url, timeout=client_timeout) as resp:
                    await self._raise_for_status(resp)
                    return await self._read_json(resp, path)
            elif method == 'POST':
                async with session.post(url, headers=self._headers(), json=body or {},
                                        timeout=client_timeout) as resp:
                    await self._raise_for_status(resp)
                    return await self._read_json(resp, path)
            else:
                raise ValueError(f"Unsupported HTTP method: {method}")

        # aiohttp's timeout errors are also ClientErrors; match them first.
        except asyncio.TimeoutError as e:
            raise ToolAgentTimeoutError(f"Request timed out after {self.timeout}s: {path}") from e
        except aiohttp.ClientError as e:
            raise ToolAgentConnectionError(f"Network error: {e}") from e

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def check_health(self) -> Any:
        """Probe GET /health. Returns the parsed body, raises ToolAgentError on failure."""
        return await self._request('GET', '/health')

    async def parse_command(self, command: str, context: Dict[str, Any]) -> Dict[str, Any]:
        """Submit a command with its scene context to POST /parse_command."""
        result = await self._request('POST', '/parse_command', body={
            'command': command,
            'context': context,
        })
        if not isinstance(result, dict):
            raise ToolAgentResponseError(
                f"Expected a JSON object from /parse_command, got {type(result).__name__}"
            )
        return result

    async def close(self) -> None:
        """Shut down the aiohttp session cleanly."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
        logger.info("Tool Agent client closed.")
