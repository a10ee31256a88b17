"""
AI Tool Agent Error Types — Structured exception hierarchy.

Nothing in the connector retries, but callers still need to tell an
unreachable agent apart from one that answered with a bad status or an
unreadable body, so each failure gets its own type.
"""

from typing import Optional


class ToolAgentError(Exception):
    """Base class for all AI Tool Agent errors."""
    pass


class ToolAgentConnectionError(ToolAgentError):
    """Agent is unreachable or the connection dropped mid-request."""
    pass


class ToolAgentTimeoutError(ToolAgentError):
    """Request exceeded the configured TOOL_AGENT_TIMEOUT."""
    pass


class ToolAgentStatusError(ToolAgentError):
    """Agent answered with a non-success HTTP status."""

    def __init__(self, status: int, body: Optional[str] = None):
        self.status = status
        self.body = body
        super().__init__(f"Tool Agent responded with {status}")


class ToolAgentResponseError(ToolAgentError):
    """Agent answered 2xx but the body is not a JSON object."""
    pass
