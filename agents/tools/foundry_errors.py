"""
Foundry relay errors raised while reading the active scene.

Scene reads happen inside an /ai command, so any of these ends up as the
command's chat error message; the subclasses only sharpen the log line.
"""


class FoundryError(Exception):
    """Scene read failed; base for the relay errors below."""
    pass


class FoundryConnectionError(FoundryError):
    """Relay unreachable, or it answered 5xx."""
    pass


class FoundryTimeoutError(FoundryError):
    """Relay took longer than the per-read timeout."""
    pass


class FoundryNotFoundError(FoundryError):
    """Scene or world lookup came back 404."""
    pass


class FoundryAuthError(FoundryError):
    """FOUNDRY_API_KEY or FOUNDRY_CLIENT_ID rejected (401/403)."""
    pass
