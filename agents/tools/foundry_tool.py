"""
Foundry VTT Scene Reader — Three Hats REST API Relay (Async)

Reads the active scene out of a Foundry VTT world through the Three Hats
relay server, so /ai commands can be sent with a scene snapshot.

Architecture:
  Your Bot  --(REST/HTTP)-->  Relay Server  --(WebSocket)-->  Foundry VTT + Module

Requires:
  - FOUNDRY_API_KEY: Your relay API key
  - FOUNDRY_RELAY_URL: Relay server URL (default: public relay)
  - FOUNDRY_CLIENT_ID: Your world's client ID (auto-discovered if not set)

Read-only: nothing here mutates the world.
"""

import os
import asyncio
import logging
from typing import Optional, Dict, Any, List

import aiohttp

from agents.tools.foundry_errors import (
    FoundryError,
    FoundryConnectionError,
    FoundryTimeoutError,
    FoundryNotFoundError,
    FoundryAuthError,
)

logger = logging.getLogger('FoundryClient')


class FoundryClient:
    """Async read client for the Foundry VTT REST API relay.

    Usage:
        client = FoundryClient()
        await client.connect()      # creates aiohttp session, discovers clientId
        scene = await client.get_active_scene()
        await client.close()
    """

    def __init__(self):
        self.api_key = os.getenv('FOUNDRY_API_KEY')
        self.relay_url = os.getenv(
            'FOUNDRY_RELAY_URL',
            'https://foundryvtt-rest-api-relay.fly.dev'
        ).rstrip('/')
        self.client_id = os.getenv('FOUNDRY_CLIENT_ID')
        self._connected = False
        self._session: Optional[aiohttp.ClientSession] = None

        if not self.api_key:
            logger.warning("FOUNDRY_API_KEY not set — /ai commands will carry no scene context.")

    # ------------------------------------------------------------------
    # Internal HTTP layer
    # ------------------------------------------------------------------

    def _headers(self) -> Dict[str, str]:
        return {
            'Content-Type': 'application/json',
            'x-api-key': self.api_key or '',
        }

    async def _raise_for_status(self, resp: aiohttp.ClientResponse) -> None:
        """Map HTTP status codes to specific Foundry error types."""
        if resp.status < 400:
            return
        body = await resp.text(errors='replace')
        if resp.status in (401, 403):
            raise FoundryAuthError(f"Auth failed ({resp.status}): {body}")
        elif resp.status == 404:
            raise FoundryNotFoundError(f"Not found ({resp.status}): {body}")
        elif resp.status >= 500:
            raise FoundryConnectionError(f"Server error ({resp.status}): {body}")
        else:
            raise FoundryError(f"HTTP {resp.status}: {body}")

    async def _get(
        self,
        path: str,
        params: Optional[Dict] = None,
        timeout: int = 15,
        inject_client_id: bool = True,
    ) -> Any:
        """Single GET against the relay, returns the decoded JSON."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()

        url = f"{self.relay_url}{path}"
        params = dict(params or {})
        if inject_client_id and self.client_id and 'clientId' not in params:
            params['clientId'] = self.client_id

        try:
            async with self._session.get(url, headers=self._headers(), params=params,
                                         timeout=aiohttp.ClientTimeout(total=timeout)) as resp:
                await self._raise_for_status(resp)
                return await resp.json()
        except asyncio.TimeoutError as e:
            raise FoundryTimeoutError(f"Request timed out after {timeout}s: {path}") from e
        except aiohttp.ClientError as e:
            raise FoundryConnectionError(f"Network error: {e}") from e

    # ------------------------------------------------------------------
    # Connection & Discovery
    # ------------------------------------------------------------------

    async def get_clients(self) -> List[Dict]:
        """List all connected Foundry worlds. Does NOT require clientId."""
        return await self._get('/clients', timeout=10, inject_client_id=False)

    async def connect(self) -> bool:
        """
        Validate the connection and auto-discover clientId if not set.
        Returns True if a Foundry world is reachable.
        """
        if not self.api_key:
            logger.error("Cannot connect: FOUNDRY_API_KEY not set.")
            return False

        try:
            clients = await self.get_clients()
        except FoundryError as e:
            logger.error(f"Failed to connect to Foundry relay: {e}")
            return False

        if not clients:
            logger.warning("No Foundry worlds connected to the relay.")
            return False

        if not self.client_id:
            self.client_id = _discover_client_id(clients)
            if self.client_id:
                logger.info(f"Auto-discovered Foundry clientId: {self.client_id}")
            else:
                logger.warning("Could not auto-discover clientId from response.")
                logger.debug(f"Clients response: {clients}")
                return False

        self._connected = True
        logger.info(f"Connected to Foundry relay at {self.relay_url} "
                    f"(client: {self.client_id})")
        return True

    async def close(self) -> None:
        """Shut down the aiohttp session cleanly."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
        self._connected = False
        logger.info("Foundry client closed.")

    @property
    def is_connected(self) -> bool:
        return self._connected and bool(self.api_key) and bool(self.client_id)

    # ------------------------------------------------------------------
    # Scene reads
    # ------------------------------------------------------------------

    async def get_entity(self, uuid: str) -> Dict[str, Any]:
        """Get an entity by UUID (Scene, Actor, Item, ...)."""
        return await self._get('/get', params={'uuid': uuid})

    async def get_world_scenes(self) -> List[Dict[str, Any]]:
        """Get all scenes in the world (not compendiums)."""
        r = await self._get('/structure', params={
            'types': 'Scene',
            'recursive': 'true',
            'includeEntityData': 'false',
        })
        return r.get('data', {}).get('entities', {}).get('scenes', [])

    async def get_active_scene(self) -> Optional[Dict[str, Any]]:
        """
        The scene currently flagged active, as {name, width, height, tokens}.
        None when the world has no active scene.
        """
        scenes = await self.get_world_scenes()
        active = next((s for s in scenes if s.get('active')), None)
        if active is None:
            return None

        scene_data = await self.get_entity(active['uuid'])
        inner = scene_data.get('data', {})
        return {
            'uuid': active['uuid'],
            'name': inner.get('name', active.get('name')),
            'width': inner.get('width', 0),
            'height': inner.get('height', 0),
            'tokens': inner.get('tokens', []),
        }


def _discover_client_id(clients: Any) -> Optional[str]:
    """Pick the first world's id out of a /clients response (list or dict)."""
    if isinstance(clients, list) and clients:
        return clients[0].get('clientId') or clients[0].get('id')
    if isinstance(clients, dict):
        for val in clients.values():
            if isinstance(val, list) and val:
                return val[0].get('clientId') or val[0].get('id')
    return None


class FoundrySceneSource:
    """Scene source backed by the relay. No connection means no active scene."""

    def __init__(self, client: FoundryClient):
        self.client = client

    async def active_scene(self) -> Optional[Dict[str, Any]]:
        if not self.client.is_connected:
            return None
        return await self.client.get_active_scene()
