"""WebSocket handler for real-time session updates."""
import asyncio
import json
import logging
from typing import Dict, Optional, Set
from fastapi import WebSocket, WebSocketDisconnect
import redis.asyncio as redis

from api.services.identity import IdentityGate, SessionContext, SessionState
from shared.config import settings
from shared.utils import token_fingerprint

logger = logging.getLogger(__name__)


def session_message(context: SessionContext) -> dict:
    identity = context.current_identity()
    return {
        "type": "session_update",
        "state": context.state.value,
        "address": identity.address if identity else None,
        "is_admin": context.is_admin()
    }


class ConnectionManager:
    """Tracks the session contexts observed by connected clients."""

    def __init__(self):
        # Map of session fingerprint to contexts watched over a socket
        self.active_sessions: Dict[str, Set[SessionContext]] = {}

    async def connect(self, websocket: WebSocket, context: SessionContext):
        """Accept a new WebSocket connection."""
        await websocket.accept()
        if context.token:
            key = token_fingerprint(context.token)
            self.active_sessions.setdefault(key, set()).add(context)

    def disconnect(self, context: SessionContext):
        """Stop tracking a context."""
        if not context.token:
            return
        key = token_fingerprint(context.token)
        if key in self.active_sessions:
            self.active_sessions[key].discard(context)
            if not self.active_sessions[key]:
                del self.active_sessions[key]

    async def end_session(self, fingerprint: str):
        """Move every watched context of a signed-out session to ANONYMOUS."""
        for context in list(self.active_sessions.get(fingerprint, ())):
            if context.state is SessionState.AUTHENTICATED:
                try:
                    await context.end()
                except Exception as e:
                    logger.warning(f"Dropping session observer: {e}")
                    self.disconnect(context)


# Global connection manager
manager = ConnectionManager()


async def redis_subscriber(redis_client: redis.Redis):
    """Subscribe to Redis channel and forward sign-outs to watching clients."""
    pubsub = redis_client.pubsub()
    await pubsub.subscribe(settings.redis_session_channel)

    try:
        async for message in pubsub.listen():
            if message["type"] == "message":
                try:
                    data = json.loads(message["data"])
                except json.JSONDecodeError:
                    logger.warning("Ignoring malformed session update")
                    continue

                if data.get("state") == SessionState.ANONYMOUS.value and data.get("session"):
                    await manager.end_session(data["session"])
    except asyncio.CancelledError:
        pass
    finally:
        await pubsub.unsubscribe(settings.redis_session_channel)
        await pubsub.close()


async def websocket_endpoint(websocket: WebSocket, gate: IdentityGate, token: Optional[str] = None):
    """WebSocket endpoint reporting the caller's session state as it changes."""
    context = await gate.open_session(token)

    async def push(changed: SessionContext):
        await websocket.send_json(session_message(changed))

    unsubscribe = context.subscribe(push)
    await manager.connect(websocket, context)
    await websocket.send_json(session_message(context))

    try:
        while True:
            # Keep connection alive with heartbeat
            try:
                data = await asyncio.wait_for(
                    websocket.receive_text(),
                    timeout=settings.ws_heartbeat_interval
                )
                if data == "ping":
                    await websocket.send_text("pong")
            except asyncio.TimeoutError:
                await websocket.send_json({"type": "heartbeat"})
    except WebSocketDisconnect:
        pass
    finally:
        unsubscribe()
        manager.disconnect(context)
