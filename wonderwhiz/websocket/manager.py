from typing import Dict, List
from fastapi import WebSocket
import json
import logging

logger = logging.getLogger(__name__)

class WebSocketManager:
    def __init__(self):
        # store active connections: session_id -> websockets (several tabs may watch one chat)
        self.active_connections: Dict[str, List[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, session_id: str):
        # Accept WebSocket connection and store using mapping
        await websocket.accept()
        self.active_connections.setdefault(session_id, []).append(websocket)
        logger.info(f"Websocket connected for session {session_id}")

    def disconnect(self, session_id: str, websocket: WebSocket = None):
        # Remove one connection, or all of them when no socket is given
        connections = self.active_connections.get(session_id, [])
        if websocket is not None and websocket in connections:
            connections.remove(websocket)
        if websocket is None or not connections:
            self.active_connections.pop(session_id, None)
        logger.info(f"Websocket disconnected for session {session_id}")

    async def send_to_session(self, session_id: str, message: dict):
        # Send message to every client watching a session
        failed = []
        for websocket in list(self.active_connections.get(session_id, [])):
            try:
                await websocket.send_text(json.dumps(message))
            except Exception as e:
                logger.error(f"Failed to send message to session: {session_id}, error: {str(e)}")
                failed.append(websocket)

        for websocket in failed:
            self.disconnect(session_id, websocket)

websocket_manager = WebSocketManager()
