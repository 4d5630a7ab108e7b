from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from wonderwhiz.services.chat_session import chat_session_manager
from wonderwhiz.websocket.manager import websocket_manager
import logging

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/ws", tags=["websocket"])

@router.websocket("/sessions/{session_id}")
async def websocket_notices(
    websocket: WebSocket,
    session_id: str,
):
    # websocket endpoint for transient notices of one chat session
    if not chat_session_manager.get(session_id):
        await websocket.close(code=4004, reason="Unknown session")
        return

    await websocket_manager.connect(websocket, session_id)

    try:
        while True:
            data = await websocket.receive_text()

            if data == 'ping':
                # keeps the chat session from expiring while a client is watching
                chat_session_manager.get(session_id)
                await websocket.send_text('pong')
    except WebSocketDisconnect:
        websocket_manager.disconnect(session_id, websocket)
        logger.info(f"Websocket disconnected for session: {session_id}")
    except Exception as e:
        logger.error(f"websocket error for session {session_id}: {str(e)}")
        websocket_manager.disconnect(session_id, websocket)
