from wonderwhiz.models.session import Notice
from wonderwhiz.websocket.manager import websocket_manager
import logging

logger = logging.getLogger(__name__)

class NotificationService:

    @staticmethod
    async def notify_notice(session_id: str, notice: Notice):
        """Push a transient notice (toast) to a chat session's clients"""
        message = {
            "type": "notice",
            "level": notice.level,
            "message": notice.message,
            "timestamp": notice.timestamp.isoformat()
        }
        await websocket_manager.send_to_session(session_id, message)

    @staticmethod
    async def notify_session_cleared(session_id: str):
        """Tell clients the conversation was reset"""
        await websocket_manager.send_to_session(session_id, {"type": "session_cleared"})

# Service instance
notification_service = NotificationService()
