from fastapi import HTTPException, status
from wonderwhiz.services.chat_session import ChatSession, chat_session_manager

def get_chat_session(session_id: str) -> ChatSession:
    """Dependency for session routes - returns 404 for unknown sessions"""
    session = chat_session_manager.get(session_id)
    if not session:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Chat session not found"
        )
    return session
