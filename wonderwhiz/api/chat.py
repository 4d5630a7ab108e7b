from fastapi import APIRouter, Depends, HTTPException, status
from typing import Dict, Any
from wonderwhiz.dependencies.session import get_chat_session
from wonderwhiz.models.session import UserProfile
from wonderwhiz.schemas.chat import (
    SessionCreate, MessageSubmit, SectionVisit, BlockRequest, ProfileUpdate,
    SessionSnapshot, ProcessingResponse, RelatedTopicsResponse
)
from wonderwhiz.services.chat_session import ChatSession, chat_session_manager
from wonderwhiz.websocket.notifications import notification_service
import logging
logger = logging.getLogger(__name__)
router = APIRouter(prefix="/chat", tags=["chat"])

@router.post("/sessions", response_model=SessionSnapshot, status_code=status.HTTP_201_CREATED)
async def create_session(request: SessionCreate):
    """Start a chat session and greet the learner"""
    profile = UserProfile(**request.model_dump())
    session = chat_session_manager.create(profile, notifier=notification_service.notify_notice)
    await session.initialize()
    return session.snapshot()

@router.get("/sessions/{session_id}", response_model=SessionSnapshot)
async def get_session(session: ChatSession = Depends(get_chat_session)):
    """Current state of a chat session"""
    return session.snapshot()

@router.delete("/sessions/{session_id}")
async def delete_session(session: ChatSession = Depends(get_chat_session)) -> Dict[str, Any]:
    """End a chat session and drop its state"""
    chat_session_manager.remove(session.session_id)
    return {"message": "Chat session deleted"}

@router.post("/sessions/{session_id}/messages", response_model=ProcessingResponse)
async def submit_message(
    request: MessageSubmit,
    session: ChatSession = Depends(get_chat_session)
):
    """Send learner input: starts a new topic or continues the current one"""
    try:
        result = await session.submit_message(request.text)
        return {"result": result, "session": session.snapshot()}
    except Exception as e:
        logger.error(f"Error: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to process message: {str(e)}"
        )

@router.delete("/sessions/{session_id}/messages", response_model=SessionSnapshot)
async def clear_messages(session: ChatSession = Depends(get_chat_session)):
    """Clear the conversation and topic progress"""
    session.clear_conversation()
    await notification_service.notify_session_cleared(session.session_id)
    return session.snapshot()

@router.post("/sessions/{session_id}/sections", response_model=ProcessingResponse)
async def visit_section(
    request: SectionVisit,
    session: ChatSession = Depends(get_chat_session)
):
    """Open a section of the current table of contents"""
    try:
        result = await session.visit_section(request.section)
        return {"result": result, "session": session.snapshot()}
    except ValueError as e:
        logger.error(f"Error {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Error {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to open section: {str(e)}"
        )

@router.post("/sessions/{session_id}/blocks", response_model=ProcessingResponse)
async def explore_block(
    request: BlockRequest,
    session: ChatSession = Depends(get_chat_session)
):
    """Run an exploration action (fact, story, image, quiz) on a message"""
    try:
        result = await session.explore_block(request.block_type, request.message_id)
        return {"result": result, "session": session.snapshot()}
    except ValueError as e:
        logger.error(f"Error {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except Exception as e:
        logger.error(f"Error {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to explore block: {str(e)}"
        )

@router.put("/sessions/{session_id}/profile", response_model=SessionSnapshot)
async def update_profile(
    request: ProfileUpdate,
    session: ChatSession = Depends(get_chat_session)
):
    """Change age range, language, avatar or name"""
    session.update_profile(**request.model_dump())
    return session.snapshot()

@router.get("/sessions/{session_id}/related-topics", response_model=RelatedTopicsResponse)
async def get_related_topics(session: ChatSession = Depends(get_chat_session)):
    """Related topics for the current topic, generated once and cached"""
    topics = await session.related()
    return {"topic": session.state.selected_topic, "related_topics": topics}
