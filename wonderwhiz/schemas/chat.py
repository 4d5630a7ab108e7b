from pydantic import BaseModel, Field
from typing import List, Optional
from wonderwhiz.config import settings
from wonderwhiz.models.messages import BlockType, Message
from wonderwhiz.models.session import (
    GamificationStats, Notice, ProcessingResult, TopicSession, UserProfile
)

class SessionCreate(BaseModel):
    username: str = ""
    age_range: str = settings.default_age_range
    avatar: str = settings.default_avatar
    language: str = settings.default_language

class MessageSubmit(BaseModel):
    text: str = Field(min_length=1, max_length=2000)

class SectionVisit(BaseModel):
    section: str = Field(min_length=1)

class BlockRequest(BaseModel):
    block_type: BlockType
    message_id: str

class ProfileUpdate(BaseModel):
    username: Optional[str] = None
    age_range: Optional[str] = None
    avatar: Optional[str] = None
    language: Optional[str] = None

class SessionSnapshot(BaseModel):
    session_id: str
    profile: UserProfile
    messages: List[Message]
    topic: TopicSession
    stats: GamificationStats
    suggested_topics: List[str]
    notices: List[Notice]
    is_processing: bool

class ProcessingResponse(BaseModel):
    result: ProcessingResult
    session: SessionSnapshot

class RelatedTopicsResponse(BaseModel):
    topic: Optional[str] = None
    related_topics: List[str]
