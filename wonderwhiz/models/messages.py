from datetime import datetime
from typing import Annotated, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field
import enum

class BlockType(str, enum.Enum):
    did_you_know = "did-you-know"
    mind_blowing = "mind-blowing"
    amazing_stories = "amazing-stories"
    see_it = "see-it"
    quiz = "quiz"

# Exploration affordances offered under every assistant answer
DEFAULT_BLOCKS: List[BlockType] = [
    BlockType.did_you_know,
    BlockType.mind_blowing,
    BlockType.amazing_stories,
    BlockType.see_it,
    BlockType.quiz,
]

class Quiz(BaseModel):
    model_config = ConfigDict(frozen=True)

    question: str
    options: List[str]
    correct_answer: int
    fun_fact: Optional[str] = None

class ErrorInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str
    details: Optional[str] = None

class BaseMessage(BaseModel):
    """
    A single conversation turn. Frozen: history is append-only and
    nothing edits a message once it is in the store.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    is_user: bool = False
    created_at: datetime = Field(default_factory=datetime.now)

class PlainMessage(BaseMessage):
    kind: Literal["plain"] = "plain"
    block_type: Optional[BlockType] = None
    blocks: List[BlockType] = Field(default_factory=list)
    is_introduction: bool = False

class TocMessage(BaseMessage):
    kind: Literal["toc"] = "toc"
    topic: str
    table_of_contents: List[str]
    is_introduction: bool = True

class SectionMessage(BaseMessage):
    kind: Literal["section"] = "section"
    topic: str
    section: str
    blocks: List[BlockType] = Field(default_factory=list)

class QuizMessage(BaseMessage):
    kind: Literal["quiz"] = "quiz"
    block_type: BlockType = BlockType.quiz
    quiz: Quiz

class ImageMessage(BaseMessage):
    kind: Literal["image"] = "image"
    block_type: BlockType = BlockType.see_it
    image_prompt: str
    image_url: Optional[str] = None

class ErrorMessage(BaseMessage):
    kind: Literal["error"] = "error"
    error: ErrorInfo

Message = Annotated[
    Union[PlainMessage, TocMessage, SectionMessage, QuizMessage, ImageMessage, ErrorMessage],
    Field(discriminator="kind"),
]
