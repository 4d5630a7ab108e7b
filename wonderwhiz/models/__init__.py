from wonderwhiz.models.messages import (
    BlockType,
    DEFAULT_BLOCKS,
    Quiz,
    ErrorInfo,
    PlainMessage,
    TocMessage,
    SectionMessage,
    QuizMessage,
    ImageMessage,
    ErrorMessage,
    Message
)
from wonderwhiz.models.session import (
    UserProfile,
    TopicSession,
    GamificationStats,
    Notice,
    ProcessingResult,
    STORAGE_KEYS
)
