from datetime import date, datetime, timedelta
from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field

# Fixed keys the web client keeps the profile under in local storage
STORAGE_KEYS = {
    "username": "wonderwhiz_username",
    "age_range": "wonderwhiz_age_range",
    "avatar": "wonderwhiz_avatar",
    "language": "wonderwhiz_language",
}

class UserProfile(BaseModel):
    username: str = ""
    age_range: Optional[str] = "8-10"
    avatar: str = "explorer"
    language: str = "en"

    @classmethod
    def from_storage(cls, storage: Dict[str, str]) -> "UserProfile":
        """Build a profile from the client's key/value store, keeping defaults for missing keys"""
        values = {
            field: storage[key]
            for field, key in STORAGE_KEYS.items()
            if storage.get(key)
        }
        return cls(**values)

    def to_storage(self) -> Dict[str, str]:
        return {
            key: getattr(self, field)
            for field, key in STORAGE_KEYS.items()
            if getattr(self, field) is not None
        }

class TopicSession(BaseModel):
    """
    What the learner is currently studying.
    Mutated only by the owning chat session on the event loop.
    """
    selected_topic: Optional[str] = None
    table_of_contents: List[str] = Field(default_factory=list)
    topic_sections_generated: bool = False

    # Section position tracking
    completed_sections: List[str] = Field(default_factory=list)
    current_section: Optional[str] = None
    learning_complete: bool = False
    learning_progress: int = 0

    related_topics: List[str] = Field(default_factory=list)

    # bumped by every reset; in-flight work compares it before applying results
    revision: int = 0

    def reset(self, topic: Optional[str] = None) -> None:
        self.revision += 1
        self.selected_topic = topic
        self.table_of_contents = []
        self.topic_sections_generated = False
        self.completed_sections = []
        self.current_section = None
        self.learning_complete = False
        self.learning_progress = 0
        self.related_topics = []

class GamificationStats(BaseModel):
    points: int = 0
    streak_count: int = 0
    last_active_on: Optional[date] = None
    previous_topics: List[str] = Field(default_factory=list)

    def record_activity(self, today: Optional[date] = None) -> None:
        """Count consecutive days with at least one completed answer"""
        today = today or date.today()
        if self.last_active_on == today:
            return
        if self.last_active_on == today - timedelta(days=1):
            self.streak_count += 1
        else:
            self.streak_count = 1
        self.last_active_on = today

class Notice(BaseModel):
    """Transient, non-blocking message for the learner (a toast)"""
    level: Literal["info", "success", "warning", "error"] = "info"
    message: str
    timestamp: datetime = Field(default_factory=datetime.now)

class ProcessingResult(BaseModel):
    """Outcome of one pass through a message flow"""
    status: Literal["completed", "error", "rejected", "ignored"]
    message_id: Optional[str] = None
    error: Optional[str] = None
