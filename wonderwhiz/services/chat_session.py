from collections import deque
from typing import Any, Awaitable, Callable, Deque, Dict, List, Optional
import time
import uuid
import logging

from wonderwhiz.config import settings
from wonderwhiz.models.messages import (
    BlockType, DEFAULT_BLOCKS, ErrorInfo, ErrorMessage, PlainMessage, SectionMessage
)
from wonderwhiz.models.session import (
    GamificationStats, Notice, ProcessingResult, TopicSession, UserProfile
)
from wonderwhiz.services.learning_blocks import LearningBlockService
from wonderwhiz.services.message_store import MessageStore
from wonderwhiz.services.related_topics import RelatedTopicsCache
from wonderwhiz.services.section_progress import SectionProgressTracker
from wonderwhiz.services.submission_guard import AlreadyProcessing, SubmissionGuard
from wonderwhiz.services.topic_lifecycle import TopicLifecycleController
from wonderwhiz.services.topic_parser import process_topics_from_response
from wonderwhiz.utils.fallbacks import DEFAULT_SUGGESTED_PROMPTS
from wonderwhiz.utils.language import get_string, get_welcome_message
from wonderwhiz.utils.llm_client import GenerationError, llm_client

logger = logging.getLogger(__name__)

Notifier = Callable[[str, Notice], Awaitable[None]]

# Completion buttons shown under a finished table of contents
SPECIAL_SECTIONS = ("Generate more content", "Explore other topics")
SECTION_POINTS = 10
MAX_NOTICES = 20

class ChatSession:
    """
    All state of one learner's chat: history, topic session, caches,
    guards and counters. Nothing here is shared between sessions.
    """

    def __init__(self, session_id: str, profile: UserProfile, generator=None,
                 notifier: Optional[Notifier] = None):
        self.session_id = session_id
        self.profile = profile
        self.generator = generator or llm_client
        self._notifier = notifier
        self.last_active = time.monotonic()

        self.messages = MessageStore()
        self.state = TopicSession()
        self.stats = GamificationStats()
        self.suggested_topics: List[str] = []
        self.notices: Deque[Notice] = deque(maxlen=MAX_NOTICES)

        self.guard = SubmissionGuard(settings.submission_cooldown_ms / 1000)
        self.related_topics = RelatedTopicsCache(self.generator)
        self.tracker = SectionProgressTracker(self.state, settings.default_total_sections)
        self.topics = TopicLifecycleController(
            state=self.state,
            messages=self.messages,
            generator=self.generator,
            related_topics=self.related_topics,
            stats=self.stats,
            notify=self.notify
        )
        self.blocks = LearningBlockService(
            messages=self.messages,
            generator=self.generator,
            stats=self.stats,
            notify=self.notify,
            guard=SubmissionGuard(settings.block_cooldown_ms / 1000, name="block")
        )

    async def notify(self, level: str, message: str) -> None:
        notice = Notice(level=level, message=message)
        self.notices.append(notice)
        if self._notifier:
            await self._notifier(self.session_id, notice)

    async def initialize(self) -> None:
        """Welcome message plus five personalized topic suggestions"""
        age_range = self.profile.age_range or settings.default_age_range
        language = self.profile.language
        logger.info(f"[Session {self.session_id}] Initializing for age range {age_range}")

        try:
            prompt = (
                f"Generate 5 engaging, educational topics that would interest a {age_range} year old child. "
                f"Format as a short comma-separated list. Topics should be interesting and appropriate for their age group."
            )
            response = await self.generator.generate_response(prompt, age_range, language)
            topics = process_topics_from_response(response)[:5]
            # pad with the defaults so there are always five
            self.suggested_topics = topics + DEFAULT_SUGGESTED_PROMPTS[:5 - len(topics)]
        except GenerationError as e:
            logger.error(f"[Session {self.session_id}] Error generating personalized topics: {str(e)}")
            self.suggested_topics = list(DEFAULT_SUGGESTED_PROMPTS)

        self.messages.append(PlainMessage(
            id=self.messages.next_id("welcome"),
            text=get_welcome_message(language, age_range, self.profile.username),
            blocks=list(DEFAULT_BLOCKS),
            is_introduction=True
        ))

    async def submit_message(self, text: str) -> ProcessingResult:
        if not text or not text.strip() or not self.profile.age_range:
            return ProcessingResult(status="ignored")

        try:
            handle = self.guard.try_begin()
        except AlreadyProcessing:
            await self.notify("warning", get_string("already_processing", self.profile.language))
            return ProcessingResult(status="rejected")

        async with handle:
            result = await self.topics.handle_submission(text, self.profile)

        if result.status == "completed":
            self.stats.record_activity()
        return result

    async def visit_section(self, section: str) -> ProcessingResult:
        topic = self.state.selected_topic
        if not topic:
            logger.warning(f"[SectionHandling] No topic selected, cannot process '{section}'")
            return ProcessingResult(status="ignored")

        if section in SPECIAL_SECTIONS:
            return await self.topics.continue_topic(section, self.profile, show_user_message=False)

        if not self.tracker.is_known_section(section):
            raise ValueError(f"Section '{section}' is not part of the table of contents")

        if self.tracker.is_completed(section):
            logger.info(f"[SectionHandling] Section '{section}' already completed")
            self.tracker.set_current(section)
            existing = self._find_section_message(topic, section)
            return ProcessingResult(status="completed", message_id=existing.id if existing else None)

        self.tracker.set_current(section)
        revision = self.state.revision
        prompt = f'Explain the section "{section}" from the topic "{topic}" in detail.'

        try:
            response = await self.generator.generate_response(prompt, self.profile.age_range, self.profile.language)
        except GenerationError as e:
            logger.error(f"[SectionHandling] Error processing section '{section}': {str(e)}")
            error_message = self.messages.append(ErrorMessage(
                id=self.messages.next_id("error"),
                text=get_string("error_processing", self.profile.language),
                error=ErrorInfo(message=str(e), details=type(e).__name__)
            ))
            await self.notify("error", get_string("try_again", self.profile.language))
            return ProcessingResult(status="error", message_id=error_message.id, error=str(e))

        message = self.messages.append(SectionMessage(
            id=self.messages.next_id("section"),
            text=response,
            topic=topic,
            section=section,
            blocks=list(DEFAULT_BLOCKS)
        ))
        self.stats.points += SECTION_POINTS
        self.stats.record_activity()

        if self.state.revision != revision:
            # the topic was reset while this section was generating
            logger.info(f"[SectionHandling] Topic changed, not counting '{section}' toward progress")
            return ProcessingResult(status="completed", message_id=message.id)

        if self.tracker.mark_completed(section):
            await self.notify("success", get_string("completed_section", self.profile.language))
            if self.state.learning_complete:
                await self.notify("success", get_string("learning_complete", self.profile.language, topic=topic))

        return ProcessingResult(status="completed", message_id=message.id)

    async def explore_block(self, block_type: BlockType, message_id: str) -> ProcessingResult:
        return await self.blocks.explore(block_type, message_id, self.profile)

    async def related(self) -> List[str]:
        if not self.state.selected_topic:
            return []
        return await self.topics.refresh_related_topics(self.state.selected_topic, self.profile)

    def update_profile(self, **changes: Any) -> UserProfile:
        """Apply profile edits; a new age range or language abandons the current topic"""
        changes = {k: v for k, v in changes.items() if v is not None}
        resets_topic = any(
            field in changes and changes[field] != getattr(self.profile, field)
            for field in ("age_range", "language")
        )

        self.profile = self.profile.model_copy(update=changes)
        if resets_topic:
            logger.info(f"[Session {self.session_id}] Age range or language changed, resetting topic")
            self.state.reset()
        return self.profile

    def clear_conversation(self) -> None:
        self.messages.clear()
        self.state.reset()
        logger.info(f"[Session {self.session_id}] Conversation cleared")

    def _find_section_message(self, topic: str, section: str) -> Optional[SectionMessage]:
        for message in reversed(self.messages.all()):
            if isinstance(message, SectionMessage) and message.topic == topic and message.section == section:
                return message
        return None

    def snapshot(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "profile": self.profile,
            "messages": self.messages.all(),
            "topic": self.state,
            "stats": self.stats,
            "suggested_topics": self.suggested_topics,
            "notices": list(self.notices),
            "is_processing": self.guard.is_processing
        }

class ChatSessionManager:
    """
    Registry of live chat sessions. Sessions untouched for longer than
    `idle_timeout_seconds` are dropped the next time the registry is used.
    """

    def __init__(self, idle_timeout_seconds: float = 3600, clock: Optional[Callable[[], float]] = None):
        # store active sessions: session_id -> ChatSession
        self.sessions: Dict[str, ChatSession] = {}
        self.idle_timeout_seconds = idle_timeout_seconds
        self._clock = clock or time.monotonic

    def create(self, profile: UserProfile, generator=None,
               notifier: Optional[Notifier] = None) -> ChatSession:
        self.evict_idle()
        session_id = uuid.uuid4().hex
        session = ChatSession(session_id, profile, generator=generator, notifier=notifier)
        session.last_active = self._clock()
        self.sessions[session_id] = session
        logger.info(f"Chat session created: {session_id}")
        return session

    def get(self, session_id: str) -> Optional[ChatSession]:
        """Look up a session and mark it as active"""
        self.evict_idle()
        session = self.sessions.get(session_id)
        if session:
            session.last_active = self._clock()
        return session

    def remove(self, session_id: str) -> bool:
        if session_id in self.sessions:
            del self.sessions[session_id]
            logger.info(f"Chat session removed: {session_id}")
            return True
        return False

    def evict_idle(self) -> List[str]:
        cutoff = self._clock() - self.idle_timeout_seconds
        expired = [sid for sid, session in self.sessions.items() if session.last_active < cutoff]
        for session_id in expired:
            del self.sessions[session_id]
            logger.info(f"Chat session expired after {self.idle_timeout_seconds}s idle: {session_id}")
        return expired

chat_session_manager = ChatSessionManager(settings.session_idle_timeout_seconds)
