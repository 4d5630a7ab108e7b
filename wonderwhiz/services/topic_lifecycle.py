"""
Decides whether a submission starts a new topic or continues the current one,
and drives the generation flow for each case.
"""
from typing import Awaitable, Callable, Dict, List, NamedTuple, Optional, Set, Tuple
import asyncio
import re
import logging

from wonderwhiz.models.messages import (
    DEFAULT_BLOCKS, ErrorInfo, ErrorMessage, PlainMessage, TocMessage
)
from wonderwhiz.models.session import (
    GamificationStats, ProcessingResult, TopicSession, UserProfile
)
from wonderwhiz.services.message_store import MessageStore
from wonderwhiz.services.related_topics import RelatedTopicsCache
from wonderwhiz.services.topic_parser import parse_table_of_contents
from wonderwhiz.utils.language import get_string
from wonderwhiz.utils.llm_client import GenerationError

logger = logging.getLogger(__name__)

Notify = Callable[[str, str], Awaitable[None]]

CONTINUATION_PREFIXES = ("tell me more", "can you explain", "what about")
CONTINUATION_MARKERS = ("how about",)
TOPIC_PREFIXES = ("tell me about", "what is", "show me", "explain")

CONTINUATION_POINTS = 10

class ContinuationRule(NamedTuple):
    name: str
    matches: Callable[[str, str], bool]

# Checked against the trimmed, lowercased input and lowercased current topic.
# Known limitation: any input that merely contains the topic name counts as a
# continuation ("Mars bars the candy" while learning about "Mars").
CONTINUATION_RULES: List[ContinuationRule] = [
    ContinuationRule("mentions_current_topic", lambda text, topic: bool(topic) and topic in text),
    ContinuationRule("continuation_prefix", lambda text, topic: text.startswith(CONTINUATION_PREFIXES)),
    ContinuationRule("continuation_marker", lambda text, topic: any(m in text for m in CONTINUATION_MARKERS)),
]

def is_new_topic_request(input_text: str, current_topic: Optional[str], topic_generated: bool) -> bool:
    if not current_topic:
        return True

    # The previous attempt never produced sections; treat it as abandoned
    if not topic_generated:
        return True

    text = input_text.strip().lower()
    topic = current_topic.strip().lower()
    for rule in CONTINUATION_RULES:
        if rule.matches(text, topic):
            logger.info(f"[TopicManagement] Continuation via '{rule.name}': {input_text!r}")
            return False

    return True

_TOPIC_PREFIX_RE = re.compile(
    r"^(?:" + "|".join(re.escape(p) for p in TOPIC_PREFIXES) + r")\b\s*",
    re.IGNORECASE
)

def extract_topic(input_text: str) -> str:
    """'Tell me about volcanoes!' -> 'volcanoes'"""
    text = input_text.strip()
    cleaned = _TOPIC_PREFIX_RE.sub("", text, count=1).strip()
    cleaned = cleaned.strip(" ?!.")
    return cleaned or text

class TopicLifecycleController:
    def __init__(self, state: TopicSession, messages: MessageStore, generator,
                 related_topics: RelatedTopicsCache, stats: GamificationStats,
                 notify: Notify):
        self.state = state
        self.messages = messages
        self.generator = generator
        self.related_topics = related_topics
        self.stats = stats
        self.notify = notify

        # (topic, age, language) keys that have a request issued or a result stored
        self._toc_requested: Set[Tuple[str, str, str]] = set()
        self._toc_results: Dict[Tuple[str, str, str], List[str]] = {}
        self._hint_shown = False
        self.background_tasks: Set[asyncio.Task] = set()

    async def handle_submission(self, input_text: str, profile: UserProfile) -> ProcessingResult:
        if self.state.learning_complete and self.state.topic_sections_generated:
            # Finished topic: remember it and start fresh before classifying
            if self.state.selected_topic:
                self.stats.previous_topics.append(self.state.selected_topic)
            logger.info(f"[TopicManagement] Topic '{self.state.selected_topic}' completed, resetting")
            self.state.reset()

        if is_new_topic_request(input_text, self.state.selected_topic, self.state.topic_sections_generated):
            return await self.start_new_topic(input_text, profile)
        return await self.continue_topic(input_text, profile)

    async def start_new_topic(self, input_text: str, profile: UserProfile) -> ProcessingResult:
        topic = extract_topic(input_text)
        logger.info(f"[TopicManagement] Starting new topic '{topic}'")

        self.state.reset(topic)
        revision = self.state.revision

        self.messages.append(PlainMessage(
            id=self.messages.next_id("user"),
            text=input_text.strip(),
            is_user=True
        ))

        self._spawn(self.refresh_related_topics(topic, profile, revision))

        try:
            sections = await self.generate_table_of_contents(topic, profile)
        except GenerationError as e:
            logger.error(f"[TopicManagement] Error generating table of contents: {str(e)}")
            error_message = self.messages.append(ErrorMessage(
                id=self.messages.next_id("error"),
                text=get_string("toc_error", profile.language),
                error=ErrorInfo(message=str(e), details=type(e).__name__)
            ))
            await self.notify("error", get_string("try_again", profile.language))
            return ProcessingResult(status="error", message_id=error_message.id, error=str(e))

        if sections is None:
            return ProcessingResult(status="ignored")

        if self.state.revision != revision:
            logger.info(f"[TopicManagement] Dropping stale table of contents for '{topic}'")
            return ProcessingResult(status="ignored")

        toc_message = self.messages.append(TocMessage(
            id=self.messages.next_id("ai-toc"),
            text=get_string("toc_intro", profile.language, topic=topic),
            topic=topic,
            table_of_contents=sections
        ))
        self.state.table_of_contents = list(sections)
        self.state.topic_sections_generated = True
        self.state.learning_progress = 0

        if not self._hint_shown:
            self._hint_shown = True
            await self.notify("info", get_string("pick_section", profile.language))

        return ProcessingResult(status="completed", message_id=toc_message.id)

    async def generate_table_of_contents(self, topic: str, profile: UserProfile) -> Optional[List[str]]:
        """
        Sections for a topic, asking the generator at most once per key.
        Returns None when a request for the same key is already in flight.
        """
        key = (topic.lower(), profile.age_range, profile.language)
        if key in self._toc_results:
            logger.info(f"[TopicManagement] Reusing table of contents for '{topic}'")
            return list(self._toc_results[key])

        if key in self._toc_requested:
            logger.info(f"[TopicManagement] Table of contents for '{topic}' already requested")
            return None

        self._toc_requested.add(key)
        prompt = (
            f'For the topic "{topic}", generate a table of contents with exactly 5 sections that are '
            f"specific to this topic and interesting for children aged {profile.age_range}.\n"
            f"Return ONLY a numbered list with no additional text. Do not include generic sections "
            f"such as an introduction, welcome, summary or conclusion.\n"
            f"Example:\n1. What are planets?\n2. How planets form\n3. The types of planets in our solar system\n"
            f"4. Could life exist on other planets?\n5. Future of planet exploration"
        )

        try:
            response = await self.generator.generate_response(prompt, profile.age_range, profile.language)
        except GenerationError:
            # forget the key so the learner can retry
            self._toc_requested.discard(key)
            raise

        if key in self._toc_results:
            return None

        sections = parse_table_of_contents(response, topic)
        self._toc_results[key] = sections
        logger.info(f"[TopicManagement] Table of contents for '{topic}': {sections}")
        return list(sections)

    async def continue_topic(self, input_text: str, profile: UserProfile,
                             show_user_message: bool = True) -> ProcessingResult:
        if show_user_message:
            self.messages.append(PlainMessage(
                id=self.messages.next_id("user"),
                text=input_text.strip(),
                is_user=True
            ))

        try:
            response = await self.generator.generate_response(input_text, profile.age_range, profile.language)
        except GenerationError as e:
            logger.error(f"[TopicManagement] Error processing message: {str(e)}")
            error_message = self.messages.append(ErrorMessage(
                id=self.messages.next_id("error"),
                text=get_string("error_processing", profile.language),
                error=ErrorInfo(message=str(e), details=type(e).__name__)
            ))
            await self.notify("error", get_string("try_again", profile.language))
            return ProcessingResult(status="error", message_id=error_message.id, error=str(e))

        ai_message = self.messages.append(PlainMessage(
            id=self.messages.next_id("ai"),
            text=response,
            blocks=list(DEFAULT_BLOCKS)
        ))
        self.stats.points += CONTINUATION_POINTS
        return ProcessingResult(status="completed", message_id=ai_message.id)

    async def refresh_related_topics(self, topic: str, profile: UserProfile,
                                     revision: Optional[int] = None) -> List[str]:
        if revision is None:
            revision = self.state.revision
        topics = await self.related_topics.get(topic, profile.age_range, profile.language)
        if topics and self.state.revision == revision and self.state.selected_topic == topic:
            self.state.related_topics = list(topics)
        return topics

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self.background_tasks.add(task)
        task.add_done_callback(self.background_tasks.discard)
        return task

    async def wait_for_background(self) -> None:
        if self.background_tasks:
            await asyncio.gather(*list(self.background_tasks), return_exceptions=True)
