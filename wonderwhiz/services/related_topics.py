from typing import Dict, List, Tuple
import logging

from wonderwhiz.services.topic_parser import process_topics_from_response
from wonderwhiz.utils.fallbacks import fallback_related_topics
from wonderwhiz.utils.llm_client import GenerationError

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, str, str]

class RelatedTopicsCache:
    """
    Memoizes "what else might this learner like" per (topic, age, language).

    Only one generation runs at a time. A caller arriving while it is in
    flight gets an empty list instead of waiting.
    """

    max_topics = 5

    def __init__(self, generator):
        self.generator = generator
        self._entries: Dict[CacheKey, List[str]] = {}
        self._in_flight = False

    @staticmethod
    def key_for(topic: str, age_range: str, language: str) -> CacheKey:
        return (topic.strip().lower(), age_range, language)

    def peek(self, topic: str, age_range: str, language: str) -> List[str]:
        return self._entries.get(self.key_for(topic, age_range, language), [])

    async def get(self, topic: str, age_range: str, language: str) -> List[str]:
        key = self.key_for(topic, age_range, language)
        if key in self._entries:
            return self._entries[key]

        if self._in_flight:
            logger.info(f"[RelatedTopics] Generation already in flight, skipping '{topic}'")
            return []

        self._in_flight = True
        try:
            prompt = (
                f'Generate 5 related topics to "{topic}" that might interest a learner aged {age_range}. '
                f"Format as a short comma-separated list."
            )
            response = await self.generator.generate_response(prompt, age_range, language)
            topics = process_topics_from_response(response)[:self.max_topics]
        except GenerationError as e:
            logger.error(f"[RelatedTopics] Error generating related topics for '{topic}': {str(e)}")
            return fallback_related_topics()
        finally:
            self._in_flight = False

        if not topics:
            logger.info(f"[RelatedTopics] Nothing usable for '{topic}', using fallback list")
            return fallback_related_topics()

        # first successful generation wins
        return self._entries.setdefault(key, topics)
