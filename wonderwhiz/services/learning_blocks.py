from typing import Awaitable, Callable, Dict
import logging

from wonderwhiz.models.messages import (
    BlockType, DEFAULT_BLOCKS, ErrorInfo, ErrorMessage, ImageMessage, PlainMessage, QuizMessage
)
from wonderwhiz.models.session import GamificationStats, ProcessingResult, UserProfile
from wonderwhiz.services.message_store import MessageStore
from wonderwhiz.services.submission_guard import AlreadyProcessing, SubmissionGuard
from wonderwhiz.utils.fallbacks import PLACEHOLDER_QUIZ, fallback_image_url
from wonderwhiz.utils.language import get_string
from wonderwhiz.utils.llm_client import GenerationError

logger = logging.getLogger(__name__)

BLOCK_POINTS = 15

TEXT_BLOCK_PROMPTS: Dict[BlockType, str] = {
    BlockType.did_you_know: "Give me an interesting fact related to: {text} that would amaze a {age} year old. Be fun and educational.",
    BlockType.mind_blowing: "Tell me something mind-blowing about the science related to: {text} that would fascinate a {age} year old. Use an enthusiastic tone.",
    BlockType.amazing_stories: "Share an amazing story or legend related to: {text} appropriate for a {age} year old. Keep it engaging and educational.",
}

class LearningBlockService:
    """Exploration actions (fact, story, image, quiz) run against an existing message"""

    def __init__(self, messages: MessageStore, generator, stats: GamificationStats,
                 notify: Callable[[str, str], Awaitable[None]], guard: SubmissionGuard):
        self.messages = messages
        self.generator = generator
        self.stats = stats
        self.notify = notify
        self.guard = guard

    async def explore(self, block_type: BlockType, message_id: str, profile: UserProfile) -> ProcessingResult:
        source = self.messages.find(message_id)
        if source is None:
            raise ValueError(f"Message '{message_id}' not found")

        try:
            handle = self.guard.try_begin()
        except AlreadyProcessing:
            logger.info(f"[LearningBlock] Already processing another block, ignoring {block_type.value}")
            return ProcessingResult(status="rejected")

        async with handle:
            logger.info(f"[LearningBlock][START] Processing {block_type.value} block for message: {message_id}")
            self.stats.points += BLOCK_POINTS

            try:
                if block_type in TEXT_BLOCK_PROMPTS:
                    message = await self._text_block(block_type, source.text, profile)
                elif block_type == BlockType.see_it:
                    message = await self._image_block(source.text, profile)
                else:
                    message = await self._quiz_block(source.text, profile)
            except GenerationError as e:
                logger.error(f"[LearningBlock] Error processing {block_type.value} block: {str(e)}")
                error_message = self.messages.append(ErrorMessage(
                    id=self.messages.next_id("error"),
                    text=get_string("error_processing", profile.language),
                    error=ErrorInfo(message=str(e), details=type(e).__name__)
                ))
                await self.notify("error", get_string("try_again", profile.language))
                return ProcessingResult(status="error", message_id=error_message.id, error=str(e))

            self.messages.append(message)
            logger.info(f"[LearningBlock][END] Added {message.id}")
            return ProcessingResult(status="completed", message_id=message.id)

    async def _text_block(self, block_type: BlockType, text: str, profile: UserProfile) -> PlainMessage:
        prompt = TEXT_BLOCK_PROMPTS[block_type].format(text=text, age=profile.age_range)
        response = await self.generator.generate_response(prompt, profile.age_range, profile.language)
        return PlainMessage(
            id=self.messages.next_id(f"block-{block_type.value}"),
            text=response,
            block_type=block_type,
            blocks=list(DEFAULT_BLOCKS)
        )

    async def _image_block(self, text: str, profile: UserProfile) -> ImageMessage:
        image_prompt = (
            f"{text} in a style that appeals to {profile.age_range} year old children, "
            f"educational, detailed, colorful, Pixar style illustration"
        )
        try:
            image_url = await self.generator.generate_image(image_prompt, profile.age_range)
        except GenerationError as e:
            logger.error(f"[LearningBlock] Image generation failed, using stock photo: {str(e)}")
            image_url = fallback_image_url(text)

        return ImageMessage(
            id=self.messages.next_id("block-see-it"),
            text=get_string("image_intro", profile.language),
            image_prompt=image_prompt,
            image_url=image_url
        )

    async def _quiz_block(self, text: str, profile: UserProfile) -> QuizMessage:
        try:
            quiz = await self.generator.generate_quiz(text, profile.language, profile.age_range)
        except GenerationError as e:
            logger.error(f"[LearningBlock] Error generating quiz: {str(e)}")
            await self.notify("warning", get_string("quiz_fallback", profile.language))
            quiz = PLACEHOLDER_QUIZ

        return QuizMessage(
            id=self.messages.next_id("block-quiz"),
            text=get_string("quiz_intro", profile.language),
            quiz=quiz
        )
