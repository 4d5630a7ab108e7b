from openai import AsyncOpenAI, OpenAIError
from pydantic import ValidationError
from wonderwhiz.config import settings
from wonderwhiz.models.messages import Quiz
from typing import Any, Dict, List, Optional
import asyncio
import json
import re
import logging

logger = logging.getLogger(__name__)

class GenerationError(Exception):
    """The remote generator failed; no finer taxonomy is exposed"""

class GenerationTimeout(GenerationError):
    pass

def get_system_prompt_for_age(age_range: str, language: str = "en") -> str:
    """System message that keeps answers age-appropriate and in the learner's language"""
    system_prompt = f"""You are WonderWhiz, an educational AI assistant designed for children aged {age_range}.
    Your responses should be:
    - Engaging, friendly, and encouraging
    - Age-appropriate in language and content (for {age_range} year olds)
    - Educational and factually accurate
    - Concise (2-3 paragraphs maximum)
    - Focused on explaining complex topics in simple terms
    - Free of any inappropriate content
    - Written with short sentences and simple vocabulary
    - Very sparing with emojis (maximum 2-3 per response)
    - End with a question or hook to encourage further exploration
    - IMPORTANT: Stay 100% on topic and directly address the specific question or topic"""

    if language != "en":
        system_prompt += f"\n\nIMPORTANT: Respond in {language} language only. All your content must be in {language}."

    return system_prompt

class ResponseGeneratorClient:
    def __init__(self, client: Optional[AsyncOpenAI] = None,
                 timeout_seconds: Optional[float] = None):
        self._client = client
        self.timeout_seconds = timeout_seconds or settings.generation_timeout_seconds

    @property
    def client(self) -> AsyncOpenAI:
        # Built on first use so importing the module never needs credentials
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=settings.openai_api_key or None,
                base_url=settings.openai_base_url or None
            )
        return self._client

    async def _call(self, request, what: str):
        try:
            return await asyncio.wait_for(request(), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            logger.error(f"[LLM] {what} timed out after {self.timeout_seconds}s")
            raise GenerationTimeout(f"{what} timed out after {self.timeout_seconds}s")
        except OpenAIError as e:
            logger.error(f"[LLM] {what} failed: {str(e)}")
            raise GenerationError(f"{what} failed: {str(e)}") from e

    async def generate_response(self, prompt: str, age_range: str, language: str = "en") -> str:
        """Generate child-friendly text for a prompt"""
        messages = [
            {"role": "system", "content": get_system_prompt_for_age(age_range, language)},
            {"role": "user", "content": prompt}
        ]

        response = await self._call(
            lambda: self.client.chat.completions.create(
                model=settings.openai_model,
                messages=messages,
                temperature=settings.temperature,
                max_tokens=settings.max_tokens
            ),
            "Text generation"
        )

        if not response.choices or not response.choices[0].message.content:
            raise GenerationError("Empty response from text generation")

        return response.choices[0].message.content.strip()

    async def generate_quiz(self, topic: str, language: str = "en", age_range: str = "8-10") -> Quiz:
        """Generate a single multiple choice question about a topic"""
        system_content = f"""You are an educational quiz generator for children aged {age_range}. Create a single multiple-choice question about the specific topic provided that is educational, engaging, and appropriate for children of this age group.

    The response must be in the following JSON format exactly, with no additional text:
    {{
        "question": "The question text here",
        "options": ["Option 1", "Option 2", "Option 3", "Option 4"],
        "correctAnswer": 0,
        "funFact": "A brief, fascinating fact related to the correct answer."
    }}

    Where "correctAnswer" is the index (0-3) of the correct option in the "options" array.
    IMPORTANT: The question MUST be directly related to the topic provided and not generic."""

        if language != "en":
            system_content += f"\n\nIMPORTANT: Generate the quiz in {language} language only."

        response = await self._call(
            lambda: self.client.chat.completions.create(
                model=settings.openai_model,
                messages=[
                    {"role": "system", "content": system_content},
                    {"role": "user", "content": f"Create a quiz question about: {topic}"}
                ],
                temperature=settings.temperature,
                max_tokens=settings.quiz_max_tokens
            ),
            "Quiz generation"
        )

        if not response.choices or not response.choices[0].message.content:
            raise GenerationError("Empty response from quiz generation")

        quiz_data = self._extract_json(response.choices[0].message.content.strip())

        if not self._validate_quiz_question(quiz_data):
            raise GenerationError("Invalid quiz data structure")

        try:
            return Quiz(
                question=quiz_data["question"],
                options=quiz_data["options"],
                correct_answer=quiz_data["correct_answer"],
                fun_fact=quiz_data.get("fun_fact")
            )
        except ValidationError as e:
            raise GenerationError(f"Invalid quiz data: {str(e)}") from e

    async def generate_image(self, prompt: str, age_range: str = "8-10") -> str:
        """Generate an illustration; returns a URL or a base64 data URI"""
        enhanced_prompt = (
            f"Create a child-friendly, educational illustration of: {prompt}. "
            f"The image should be colorful, engaging, suitable for children aged {age_range}, "
            f"with a playful art style."
        )

        response = await self._call(
            lambda: self.client.images.generate(
                model=settings.openai_image_model,
                prompt=enhanced_prompt,
                n=1
            ),
            "Image generation"
        )

        if not response.data:
            raise GenerationError("Empty response from image generation")

        image = response.data[0]
        if image.url:
            return image.url
        if image.b64_json:
            return f"data:image/png;base64,{image.b64_json}"
        raise GenerationError("Image generation returned neither url nor data")

    def _extract_json(self, content: str) -> Dict[str, Any]:
        try:
            return json.loads(content)
        except json.JSONDecodeError:
            json_match = re.search(r'\{.*\}', content, re.DOTALL)
            if json_match:
                try:
                    return json.loads(json_match.group())
                except json.JSONDecodeError:
                    pass
            raise GenerationError("Could not extract valid JSON from AI response")

    def _validate_quiz_question(self, question: Dict[str, Any]) -> bool:
        """Validate and normalize a quiz payload in place"""
        if not isinstance(question, dict):
            return False

        # The generator answers in camelCase
        if "correctAnswer" in question:
            question["correct_answer"] = question.pop("correctAnswer")
        if "funFact" in question:
            question["fun_fact"] = question.pop("funFact")

        for field in ["question", "options", "correct_answer"]:
            if field not in question:
                return False

        options: List[Any] = question["options"]
        if not isinstance(options, list) or len(options) != 4:
            return False
        # math quizzes come back with numeric options
        if not all(isinstance(option, (str, int, float)) and not isinstance(option, bool) for option in options):
            return False
        question["options"] = [str(option) for option in options]

        fun_fact = question.get("fun_fact")
        if fun_fact is not None and not isinstance(fun_fact, str):
            question["fun_fact"] = str(fun_fact)

        correct_answer = question["correct_answer"]
        if isinstance(correct_answer, str):
            # convert letter to index
            if correct_answer.upper() in ["A", "B", "C", "D"]:
                question["correct_answer"] = ord(correct_answer.upper()) - ord("A")
            else:
                return False

        if isinstance(question["correct_answer"], bool) or not isinstance(question["correct_answer"], int):
            return False
        if not (0 <= question["correct_answer"] <= 3):
            return False

        if not isinstance(question["question"], str) or not question["question"].strip():
            return False

        return True

# Create global instance
llm_client = ResponseGeneratorClient()
