import pytest
from wonderwhiz.models.session import UserProfile
from wonderwhiz.services.chat_session import ChatSession

TOC_REPLY = "1. How volcanoes form\n2. Types of volcanoes\n3. Famous eruptions\n4. Lava and magma\n5. Living near volcanoes"
RELATED_REPLY = "Earthquakes, Plate tectonics, Geysers, Mountains, Hot springs"


class FakeGenerator:
    """Stands in for the LLM client; replies are picked by a phrase found in the prompt."""

    def __init__(self, replies=None, default="Here is a fun answer!", quiz=None, image_url=None):
        self.replies = dict(replies or {})
        self.default = default
        self.quiz = quiz
        self.image_url = image_url or "https://example.com/picture.png"
        self.calls = []
        self.quiz_calls = []
        self.image_calls = []
        self.before_reply = None

    async def generate_response(self, prompt, age_range, language="en"):
        self.calls.append((prompt, age_range, language))
        if self.before_reply:
            self.before_reply(prompt)
        for phrase, reply in self.replies.items():
            if phrase.lower() in prompt.lower():
                if isinstance(reply, Exception):
                    raise reply
                return reply
        return self.default

    async def generate_quiz(self, topic, language="en", age_range="8-10"):
        self.quiz_calls.append(topic)
        if isinstance(self.quiz, Exception):
            raise self.quiz
        return self.quiz

    async def generate_image(self, prompt, age_range="8-10"):
        self.image_calls.append(prompt)
        if isinstance(self.image_url, Exception):
            raise self.image_url
        return self.image_url

    def prompts_containing(self, phrase):
        return [p for p, _, _ in self.calls if phrase.lower() in p.lower()]


@pytest.fixture
def fake_generator():
    return FakeGenerator(replies={
        "table of contents": TOC_REPLY,
        "related topics": RELATED_REPLY,
    })


@pytest.fixture
def profile():
    return UserProfile(username="Sam", age_range="8-10", avatar="explorer", language="en")


@pytest.fixture
def make_session(profile):
    """Build a chat session with the guards' cooldowns disabled."""
    def _make(generator, notifier=None):
        session = ChatSession("test-session", profile, generator=generator, notifier=notifier)
        session.guard.cooldown_seconds = 0
        session.blocks.guard.cooldown_seconds = 0
        return session
    return _make
