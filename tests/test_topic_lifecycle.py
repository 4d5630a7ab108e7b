# tests/test_topic_lifecycle.py
import asyncio
from wonderwhiz.models.messages import ErrorMessage, PlainMessage, TocMessage
from wonderwhiz.services.topic_lifecycle import extract_topic, is_new_topic_request
from wonderwhiz.utils.llm_client import GenerationError
from conftest import FakeGenerator, TOC_REPLY, RELATED_REPLY

VOLCANO_SECTIONS = ["How volcanoes form", "Types of volcanoes", "Famous eruptions",
                    "Lava and magma", "Living near volcanoes"]


def test_no_current_topic_is_new():
    assert is_new_topic_request("volcanoes", None, False)


def test_topic_without_sections_is_abandoned():
    assert is_new_topic_request("tell me more", "volcanoes", False)


def test_continuation_phrases():
    assert not is_new_topic_request("Tell me more about lava", "volcanoes", True)
    assert not is_new_topic_request("Can you explain that again?", "volcanoes", True)
    assert not is_new_topic_request("What about Hawaii?", "volcanoes", True)
    assert not is_new_topic_request("And how about underwater ones?", "volcanoes", True)


def test_mentioning_current_topic_continues():
    assert not is_new_topic_request("Are there VOLCANOES on the moon", "Volcanoes", True)
    # plain substring match, even when the meaning differs
    assert not is_new_topic_request("Mars bars the candy", "Mars", True)


def test_unrelated_input_is_new_topic():
    assert is_new_topic_request("Dinosaurs", "volcanoes", True)


def test_extract_topic():
    assert extract_topic("Tell me about volcanoes!") == "volcanoes"
    assert extract_topic("What is photosynthesis?") == "photosynthesis"
    assert extract_topic("  sharks  ") == "sharks"
    assert extract_topic("Explain?") == "Explain?"


def test_new_topic_produces_table_of_contents(make_session, fake_generator):
    session = make_session(fake_generator)

    async def run():
        result = await session.submit_message("Tell me about volcanoes")
        await session.topics.wait_for_background()
        return result

    result = asyncio.run(run())

    assert result.status == "completed"
    messages = session.messages.all()
    assert isinstance(messages[0], PlainMessage) and messages[0].is_user
    toc = messages[-1]
    assert isinstance(toc, TocMessage)
    assert toc.id == result.message_id
    assert toc.table_of_contents == VOLCANO_SECTIONS
    assert session.state.selected_topic == "volcanoes"
    assert session.state.topic_sections_generated
    assert session.state.related_topics == ["Earthquakes", "Plate tectonics", "Geysers", "Mountains", "Hot springs"]
    assert [n.level for n in session.notices] == ["info"]


def test_state_is_reset_before_generation(make_session, fake_generator):
    session = make_session(fake_generator)
    seen = []

    def capture(prompt):
        if "table of contents" in prompt:
            seen.append((session.state.selected_topic, list(session.state.completed_sections),
                         session.state.learning_progress, session.state.topic_sections_generated))

    async def run():
        await session.submit_message("volcanoes")
        session.state.completed_sections = ["How volcanoes form"]
        session.state.learning_progress = 20
        fake_generator.before_reply = capture
        await session.submit_message("dinosaurs")

    asyncio.run(run())
    assert seen == [("dinosaurs", [], 0, False)]


def test_repeated_topic_reuses_table_of_contents(make_session, fake_generator):
    session = make_session(fake_generator)

    async def run():
        await session.submit_message("volcanoes")
        await session.submit_message("dinosaurs")
        return await session.submit_message("Volcanoes")

    result = asyncio.run(run())
    assert result.status == "completed"
    assert len(fake_generator.prompts_containing('topic "volcanoes"')) == 1
    assert session.messages.latest_toc().table_of_contents == VOLCANO_SECTIONS


def test_generation_error_appends_error_message_and_allows_retry(make_session):
    generator = FakeGenerator(replies={"table of contents": GenerationError("model unavailable")})
    session = make_session(generator)

    result = asyncio.run(session.submit_message("volcanoes"))

    assert result.status == "error"
    assert isinstance(session.messages.all()[-1], ErrorMessage)
    assert not session.state.topic_sections_generated
    assert session.notices[-1].level == "error"

    generator.replies = {"table of contents": TOC_REPLY, "related topics": RELATED_REPLY}
    retry = asyncio.run(session.submit_message("volcanoes"))
    assert retry.status == "completed"
    assert session.state.table_of_contents == VOLCANO_SECTIONS


def test_unparseable_reply_uses_template_sections(make_session):
    generator = FakeGenerator(replies={"table of contents": "", "related topics": RELATED_REPLY})
    session = make_session(generator)

    asyncio.run(session.submit_message("ocean animals"))
    assert session.state.topic_sections_generated
    assert len(session.state.table_of_contents) == 5


def test_stale_table_of_contents_is_dropped(make_session, fake_generator):
    session = make_session(fake_generator)

    def switch_topic(prompt):
        if "table of contents" in prompt:
            session.state.reset("something else")

    fake_generator.before_reply = switch_topic
    result = asyncio.run(session.submit_message("volcanoes"))

    assert result.status == "ignored"
    assert session.messages.latest_toc() is None


def test_continuation_adds_answer_with_blocks(make_session, fake_generator):
    session = make_session(fake_generator)

    async def run():
        await session.submit_message("volcanoes")
        return await session.submit_message("tell me more")

    result = asyncio.run(run())
    answer = session.messages.find(result.message_id)
    assert answer.text == "Here is a fun answer!"
    assert len(answer.blocks) == 5
    assert session.stats.points == 10


def test_finished_topic_rolls_over(make_session, fake_generator):
    session = make_session(fake_generator)

    async def run():
        await session.submit_message("volcanoes")
        session.state.learning_complete = True
        await session.submit_message("tell me more about volcanoes")

    asyncio.run(run())
    assert session.stats.previous_topics == ["volcanoes"]
    # treated as a fresh topic after the reset
    assert session.state.selected_topic == "tell me more about volcanoes"
    assert session.state.topic_sections_generated
