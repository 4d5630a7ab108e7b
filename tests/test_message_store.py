# tests/test_message_store.py
import pytest
from pydantic import TypeAdapter, ValidationError
from wonderwhiz.models.messages import Message, PlainMessage, TocMessage
from wonderwhiz.services.message_store import MessageStore


def test_ids_are_unique_and_survive_clear():
    store = MessageStore()
    first = store.next_id("ai")
    store.clear()
    second = store.next_id("ai")
    assert first != second
    assert first.startswith("ai-")


def test_append_find_and_latest_toc():
    store = MessageStore()
    store.append(TocMessage(id="toc-1", text="plan", topic="bees", table_of_contents=["A", "B", "C"]))
    store.append(PlainMessage(id="ai-1", text="hello"))
    store.append(TocMessage(id="toc-2", text="plan", topic="ants", table_of_contents=["D", "E", "F"]))

    assert store.find("ai-1").text == "hello"
    assert store.find("missing") is None
    assert store.latest_toc().id == "toc-2"
    assert [m.id for m in store] == ["toc-1", "ai-1", "toc-2"]


def test_messages_are_frozen():
    message = PlainMessage(id="ai-1", text="hello")
    with pytest.raises(ValidationError):
        message.text = "changed"


def test_message_union_picks_kind():
    adapter = TypeAdapter(Message)
    message = adapter.validate_python({
        "kind": "quiz", "id": "q-1", "text": "Quiz time",
        "quiz": {"question": "Q?", "options": ["a", "b", "c", "d"], "correct_answer": 1}
    })
    assert message.quiz.correct_answer == 1
    assert message.block_type.value == "quiz"
