# tests/test_topic_parser.py
from wonderwhiz.services.topic_parser import (
    extract_sections, parse_table_of_contents, process_topics_from_response,
    extract_numbered, extract_bulleted, extract_bold, extract_medium_lines,
    filter_banned, strip_intro_sentence, SECTION_EXTRACTORS, TOPIC_EXTRACTORS,
)
from wonderwhiz.utils.fallbacks import fallback_sections


def test_numbered_list():
    assert extract_sections("1. Apples\n2. Oranges\n3. Bananas") == ["Apples", "Oranges", "Bananas"]


def test_banned_phrase_is_filtered_and_four_remain():
    text = ("Let's explore space!\n1. What is a star?\n2. Welcome to astronomy\n"
            "3. How galaxies form\n4. Black holes\n5. The Big Bang")
    assert extract_sections(text) == ["What is a star?", "How galaxies form", "Black holes", "The Big Bang"]


def test_numbered_with_bold_markers():
    text = "**1. Rocky planets**\n2. **Gas giants**\n3) Dwarf planets"
    assert extract_numbered(text) == ["Rocky planets", "Gas giants", "Dwarf planets"]


def test_descriptions_after_colon_are_dropped():
    text = "1. Shield volcanoes: wide and gentle\n2. Cinder cones: small and steep\n3. Stratovolcanoes: tall"
    assert extract_sections(text) == ["Shield volcanoes", "Cinder cones", "Stratovolcanoes"]


def test_bulleted_list():
    text = "• Roots\n* Stems\n- Leaves"
    assert extract_bulleted(text) == ["Roots", "Stems", "Leaves"]
    assert extract_sections(text) == ["Roots", "Stems", "Leaves"]


def test_bold_line_is_not_a_bullet():
    assert extract_bulleted("**Roots**\n**Stems**") == []


def test_bold_headers():
    text = "First we see **Tiny seeds**, then **Sprouting**, and finally **Blooming flowers**."
    assert extract_bold(text) == ["Tiny seeds", "Sprouting", "Blooming flowers"]
    assert extract_sections(text) == ["Tiny seeds", "Sprouting", "Blooming flowers"]


def test_medium_lines_fallback_is_capped():
    lines = [f"Interesting idea number {i}" for i in range(8)]
    assert len(extract_medium_lines("\n".join(lines))) == 5


def test_medium_lines_skip_short_and_long():
    text = "Short\n" + "x" * 150 + "\nA perfectly sized line"
    assert extract_medium_lines(text) == ["A perfectly sized line"]


def test_numbered_takes_priority_over_bullets():
    text = "- Bullet one\n- Bullet two\n- Bullet three\n1. Number one\n2. Number two\n3. Number three"
    assert extract_sections(text) == ["Number one", "Number two", "Number three"]


def test_too_few_after_filter_returns_empty():
    text = "1. Introduction\n2. Welcome aboard\n3. Rockets\n4. Summary"
    assert extract_sections(text) == []


def test_result_capped_at_five():
    text = "\n".join(f"{i}. Section {i}" for i in range(1, 9))
    assert extract_sections(text) == [f"Section {i}" for i in range(1, 6)]


def test_empty_text_has_no_sections():
    assert extract_sections("") == []
    assert extract_sections("   \n  ") == []


def test_parse_table_of_contents_uses_template_when_unparseable():
    assert parse_table_of_contents("", "Ocean animals") == fallback_sections("Ocean animals")


def test_parse_table_of_contents_prefers_parsed_sections():
    assert parse_table_of_contents("1. A one\n2. B two\n3. C three", "space") == ["A one", "B two", "C three"]


def test_extractors_are_named_in_priority_order():
    assert [e.name for e in SECTION_EXTRACTORS] == ["numbered", "bulleted", "bold", "medium_lines"]
    assert [e.name for e in TOPIC_EXTRACTORS] == ["numbered", "bulleted", "comma", "semicolon", "lines"]


def test_filter_banned():
    assert filter_banned(["Let's Explore Mars", "Craters", "Table of Contents"]) == ["Craters"]


def test_topics_empty_string():
    assert process_topics_from_response("") == []


def test_topics_single_sentence():
    sentence = "Dinosaurs were giant reptiles that lived millions of years ago"
    assert process_topics_from_response(sentence) == [sentence]


def test_topics_comma_separated_with_intro():
    response = "Here are some topics you might enjoy: Volcanoes, Rainforests, Robots."
    assert process_topics_from_response(response) == ["Volcanoes", "Rainforests", "Robots"]


def test_topics_semicolon_separated():
    assert process_topics_from_response("Bees; Ants; Butterflies") == ["Bees", "Ants", "Butterflies"]


def test_topics_numbered_before_commas():
    response = "1. Sharks, rays and skates\n2. Whales\n3. Coral reefs"
    assert process_topics_from_response(response) == ["Sharks, rays and skates", "Whales", "Coral reefs"]


def test_topics_banned_phrase_filtered():
    assert process_topics_from_response("Introduction to frogs, Tadpoles, Lily pads") == ["Tadpoles", "Lily pads"]


def test_strip_intro_sentence():
    assert strip_intro_sentence("Sure! Here are 5 topics: A, B") == "A, B"
    assert strip_intro_sentence("Plain text") == "Plain text"
