"""
Turns free-form generated text into ordered lists of topics or section titles.

Each heuristic is a named extractor; the parsers walk their extractor lists
in priority order and stop at the first one that produces enough candidates.
"""
from typing import Callable, List, NamedTuple
import re
import logging

from wonderwhiz.utils.fallbacks import fallback_sections

logger = logging.getLogger(__name__)

BANNED_PHRASES = [
    "welcome",
    "introduction",
    "get started",
    "conclusion",
    "summary",
    "let's explore",
    "what we'll cover",
    "table of content",
]

MAX_SECTIONS = 5
MIN_SECTIONS = 3

NUMBERED_LINE = re.compile(r"^\s*(?:\*\*)?\s*\d+\s*[.)]\s*(?:\*\*)?\s*(.+?)\s*$")
BULLET_LINE = re.compile(r"^\s*(?:•|-|\*(?!\*))\s*(.+?)\s*$")
BOLD_SPAN = re.compile(r"\*\*(.+?)\*\*")
INTRO_SENTENCE = re.compile(
    r"^\s*(?:sure[!,.]?\s*)?(?:here\s+(?:are|is)|these\s+are|below\s+are|okay[,!]?\s*here\s+are)[^\n:]*:\s*",
    re.IGNORECASE
)

class Extractor(NamedTuple):
    name: str
    extract: Callable[[str], List[str]]

def _clean(candidate: str) -> str:
    candidate = candidate.replace("**", "").strip()
    candidate = candidate.strip("\"'“”")
    return candidate.strip()

def _strip_description(candidate: str) -> str:
    # "Volcano types: shield, cone..." -> "Volcano types"
    colon_index = candidate.find(":")
    if colon_index > 0:
        return candidate[:colon_index].strip()
    return candidate

def _lines(text: str) -> List[str]:
    return [line.strip() for line in text.split("\n") if line.strip()]

def extract_numbered(text: str) -> List[str]:
    candidates = []
    for line in _lines(text):
        match = NUMBERED_LINE.match(line)
        if match:
            cleaned = _clean(match.group(1))
            if cleaned:
                candidates.append(cleaned)
    return candidates

def extract_bulleted(text: str) -> List[str]:
    candidates = []
    for line in _lines(text):
        match = BULLET_LINE.match(line)
        if match:
            cleaned = _clean(match.group(1))
            if cleaned:
                candidates.append(cleaned)
    return candidates

def extract_bold(text: str) -> List[str]:
    return [_clean(span) for span in BOLD_SPAN.findall(text) if _clean(span)]

def extract_medium_lines(text: str) -> List[str]:
    candidates = [_clean(line) for line in _lines(text)]
    return [line for line in candidates if 10 <= len(line) <= 100][:MAX_SECTIONS]

def _split_on(separator: str) -> Callable[[str], List[str]]:
    def extract(text: str) -> List[str]:
        if separator not in text:
            return []
        parts = [_clean(part).rstrip(".") for part in text.split(separator)]
        return [part for part in parts if part]
    return extract

def extract_lines(text: str) -> List[str]:
    return [_clean(line) for line in _lines(text) if _clean(line)]

SECTION_EXTRACTORS: List[Extractor] = [
    Extractor("numbered", extract_numbered),
    Extractor("bulleted", extract_bulleted),
    Extractor("bold", extract_bold),
    Extractor("medium_lines", extract_medium_lines),
]

TOPIC_EXTRACTORS: List[Extractor] = [
    Extractor("numbered", extract_numbered),
    Extractor("bulleted", extract_bulleted),
    Extractor("comma", _split_on(",")),
    Extractor("semicolon", _split_on(";")),
    Extractor("lines", extract_lines),
]

def is_banned(candidate: str) -> bool:
    lowered = candidate.lower()
    return any(phrase in lowered for phrase in BANNED_PHRASES)

def filter_banned(candidates: List[str]) -> List[str]:
    return [candidate for candidate in candidates if not is_banned(candidate)]

def extract_sections(text: str) -> List[str]:
    """
    Section titles from a generated table of contents.

    The first extractor yielding at least three candidates wins. Banned
    generic titles are then dropped; if fewer than three survive the whole
    result is discarded and an empty list is returned.
    """
    if not text or not text.strip():
        return []

    for extractor in SECTION_EXTRACTORS:
        candidates = extractor.extract(text)
        if len(candidates) < MIN_SECTIONS:
            continue

        sections = filter_banned([_strip_description(c) for c in candidates])
        logger.info(f"[Parser] '{extractor.name}' matched {len(candidates)} candidates, {len(sections)} kept")
        if len(sections) < MIN_SECTIONS:
            return []
        return sections[:MAX_SECTIONS]

    return []

def parse_table_of_contents(text: str, topic: str) -> List[str]:
    """Sections parsed from the text, or the keyword template for the topic"""
    sections = extract_sections(text)
    if sections:
        return sections

    logger.info(f"[Parser] No usable sections, using template for '{topic}'")
    return fallback_sections(topic)

def strip_intro_sentence(text: str) -> str:
    return INTRO_SENTENCE.sub("", text.strip(), count=1)

def process_topics_from_response(response: str) -> List[str]:
    """Topic suggestions (related or personalized) from a generated reply"""
    if not response or not isinstance(response, str) or not response.strip():
        return []

    body = strip_intro_sentence(response)
    for extractor in TOPIC_EXTRACTORS:
        topics = extractor.extract(body)
        if topics:
            logger.info(f"[Parser] Topics extracted with '{extractor.name}': {topics}")
            return filter_banned(topics)

    return []
