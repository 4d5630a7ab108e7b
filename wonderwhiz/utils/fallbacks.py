from typing import List, Tuple
from wonderwhiz.models.messages import Quiz

# Keyword-driven section templates used when a table of contents cannot be parsed
SECTION_TEMPLATES: List[Tuple[Tuple[str, ...], List[str]]] = [
    (("space", "planet", "star", "universe"), [
        "What is in our solar system?",
        "How planets form and evolve",
        "The different types of planets",
        "Amazing facts about space",
        "Space exploration history"
    ]),
    (("animal", "wildlife", "nature", "ocean"), [
        "Where they live and what they eat",
        "Amazing adaptations",
        "Interesting facts and behaviors",
        "Babies and family life",
        "Conservation and protection"
    ]),
    (("history", "ancient", "civilization", "war"), [
        "Background and timeline",
        "Important people and events",
        "Daily life during this period",
        "Inventions and discoveries",
        "Legacy and impact today"
    ]),
]

GENERIC_SECTIONS = [
    "Key ideas about {topic}",
    "How {topic} works",
    "Interesting facts and discoveries",
    "Real-world applications",
    "Fun activities to try"
]

# Acknowledged placeholder, not content-aware
FALLBACK_RELATED_TOPICS = [
    "Space exploration",
    "Astronomy facts",
    "Planets and moons",
    "Solar system formation",
    "Black holes"
]

DEFAULT_SUGGESTED_PROMPTS = [
    "Tell me about dinosaurs",
    "How do planets form?",
    "What are robots?",
    "Why is the sky blue?",
    "How do animals communicate?"
]

PLACEHOLDER_QUIZ = Quiz(
    question="What makes learning fun?",
    options=["Curiosity", "Challenges", "Discovery", "All of the above"],
    correct_answer=3,
    fun_fact="Your brain forms new connections every time you learn something new!"
)

IMAGE_BASE_URL = "https://images.unsplash.com"

# Checked in order; the first rule whose keywords all match wins
STOCK_IMAGES: List[Tuple[Tuple[str, ...], Tuple[str, ...], str]] = [
    (("dinosaur",), ("carnivore", "meat-eater"), "photo-1525877442103-5ddb2089b2bb"),
    (("dinosaur",), (), "photo-1519880856348-763a8b40aa79"),
    ((), ("carnivore", "meat-eater"), "photo-1546182990-dffeafbe841d"),
    ((), ("planet", "space", "solar system"), "photo-1614732414444-096e5f1122d5"),
    ((), ("robot", "technology"), "photo-1485827404703-89b55fcc595e"),
    ((), ("animal", "wildlife"), "photo-1474511320723-9a56873867b5"),
    ((), ("ocean", "sea"), "photo-1518399681705-1c1a55e5e883"),
    ((), ("food", "cooking"), "photo-1565557623262-b51c2513a641"),
    ((), ("history", "ancient"), "photo-1564399263809-d2e8673cb2a4"),
    ((), ("science", "experiment"), "photo-1532094349884-543bc11b234d"),
    ((), ("nature", "landscape"), "photo-1470071459604-3b5ec3a7fe05"),
]
DEFAULT_STOCK_IMAGE = "photo-1501854140801-50d01698950b"

def fallback_sections(topic: str) -> List[str]:
    """Deterministic table of contents picked by keywords in the topic"""
    lower_topic = topic.lower()
    for keywords, sections in SECTION_TEMPLATES:
        if any(keyword in lower_topic for keyword in keywords):
            return list(sections)
    return [section.format(topic=topic) for section in GENERIC_SECTIONS]

def fallback_related_topics() -> List[str]:
    return list(FALLBACK_RELATED_TOPICS)

def fallback_image_url(prompt: str) -> str:
    """Stock photo URL matched on keywords in the image prompt"""
    lower_prompt = prompt.lower()
    photo_id = DEFAULT_STOCK_IMAGE
    for required, any_of, candidate in STOCK_IMAGES:
        if not all(word in lower_prompt for word in required):
            continue
        if any_of and not any(word in lower_prompt for word in any_of):
            continue
        photo_id = candidate
        break
    return f"{IMAGE_BASE_URL}/{photo_id}?w=800&q=80"
