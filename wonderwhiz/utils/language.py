from typing import Dict, Optional

STRINGS: Dict[str, Dict[str, str]] = {
    "en": {
        "welcome_message": "Hello! What would you like to learn about today?",
        "error_processing": "I encountered a problem processing your request. Let's try something else!",
        "try_again": "Sorry, there was an error. Please try again.",
        "already_processing": "Hold on, I'm still working on your last question!",
        "toc_error": "I had trouble creating a learning plan for that topic. Can you try another one?",
        "toc_intro": "Let's explore \"{topic}\"! Here's what we'll cover:",
        "pick_section": "Pick a section to start learning!",
        "completed_section": "Section completed!",
        "learning_complete": "Amazing! You finished every section of {topic}!",
        "quiz_fallback": "There was an issue creating your quiz. Using a simple one instead!",
        "quiz_intro": "Let's test your knowledge with a quick quiz!",
        "image_intro": "Here's a visual representation I created for you:",
        "related_topics": "Related Topics",
        "suggested_prompts": "Suggested Topics",
    },
    "es": {
        "welcome_message": "¡Hola! ¿Sobre qué te gustaría aprender hoy?",
        "error_processing": "Encontré un problema al procesar tu solicitud. ¡Intentemos otra cosa!",
        "try_again": "Lo siento, hubo un error. Por favor, inténtalo de nuevo.",
        "completed_section": "¡Sección completada!",
        "related_topics": "Temas relacionados",
        "suggested_prompts": "Temas sugeridos",
    },
    "fr": {
        "welcome_message": "Bonjour! Qu'aimeriez-vous apprendre aujourd'hui?",
        "error_processing": "J'ai rencontré un problème lors du traitement de votre demande. Essayons autre chose!",
        "try_again": "Désolé, une erreur s'est produite. Veuillez réessayer.",
        "completed_section": "Section terminée!",
        "related_topics": "Sujets connexes",
        "suggested_prompts": "Sujets suggérés",
    },
}

def get_string(key: str, language: str = "en", **kwargs) -> str:
    """Localized string, falling back to English and then to the key itself"""
    lang_strings = STRINGS.get(language, STRINGS["en"])
    template = lang_strings.get(key) or STRINGS["en"].get(key) or key
    return template.format(**kwargs) if kwargs else template

def get_welcome_message(language: str = "en", age_range: str = "8-10",
                        username: Optional[str] = None) -> str:
    if language == "en":
        if age_range == "5-7":
            message = "Hi there! What fun thing should we learn about today?"
        elif age_range == "11-13":
            message = "Welcome! What interesting topic would you like to explore today?"
        else:
            message = get_string("welcome_message", language)
    else:
        message = get_string("welcome_message", language)

    if username:
        return f"Hi {username}! I'm your WonderWhiz assistant. {message}"
    return message

def get_error_message(language: str = "en") -> str:
    return get_string("error_processing", language)
