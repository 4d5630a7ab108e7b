from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import List
from pathlib import Path

# Get the directory where the project root is located
BASE_DIR = Path(__file__).resolve().parent.parent

class Settings(BaseSettings):
    model_config = ConfigDict(
        env_file=str(BASE_DIR / ".env"),
        env_file_encoding='utf-8',
        extra='ignore'
    )

    # OpenAI-compatible endpoint (OpenAI directly, or Groq via base_url)
    openai_api_key: str = ""
    openai_base_url: str = ""
    openai_model: str = "gpt-4o-mini"
    openai_image_model: str = "dall-e-3"
    temperature: float = 0.7
    max_tokens: int = 600
    quiz_max_tokens: int = 400

    # Generation calls never hang the submission guard forever
    generation_timeout_seconds: float = 30.0

    submission_cooldown_ms: int = 500
    block_cooldown_ms: int = 300
    default_total_sections: int = 5

    # idle chat sessions are dropped after this long
    session_idle_timeout_seconds: float = 3600

    default_age_range: str = "8-10"
    default_avatar: str = "explorer"
    default_language: str = "en"

    log_level: str = "INFO"
    cors_origins: List[str] = ["*"]

settings = Settings()
