"""
LLM module - API client, model identifiers and prompt building for translation and critique.
"""

from .client import LLMClient, invoke
from .models import DEFAULT_TARGET_LANGUAGE, LANGUAGES, MODELS, LanguageOption
from .prompts import build_critique_prompt, build_translation_prompt

__all__ = [
    "LLMClient",
    "invoke",
    "MODELS",
    "LANGUAGES",
    "DEFAULT_TARGET_LANGUAGE",
    "LanguageOption",
    "build_translation_prompt",
    "build_critique_prompt",
]
