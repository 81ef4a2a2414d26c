"""
Model identifiers and selectable target languages.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ModelIdentifiers:
    """The two backend models of the translate -> critique pipeline."""
    TRANSLATE: str
    CRITIQUE: str

    def as_dict(self) -> Dict[str, str]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


MODELS = ModelIdentifiers(
    TRANSLATE="Qwen/Qwen3-VL-30B-A3B-Instruct",
    CRITIQUE="claude-sonnet-4-5-20250929",
)


@dataclass(frozen=True)
class LanguageOption:
    """A selectable target language. Only ``value`` reaches the prompt."""
    value: str
    label: str


LANGUAGES: Tuple[LanguageOption, ...] = (
    LanguageOption("English", "English"),
    LanguageOption("French", "French"),
    LanguageOption("German", "German"),
    LanguageOption("Spanish", "Spanish"),
    LanguageOption("Russian", "Russian"),
    LanguageOption("Chinese", "Chinese"),
    LanguageOption("Japanese", "Japanese"),
)

DEFAULT_TARGET_LANGUAGE = "English"


def get_language(value: str) -> Optional[LanguageOption]:
    """Get language option by value."""
    for lang in LANGUAGES:
        if lang.value == value:
            return lang
    return None


def language_values() -> List[str]:
    return [lang.value for lang in LANGUAGES]
