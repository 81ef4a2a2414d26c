from __future__ import annotations

TRANSLATION_INSTRUCTION = (
    "Provide ONLY the translation, no introductory or concluding remarks."
)

CRITIQUE_INSTRUCTION = (
    "Evaluate the quality of this translation on a scale from 1 to 10. "
    "Analyze grammar, tone, and accuracy. "
    "Point out any errors or improvements. "
    "Provide a constructive critique."
)


def build_translation_prompt(source_text: str, target_language: str) -> str:
    """Build the stage 1 instruction for the translation model.

    The source text is embedded verbatim; nothing is escaped or stripped.
    """
    return (
        "Translate the following text into " + target_language + ". "
        + TRANSLATION_INSTRUCTION
        + "\n\nText to translate:\n"
        + source_text
    )


def build_critique_prompt(original_text: str, translated_text: str) -> str:
    """Build the stage 2 instruction asking the critique model to grade a translation."""
    return (
        'Original Text: "' + original_text + '"\n\n'
        'Translated Text: "' + translated_text + '"\n\n'
        + CRITIQUE_INSTRUCTION
    )
