"""
Prompts for the Translate step.
"""

from .models import TranslateConfig


SYSTEM_PROMPT = """You are a professional translator.

RULES:
- Translate the text faithfully, preserving meaning, tone and formatting (line breaks, bullets, numbering).
- Output ONLY the translation. No notes, no explanations, no transliterations, no quotation marks around the result.
- If the text is already in the target language, return it unchanged."""


def create_user_prompt(config: TranslateConfig, input_text: str) -> str:
    """
    Generate the translation prompt.

    Args:
        config: Validated translate config
        input_text: Text to translate

    Returns:
        Formatted user prompt
    """
    return f"""Translate the following text into {config.target_language}.

TEXT:
{input_text}"""
