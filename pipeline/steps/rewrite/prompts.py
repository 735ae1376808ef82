"""
Prompts for the Rewrite step.

Tone and style are described separately so each axis can change
without affecting the other.
"""

from .models import RewriteConfig


SYSTEM_PROMPT = """You are a skilled copy editor who rewrites text for a requested tone and style.

RULES:
- Preserve the facts and meaning of the original text.
- Apply the requested TONE to word choice and register.
- Apply the requested STYLE to length, structure and framing.
- Write in the same language as the original text.
- Return ONLY the rewritten text, with no preamble or commentary."""


TONE_INSTRUCTIONS = {
    "casual": "relaxed, everyday language; contractions are fine",
    "formal": "formal register, no contractions or slang",
    "professional": "clear, confident business language",
    "friendly": "warm and approachable, speaking directly to the reader",
    "academic": "precise, objective academic register with careful hedging",
}

STYLE_INSTRUCTIONS = {
    "concise": "make it noticeably shorter; remove redundancy and keep only essential points",
    "detailed": "expand it with explanation and supporting detail drawn from the original",
    "persuasive": "frame it to convince the reader, leading with benefits and ending with a clear takeaway",
    "informative": "organize it to inform clearly and neutrally, at roughly the original length",
}


def create_user_prompt(config: RewriteConfig, input_text: str) -> str:
    """
    Generate the rewrite prompt.

    Args:
        config: Validated rewrite config
        input_text: Text to rewrite

    Returns:
        Formatted user prompt
    """
    return f"""Rewrite the following text.

TONE ({config.tone}): {TONE_INSTRUCTIONS[config.tone]}
STYLE ({config.style}): {STYLE_INSTRUCTIONS[config.style]}

TEXT:
{input_text}"""
