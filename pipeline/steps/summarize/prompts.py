"""
Prompts for the Summarize step.
"""

from .models import SummarizeConfig


SYSTEM_PROMPT = """You are an expert editor who writes faithful, condensed summaries.

RULES:
- Keep only the most important ideas of the source text.
- Never add facts, opinions or commentary that are not in the source.
- Write in the same language as the source text.
- Return ONLY the summary, with no preamble such as "Here is a summary"."""


FORMAT_INSTRUCTIONS = {
    "paragraph": "Write the summary as a single flowing paragraph.",
    "bullets": "Write the summary as a bulleted list, one sentence per bullet, each line starting with \"• \".",
    "outline": "Write the summary as a numbered outline, one point per line (\"1. \", \"2. \", ...).",
}


def create_user_prompt(config: SummarizeConfig, input_text: str) -> str:
    """
    Generate the summarization prompt.

    Args:
        config: Validated summarize config
        input_text: Text to summarize

    Returns:
        Formatted user prompt
    """
    low, high = config.sentence_range
    return f"""Summarize the following text in {low}-{high} sentences.

{FORMAT_INSTRUCTIONS[config.format]}

TEXT:
{input_text}"""
