"""
Prompts for the Extract step.

Each extract type has its own output contract so downstream steps and
readers get a predictable shape.
"""

from .models import ExtractConfig


SYSTEM_PROMPT = """You are an information extraction engine.

RULES:
- Extract only what is present in the text. Never invent items.
- Follow the OUTPUT FORMAT exactly.
- Return ONLY the extraction, with no preamble or explanation."""


EXTRACT_INSTRUCTIONS = {
    "keywords": (
        "Extract the 5-10 most important keywords or key phrases.",
        "A single line: comma-separated keywords, most important first. Example: AI, machine learning, automation",
    ),
    "entities": (
        "Extract the named entities (people, organizations, places, products, technologies).",
        "One entity per line as \"- Name (type)\".",
    ),
    "topics": (
        "Identify the main topics the text discusses (3-6 topics).",
        "One topic per line as \"- Topic\".",
    ),
    "sentiment": (
        "Classify the overall sentiment of the text as Positive, Negative, Neutral or Mixed.",
        "A single line: \"<Label> (<confidence between 0 and 1 with two decimals>) - <one short sentence of justification>\". Example: Positive (0.85) - Optimistic tone about future potential",
    ),
}


def create_user_prompt(config: ExtractConfig, input_text: str) -> str:
    """
    Generate the extraction prompt.

    Args:
        config: Validated extract config
        input_text: Text to extract from

    Returns:
        Formatted user prompt
    """
    task, output_format = EXTRACT_INSTRUCTIONS[config.extract_type]
    return f"""{task}

OUTPUT FORMAT:
{output_format}

TEXT:
{input_text}"""
