"""
Extract Step

Extracts keywords, entities, topics or sentiment from text.
"""

from .main import ExtractStep
from .models import ExtractConfig

__all__ = ["ExtractStep", "ExtractConfig"]
