"""
Translate Step

Translates text into a configured target language.
"""

from .main import TranslateStep
from .models import TranslateConfig

__all__ = ["TranslateStep", "TranslateConfig"]
