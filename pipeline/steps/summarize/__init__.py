"""
Summarize Step

Condenses text to a target length and layout.
"""

from .main import SummarizeStep
from .models import SummarizeConfig

__all__ = ["SummarizeStep", "SummarizeConfig"]
