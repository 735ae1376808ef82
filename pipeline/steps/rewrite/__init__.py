"""
Rewrite Step

Rewrites text for a requested tone and style.
"""

from .main import RewriteStep
from .models import RewriteConfig

__all__ = ["RewriteStep", "RewriteConfig"]
