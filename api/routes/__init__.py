"""
API route handlers.
"""

from api.routes.ai import router as ai_router
from api.routes.pipelines import router as pipeline_router
from api.routes.users import router as user_router

__all__ = ["ai_router", "pipeline_router", "user_router"]
