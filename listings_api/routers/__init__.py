"""
API route handlers for the listings API.
"""

from .properties import router as properties_router
from .agents import router as agents_router

__all__ = ["properties_router", "agents_router"]
