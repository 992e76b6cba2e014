"""
Repository layer for data access operations.
"""

from .base import BaseRepository
from .agent import AgentRepository
from .property import PropertyRepository
from .query_builder import PropertyFilterBuilder, PropertyFilterQuery

__all__ = [
    "BaseRepository",
    "AgentRepository",
    "PropertyRepository",
    "PropertyFilterBuilder",
    "PropertyFilterQuery",
]
