"""
Database models for the listings API.
Includes Agent and Property models.
"""

from listings_api.models.agent import Agent
from listings_api.models.property import Property

# Export all models for easy importing
__all__ = [
    "Agent",
    "Property",
]
