"""
Agent repository.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from listings_api.repositories.base import BaseRepository
from listings_api.models.agent import Agent
from typing import List


class AgentRepository(BaseRepository[Agent]):
    """Repository for agent records."""

    def __init__(self, db: AsyncSession):
        super().__init__(Agent, db)

    async def list_agents(self) -> List[Agent]:
        """Get all agents in insertion order."""
        return await self.get_multi(order_by="id")
