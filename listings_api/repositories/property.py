"""
Property repository for managing property listings and the filter query.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from listings_api.repositories.base import BaseRepository
from listings_api.repositories.query_builder import PropertyFilterQuery
from listings_api.models.property import Property
from typing import List
import logging

logger = logging.getLogger(__name__)


class PropertyRepository(BaseRepository[Property]):
    """Repository for property listings."""

    def __init__(self, db: AsyncSession):
        super().__init__(Property, db)

    async def list_properties(self) -> List[Property]:
        """
        Get all properties, newest first.

        Returns:
            List of properties ordered by creation time descending
        """
        try:
            query = select(Property).order_by(desc(Property.created_at), desc(Property.id))
            result = await self.db.execute(query)
            properties = result.scalars().all()

            logger.debug(f"Retrieved {len(properties)} properties")
            return list(properties)
        except Exception as e:
            logger.error(f"Failed to list properties: {e}")
            raise

    async def filter_properties(self, filter_query: PropertyFilterQuery) -> List[Property]:
        """
        Execute a built filter query.

        Args:
            filter_query: Query produced by PropertyFilterBuilder

        Returns:
            Matching properties, newest first
        """
        try:
            result = await self.db.execute(filter_query.statement)
            properties = result.scalars().all()

            logger.debug(f"Property filter returned {len(properties)} results")
            return list(properties)
        except Exception as e:
            logger.error(f"Failed to filter properties: {e}")
            raise

    async def get_featured_properties(self, limit: int = 8) -> List[Property]:
        """
        Get featured properties, newest first.

        Args:
            limit: Maximum number of properties to return
        """
        try:
            query = (
                select(Property)
                .where(Property.is_featured.is_(True))
                .order_by(desc(Property.created_at), desc(Property.id))
                .limit(limit)
            )

            result = await self.db.execute(query)
            properties = result.scalars().all()

            logger.debug(f"Retrieved {len(properties)} featured properties")
            return list(properties)
        except Exception as e:
            logger.error(f"Failed to get featured properties: {e}")
            raise
