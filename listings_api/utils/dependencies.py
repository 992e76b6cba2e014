"""
FastAPI dependency providers for database-bound services and image storage.
Tests override the image providers to point storage at a temporary directory.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from listings_api.database import get_db
from listings_api.services.agent import AgentService
from listings_api.services.image import (
    ImageService,
    create_agent_image_service,
    create_property_image_service
)
from listings_api.services.property import PropertyService


def get_property_image_service() -> ImageService:
    """Image service bound to the property upload directory."""
    return create_property_image_service()


def get_agent_image_service() -> ImageService:
    """Image service bound to the agent upload directory."""
    return create_agent_image_service()


async def get_property_service(
    db: AsyncSession = Depends(get_db),
    images: ImageService = Depends(get_property_image_service)
) -> PropertyService:
    """
    Get property service instance.

    Args:
        db: Database session
        images: Property image service

    Returns:
        PropertyService instance
    """
    return PropertyService(db, images)


async def get_agent_service(
    db: AsyncSession = Depends(get_db),
    images: ImageService = Depends(get_agent_image_service)
) -> AgentService:
    """Get agent service instance."""
    return AgentService(db, images)


def get_base_url(request: Request) -> str:
    """Scheme and host of the current request, used to build absolute image URLs."""
    return f"{request.url.scheme}://{request.url.netloc}"
