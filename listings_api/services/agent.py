"""
Agent service for managing agents and their single profile image.
"""

from typing import List, Optional
from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from listings_api.repositories.agent import AgentRepository
from listings_api.models.agent import Agent
from listings_api.schemas.agent import AgentFields
from listings_api.services.image import ImageService
from listings_api.utils.exceptions import AgentNotFoundError, MissingFieldsError
import logging

logger = logging.getLogger(__name__)


class AgentService:
    """Agent CRUD with single-image replacement."""

    def __init__(self, db_session: AsyncSession, images: ImageService):
        self.db = db_session
        self.images = images
        self.agent_repo = AgentRepository(db_session)

    async def create_agent(self, agent_data: AgentFields, image: Optional[UploadFile] = None) -> Agent:
        """
        Create an agent.

        Raises:
            MissingFieldsError: If name or mobile_number is missing
        """
        missing = [name for name in ("name", "mobile_number") if not getattr(agent_data, name)]
        if missing:
            raise MissingFieldsError(missing)

        image_path = await self.images.attach_single(image)

        try:
            agent = await self.agent_repo.create({
                "name": agent_data.name,
                "mobile_number": agent_data.mobile_number,
                "image": image_path,
            })
        except Exception:
            self.images.discard([image_path] if image_path else [])
            raise

        logger.info(f"Created agent {agent.id} ({agent.name})")
        return agent

    async def list_agents(self) -> List[Agent]:
        return await self.agent_repo.list_agents()

    async def get_agent(self, agent_id: int) -> Agent:
        """
        Raises:
            AgentNotFoundError: If agent doesn't exist
        """
        agent = await self.agent_repo.get_by_id(agent_id)
        if not agent:
            raise AgentNotFoundError(agent_id)
        return agent

    async def update_agent(
        self,
        agent_id: int,
        agent_data: AgentFields,
        image: Optional[UploadFile] = None
    ) -> Agent:
        """
        Update an agent. Omitted fields are kept; a new image replaces the old one.

        Raises:
            AgentNotFoundError: If agent doesn't exist
        """
        agent = await self.get_agent(agent_id)
        replacement = await self.images.replace(agent.image, image)

        update_data = agent_data.model_dump()
        if replacement.added:
            update_data["image"] = replacement.paths[0]

        try:
            updated_agent = await self.agent_repo.update(agent_id, update_data)
        except Exception:
            self.images.discard(replacement.added)
            raise

        if updated_agent is None:
            self.images.discard(replacement.added)
            raise AgentNotFoundError(agent_id)

        self.images.remove_all(replacement.to_delete)
        logger.info(f"Updated agent {agent_id}")
        return updated_agent

    async def delete_agent(self, agent_id: int) -> None:
        """
        Delete an agent, then its image file.

        Raises:
            AgentNotFoundError: If agent doesn't exist
        """
        agent = await self.get_agent(agent_id)
        image_path = agent.image

        deleted = await self.agent_repo.delete(agent_id)
        if not deleted:
            raise AgentNotFoundError(agent_id)

        if image_path:
            self.images.remove(image_path)
        logger.info(f"Deleted agent {agent_id}")
