"""
Property service for managing property listings.
Coordinates the repository, the filter query builder and the image lifecycle.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple
from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from listings_api.repositories.property import PropertyRepository
from listings_api.repositories.agent import AgentRepository
from listings_api.repositories.query_builder import PropertyFilterBuilder
from listings_api.models.property import Property
from listings_api.schemas.property import PropertyCreate, PropertyUpdate
from listings_api.services.image import ImageService
from listings_api.utils.image_paths import dump_reference_list
from listings_api.utils.exceptions import (
    BadRequestError,
    MissingFieldsError,
    PropertyNotFoundError
)
import logging

logger = logging.getLogger(__name__)


class PropertyService:
    """
    Property service for listing CRUD, filtering and image bookkeeping.

    Files are written before the database mutation and discarded if it fails;
    files a mutation makes obsolete are removed only after it has been
    persisted, and removal failures never fail the request.
    """

    def __init__(self, db_session: AsyncSession, images: ImageService):
        self.db = db_session
        self.images = images
        self.property_repo = PropertyRepository(db_session)
        self.agent_repo = AgentRepository(db_session)
        self.filter_builder = PropertyFilterBuilder()

    async def list_properties(self) -> List[Property]:
        """Get all properties, newest first."""
        return await self.property_repo.list_properties()

    async def get_property(self, property_id: int) -> Property:
        """
        Get property by ID.

        Raises:
            PropertyNotFoundError: If property doesn't exist
        """
        property_obj = await self.property_repo.get_by_id(property_id)
        if not property_obj:
            raise PropertyNotFoundError(property_id)
        return property_obj

    async def create_property(
        self,
        property_data: PropertyCreate,
        files: Sequence[UploadFile] = ()
    ) -> Property:
        """
        Create a property and store its uploaded images.

        Args:
            property_data: Property creation data
            files: Uploaded images, in display order

        Returns:
            Created property instance

        Raises:
            MissingFieldsError: If the title is missing
            BadRequestError: If the referenced agent doesn't exist
            FileUploadError, UnsupportedFileTypeError, FileSizeExceededError:
                If an upload is rejected
        """
        if not property_data.title:
            raise MissingFieldsError(["title"])

        await self._validate_agent(property_data.agent_id)

        image_paths = await self.images.attach(files)

        create_data = property_data.to_create_dict()
        create_data["images"] = dump_reference_list(image_paths)

        try:
            property_obj = await self.property_repo.create(create_data)
        except Exception:
            self.images.discard(image_paths)
            raise

        logger.info(
            f"Created property {property_obj.id} ({property_obj.title}) with {len(image_paths)} image(s)"
        )
        return property_obj

    async def update_property(
        self,
        property_id: int,
        property_data: PropertyUpdate,
        files: Sequence[UploadFile] = ()
    ) -> Property:
        """
        Update a property and reconcile its images.

        Images not listed in ``existing_images`` are deleted once the update
        is stored; new uploads are appended after the kept images.

        Raises:
            PropertyNotFoundError: If property doesn't exist
        """
        property_obj = await self.get_property(property_id)
        await self._validate_agent(property_data.agent_id)

        reconciliation = await self.images.reconcile(
            property_obj.image_paths,
            property_data.existing_images,
            files
        )

        update_data: Dict[str, Any] = property_data.model_dump(exclude={"existing_images"})
        update_data["images"] = dump_reference_list(reconciliation.paths)

        try:
            updated_property = await self.property_repo.update(property_id, update_data)
        except Exception:
            self.images.discard(reconciliation.added)
            raise

        if updated_property is None:
            self.images.discard(reconciliation.added)
            raise PropertyNotFoundError(property_id)

        removed = self.images.remove_all(reconciliation.to_delete)
        logger.info(
            f"Updated property {property_id}: kept {len(reconciliation.paths) - len(reconciliation.added)}, "
            f"added {len(reconciliation.added)}, removed {removed}/{len(reconciliation.to_delete)} image(s)"
        )
        return updated_property

    async def delete_property(self, property_id: int) -> int:
        """
        Delete a property, then its image files.

        The record deletion stands even if some files cannot be removed.

        Returns:
            Number of image files removed

        Raises:
            PropertyNotFoundError: If property doesn't exist
        """
        property_obj = await self.get_property(property_id)
        image_paths = property_obj.image_paths

        deleted = await self.property_repo.delete(property_id)
        if not deleted:
            raise PropertyNotFoundError(property_id)

        removed = self.images.remove_all(image_paths)
        logger.info(f"Deleted property {property_id} and {removed}/{len(image_paths)} image file(s)")
        return removed

    async def filter_properties(self, filters: Any) -> Tuple[List[Property], Dict[str, Any]]:
        """
        Filter properties.

        Args:
            filters: PropertyFilterRequest or equivalent mapping

        Returns:
            Tuple of (matching properties, filters_applied echo)
        """
        filter_query = self.filter_builder.build(filters)
        properties = await self.property_repo.filter_properties(filter_query)
        return properties, filter_query.filters_applied

    async def get_featured_properties(self, limit: int) -> List[Property]:
        """Get featured properties, newest first."""
        return await self.property_repo.get_featured_properties(limit)

    async def _validate_agent(self, agent_id: Optional[int]) -> None:
        """Reject references to agents that don't exist."""
        if agent_id is not None and not await self.agent_repo.exists(agent_id):
            raise BadRequestError(f"Agent with ID {agent_id} does not exist")
