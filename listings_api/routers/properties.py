"""
Property listing API endpoints: CRUD with image uploads, filtering and the featured list.
Mutations take multipart form data; stored image paths are returned as absolute URLs.
"""

from fastapi import APIRouter, Body, Depends, File, Form, Path, UploadFile, status
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
import logging

from listings_api.config import settings
from listings_api.models.property import Property
from listings_api.services.property import PropertyService
from listings_api.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyCreateResponse,
    PropertyUpdateResponse,
    PropertyDeleteResponse,
    PropertyFilterRequest,
    PropertyFilterResponse,
    FeaturedPropertiesResponse
)
from listings_api.utils.dependencies import get_base_url, get_property_service
from listings_api.utils.exceptions import APIException, InternalServerError
from listings_api.utils.image_paths import format_image_urls
from listings_api.schemas.error import get_crud_error_responses, get_read_error_responses

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/properties", tags=["Properties"])


def to_property_response(property_obj: Property, base_url: str) -> PropertyResponse:
    """Serialize a property with its image paths expanded to absolute URLs."""
    data = property_obj.to_dict()
    data["images"] = format_image_urls(data["images"], base_url)
    return PropertyResponse.model_validate(data)


@router.get(
    "",
    response_model=List[PropertyResponse],
    status_code=status.HTTP_200_OK,
    summary="List properties",
    description="Get all properties, newest first",
    responses=get_read_error_responses()
)
async def list_properties(
    base_url: str = Depends(get_base_url),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    try:
        properties = await property_service.list_properties()
    except SQLAlchemyError as e:
        raise InternalServerError("Error fetching properties", error_detail=str(e))

    logger.debug(f"Listed {len(properties)} properties")
    return [to_property_response(p, base_url) for p in properties]


@router.post(
    "/filter",
    response_model=PropertyFilterResponse,
    status_code=status.HTTP_200_OK,
    summary="Filter properties",
    description=(
        "Filter by search text (title or location), status, category, sub-category, "
        "bedroom, size and price range. Unusable values are ignored and echoed as null."
    ),
    responses=get_read_error_responses()
)
async def filter_properties(
    filters: Optional[PropertyFilterRequest] = Body(None),
    base_url: str = Depends(get_base_url),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyFilterResponse:
    """
    Filter properties.

    Args:
        filters: Filter criteria; every field is optional and the body may be omitted
        base_url: Base URL for image links
        property_service: Property service instance

    Returns:
        Matching properties with the filters that were applied
    """
    if filters is None:
        filters = PropertyFilterRequest()

    try:
        properties, filters_applied = await property_service.filter_properties(filters)
    except SQLAlchemyError as e:
        raise InternalServerError("Error filtering properties", error_detail=str(e))

    return PropertyFilterResponse(
        count=len(properties),
        properties=[to_property_response(p, base_url) for p in properties],
        filters_applied=filters_applied
    )


@router.post(
    "/featured",
    response_model=FeaturedPropertiesResponse,
    status_code=status.HTTP_200_OK,
    summary="Featured properties",
    description="Get the most recent featured properties",
    responses=get_read_error_responses()
)
async def get_featured_properties(
    base_url: str = Depends(get_base_url),
    property_service: PropertyService = Depends(get_property_service)
) -> FeaturedPropertiesResponse:
    try:
        properties = await property_service.get_featured_properties(settings.featured_limit)
    except SQLAlchemyError as e:
        raise InternalServerError("Error fetching featured properties", error_detail=str(e))

    return FeaturedPropertiesResponse(
        count=len(properties),
        featuredProperties=[to_property_response(p, base_url) for p in properties]
    )


@router.get(
    "/{property_id}",
    response_model=PropertyResponse,
    status_code=status.HTTP_200_OK,
    summary="Get property by ID",
    responses=get_read_error_responses()
)
async def get_property(
    property_id: int = Path(..., description="Property ID"),
    base_url: str = Depends(get_base_url),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    """
    Get a property by ID.

    Raises:
        PropertyNotFoundError: If property doesn't exist
    """
    try:
        property_obj = await property_service.get_property(property_id)
    except APIException:
        raise
    except SQLAlchemyError as e:
        raise InternalServerError("Error fetching property", error_detail=str(e))

    return to_property_response(property_obj, base_url)


@router.post(
    "",
    response_model=PropertyCreateResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create new property",
    description="Create a property from multipart form data with optional image files.",
    responses=get_crud_error_responses()
)
async def create_property(
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    sub_category: Optional[str] = Form(None),
    property_status: Optional[str] = Form(None, alias="status"),
    price: Optional[str] = Form(None),
    size: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    bedroom: Optional[str] = Form(None),
    bathroom: Optional[str] = Form(None),
    view: Optional[str] = Form(None),
    parking: Optional[str] = Form(None),
    agent_id: Optional[str] = Form(None, alias="agentId"),
    is_featured: Optional[str] = Form(None),
    amenities: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = File(None),
    base_url: str = Depends(get_base_url),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyCreateResponse:
    """
    Create a new property listing.

    Raises:
        MissingFieldsError: If the title is missing
        FileUploadError: If an image is rejected
        InternalServerError: If the property cannot be stored
    """
    property_data = PropertyCreate(
        title=title,
        description=description,
        category=category,
        sub_category=sub_category,
        status=property_status,
        price=price,
        size=size,
        location=location,
        bedroom=bedroom,
        bathroom=bathroom,
        view=view,
        parking=parking,
        agent_id=agent_id,
        is_featured=is_featured,
        amenities=amenities
    )

    try:
        property_obj = await property_service.create_property(property_data, images or [])
    except APIException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error adding property: {e}")
        raise InternalServerError("Error adding property. Please try again later.", error_detail=str(e))

    return PropertyCreateResponse(
        message="Property added successfully",
        propertyId=property_obj.id,
        property=to_property_response(property_obj, base_url)
    )


@router.put(
    "/{property_id}",
    response_model=PropertyUpdateResponse,
    status_code=status.HTTP_200_OK,
    summary="Update property",
    description=(
        "Partially update a property. `existingImages` lists the current images to keep "
        "(omitting it removes every current image); uploaded `images` are appended."
    ),
    responses=get_crud_error_responses()
)
async def update_property(
    property_id: int = Path(..., description="Property ID"),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    sub_category: Optional[str] = Form(None),
    property_status: Optional[str] = Form(None, alias="status"),
    price: Optional[str] = Form(None),
    size: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    bedroom: Optional[str] = Form(None),
    bathroom: Optional[str] = Form(None),
    view: Optional[str] = Form(None),
    parking: Optional[str] = Form(None),
    agent_id: Optional[str] = Form(None, alias="agentId"),
    is_featured: Optional[str] = Form(None),
    amenities: Optional[str] = Form(None),
    existing_images: Optional[List[str]] = Form(None, alias="existingImages"),
    images: Optional[List[UploadFile]] = File(None),
    base_url: str = Depends(get_base_url),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyUpdateResponse:
    """
    Update an existing property and reconcile its images.

    Raises:
        PropertyNotFoundError: If property doesn't exist
        InternalServerError: If the update cannot be stored
    """
    property_data = PropertyUpdate(
        title=title,
        description=description,
        category=category,
        sub_category=sub_category,
        status=property_status,
        price=price,
        size=size,
        location=location,
        bedroom=bedroom,
        bathroom=bathroom,
        view=view,
        parking=parking,
        agent_id=agent_id,
        is_featured=is_featured,
        amenities=amenities,
        existing_images=existing_images
    )

    try:
        property_obj = await property_service.update_property(property_id, property_data, images or [])
    except APIException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error updating property {property_id}: {e}")
        raise InternalServerError("Error updating property. Please try again later.", error_detail=str(e))

    return PropertyUpdateResponse(
        message="Property updated successfully",
        property=to_property_response(property_obj, base_url)
    )


@router.delete(
    "/{property_id}",
    response_model=PropertyDeleteResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete property",
    description="Delete a property and its image files",
    responses=get_crud_error_responses()
)
async def delete_property(
    property_id: int = Path(..., description="Property ID"),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyDeleteResponse:
    try:
        await property_service.delete_property(property_id)
    except APIException:
        raise
    except SQLAlchemyError as e:
        logger.error(f"Error deleting property {property_id}: {e}")
        raise InternalServerError("Error deleting property. Please try again later.", error_detail=str(e))

    return PropertyDeleteResponse(message="Property deleted successfully", id=property_id)
