"""
Pydantic schemas for property requests and responses.
Handles property create/update forms, the filter request and response envelopes.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Optional
from datetime import datetime
from decimal import Decimal


def _blank_to_none(v):
    """Multipart forms send empty strings for untouched inputs."""
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


class PropertyFields(BaseModel):
    """Writable property fields shared by create and update."""

    title: Optional[str] = Field(None, max_length=255, description="Property listing title")
    description: Optional[str] = Field(None, description="Detailed property description")
    category: Optional[str] = Field(None, max_length=100, description="Listing category")
    sub_category: Optional[str] = Field(None, max_length=100, description="Listing sub-category")
    status: Optional[str] = Field(None, max_length=50, description="Listing status, e.g. sale or rent")
    price: Optional[Decimal] = Field(None, ge=0, description="Property price in local currency")
    size: Optional[Decimal] = Field(None, ge=0, description="Property size")
    location: Optional[str] = Field(None, max_length=255, description="Property location/address")
    bedroom: Optional[str] = Field(None, max_length=20, description="Number of bedrooms (free text)")
    bathroom: Optional[int] = Field(None, ge=0, description="Number of bathrooms")
    view: Optional[str] = Field(None, max_length=255)
    parking: Optional[str] = Field(None, max_length=255)
    agent_id: Optional[int] = Field(None, description="ID of the agent handling the property")
    is_featured: Optional[bool] = Field(None, description="Show in the featured list")
    amenities: Optional[str] = Field(None, description="Free text list of amenities")

    @field_validator(
        "title", "description", "category", "sub_category", "status", "price", "size",
        "location", "bedroom", "bathroom", "view", "parking", "agent_id", "is_featured",
        "amenities",
        mode="before"
    )
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)


class PropertyCreate(PropertyFields):
    """Schema for creating a new property."""

    def to_create_dict(self) -> Dict[str, Any]:
        """Column values for a new row, with the defaults listings are created with."""
        data = self.model_dump()
        if data["bedroom"] is None:
            data["bedroom"] = ""
        if data["bathroom"] is None:
            data["bathroom"] = 0
        if data["is_featured"] is None:
            data["is_featured"] = False
        return data


class PropertyUpdate(PropertyFields):
    """
    Schema for updating an existing property.

    Fields left as None keep their stored value. ``existing_images`` is the
    subset of current images to keep; None or an empty list keeps none.
    """

    existing_images: Optional[List[str]] = Field(
        None,
        description="Images to keep, as relative paths or full URLs (JSON array text accepted)"
    )


class PropertyResponse(BaseModel):
    """Schema for a property as returned to clients, with absolute image URLs."""

    id: int
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    sub_category: Optional[str] = None
    status: Optional[str] = None
    price: Optional[float] = None
    size: Optional[float] = None
    location: Optional[str] = None
    bedroom: Optional[str] = None
    bathroom: Optional[int] = None
    view: Optional[str] = None
    parking: Optional[str] = None
    agent_id: Optional[int] = None
    is_featured: bool = False
    images: List[str] = Field(default_factory=list)
    amenities: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PropertyCreateResponse(BaseModel):
    """Response for a created property."""

    message: str
    propertyId: int
    property: PropertyResponse


class PropertyUpdateResponse(BaseModel):
    """Response for an updated property."""

    message: str
    property: PropertyResponse


class PropertyDeleteResponse(BaseModel):
    """Response for a deleted property."""

    message: str
    id: int


class PriceRange(BaseModel):
    """Structured price range; either endpoint may be omitted."""

    min: Optional[Any] = None
    max: Optional[Any] = None


class PropertyFilterRequest(BaseModel):
    """
    Filter request body.

    Every field is optional and loosely typed: values that cannot be used are
    ignored rather than rejected.
    """

    search: Optional[Any] = Field(None, description="Substring matched against title or location")
    status: Optional[Any] = Field(None, description="Exact status")
    category: Optional[Any] = Field(None, description="Exact category")
    sub_category: Optional[Any] = Field(None, description="Exact sub-category")
    bedroom: Optional[Any] = Field(None, description="Exact number of bedrooms")
    size: Optional[Any] = Field(None, description="Exact size")
    price_range: Optional[Any] = Field(
        None,
        description='Either "min-max" text or {"min": ..., "max": ...}'
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "search": "marina",
                "status": "sale",
                "category": "residential",
                "bedroom": "2",
                "price_range": "100000-500000"
            }
        }
    )


class AppliedPriceRange(BaseModel):
    min: Optional[float] = None
    max: Optional[float] = None


class FiltersApplied(BaseModel):
    """Echo of the filters that were recognised and applied."""

    search: Optional[str] = None
    status: Optional[str] = None
    category: Optional[str] = None
    sub_category: Optional[str] = None
    bedroom: Optional[int] = None
    size: Optional[float] = None
    price_range: Optional[AppliedPriceRange] = None


class PropertyFilterResponse(BaseModel):
    """Response for the filter endpoint."""

    count: int
    properties: List[PropertyResponse]
    filters_applied: FiltersApplied


class FeaturedPropertiesResponse(BaseModel):
    """Response for the featured endpoint."""

    count: int
    featuredProperties: List[PropertyResponse]
