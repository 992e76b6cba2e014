"""
Pydantic schemas for request/response validation.
"""

# Property schemas
from .property import (
    PropertyFields,
    PropertyCreate,
    PropertyUpdate,
    PropertyResponse,
    PropertyCreateResponse,
    PropertyUpdateResponse,
    PropertyDeleteResponse,
    PriceRange,
    PropertyFilterRequest,
    FiltersApplied,
    PropertyFilterResponse,
    FeaturedPropertiesResponse
)

# Agent schemas
from .agent import (
    AgentFields,
    AgentResponse,
    AgentMutationResponse
)

# Error schemas
from .error import (
    ErrorDetail,
    ErrorResponse,
    APIErrorResponse
)

__all__ = [
    # Property
    "PropertyFields",
    "PropertyCreate",
    "PropertyUpdate",
    "PropertyResponse",
    "PropertyCreateResponse",
    "PropertyUpdateResponse",
    "PropertyDeleteResponse",
    "PriceRange",
    "PropertyFilterRequest",
    "FiltersApplied",
    "PropertyFilterResponse",
    "FeaturedPropertiesResponse",

    # Agent
    "AgentFields",
    "AgentResponse",
    "AgentMutationResponse",

    # Error
    "ErrorDetail",
    "ErrorResponse",
    "APIErrorResponse"
]
