"""
Pydantic schemas for agent requests and responses.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime


class AgentFields(BaseModel):
    """Writable agent fields."""

    name: Optional[str] = Field(None, max_length=255, description="Agent display name")
    mobile_number: Optional[str] = Field(None, max_length=50, description="Agent contact number")

    @field_validator("name", "mobile_number", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v


class AgentResponse(BaseModel):
    """Agent as returned to clients; ``image`` is an absolute URL."""

    id: int
    name: str
    image: Optional[str] = None
    mobile_number: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class AgentMutationResponse(BaseModel):
    """Response for agent create, update and delete."""

    message: str
    agent_id: int
