"""
Agent model for the people handling property listings.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from listings_api.database import Base
from typing import Optional


class Agent(Base):
    """Agent record with an optional single profile image."""

    __tablename__ = "agents"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Agent display name"
    )

    image: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
        comment="Relative path to the agent's profile image"
    )

    mobile_number: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Agent contact number"
    )

    def __repr__(self) -> str:
        return f"<Agent(id={self.id}, name={self.name})>"

    def to_dict(self) -> dict:
        """Convert agent to dictionary with the relative image path."""
        return {
            "id": self.id,
            "name": self.name,
            "image": self.image,
            "mobile_number": self.mobile_number,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
