"""
Property model for sale and rental listings.
Handles listing details, pricing, the owning agent and the stored image reference list.
"""

from sqlalchemy import String, Text, Integer, Numeric, Boolean, Index, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column
from listings_api.database import Base
from listings_api.utils.image_paths import load_reference_list
from decimal import Decimal
from typing import List, Optional


class Property(Base):
    """
    Property listing.
    Images are kept as a JSON array of relative paths in a text column.
    """

    __tablename__ = "properties"

    # Basic property information
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        index=True,
        comment="Property listing title"
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="Detailed property description"
    )

    category: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        index=True,
        comment="Listing category, e.g. residential or commercial"
    )

    sub_category: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        index=True,
        comment="Listing sub-category, e.g. apartment or villa"
    )

    status: Mapped[Optional[str]] = mapped_column(
        String(50),
        nullable=True,
        index=True,
        comment="Listing status, e.g. for sale or for rent"
    )

    # Pricing and size
    price: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=14, scale=2),
        nullable=True,
        index=True,
        comment="Property price in local currency"
    )

    size: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=12, scale=2),
        nullable=True,
        comment="Property size"
    )

    location: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
        index=True,
        comment="Property location/address"
    )

    # Bedroom is free text so that values like "studio" or "" can be stored
    bedroom: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="",
        comment="Number of bedrooms (text, blank allowed)"
    )

    bathroom: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        comment="Number of bathrooms"
    )

    view: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    parking: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    agent_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("agents.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
        comment="ID of the agent handling this property"
    )

    is_featured: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False,
        index=True,
        comment="Whether the property is shown in the featured list"
    )

    images: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="JSON array of relative image paths"
    )

    amenities: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        """String representation of the property."""
        return f"<Property(id={self.id}, title={(self.title or '')[:30]}, price={self.price})>"

    @property
    def image_paths(self) -> List[str]:
        """Stored image references, in display order."""
        return load_reference_list(self.images)

    def to_dict(self) -> dict:
        """
        Convert property to dictionary.

        Image paths are returned relative; callers turn them into URLs.
        """
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "sub_category": self.sub_category,
            "status": self.status,
            "price": float(self.price) if self.price is not None else None,
            "size": float(self.size) if self.size is not None else None,
            "location": self.location,
            "bedroom": self.bedroom,
            "bathroom": self.bathroom,
            "view": self.view,
            "parking": self.parking,
            "agent_id": self.agent_id,
            "is_featured": self.is_featured,
            "images": self.image_paths,
            "amenities": self.amenities,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }


# Composite index for the filter endpoint's most common combination
status_category_index = Index(
    'idx_properties_status_category',
    Property.status,
    Property.category,
    Property.sub_category
)

# Index for the featured list
featured_created_index = Index(
    'idx_properties_featured_created',
    Property.is_featured,
    Property.created_at.desc()
)
