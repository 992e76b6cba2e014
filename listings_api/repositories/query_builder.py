"""
Query builder for the property filter endpoint.
Translates optional filter fields into a parameterized SELECT over properties.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Tuple
import logging

from sqlalchemy import Select, and_, or_, select

from listings_api.models.property import Property

logger = logging.getLogger(__name__)


def clean_text(value: Any) -> Optional[str]:
    """Trimmed text value, or None when absent or blank."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        value = str(value)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def parse_int(value: Any) -> Optional[int]:
    """Parse an integer filter value; malformed input yields None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None

    text = clean_text(value)
    if text is None:
        return None
    try:
        return int(text)
    except ValueError:
        return None


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Parse a finite numeric filter value; malformed input yields None."""
    if value is None or isinstance(value, bool):
        return None

    text = clean_text(value)
    if text is None:
        return None
    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


def parse_price_range(value: Any) -> Tuple[Optional[Decimal], Optional[Decimal]]:
    """
    Parse a price range given as ``"min-max"`` text or a ``{min, max}`` mapping.

    Each endpoint is converted independently; an endpoint that is absent or
    malformed comes back as None.
    """
    if value is None:
        return None, None

    if isinstance(value, dict):
        return parse_decimal(value.get("min")), parse_decimal(value.get("max"))

    if hasattr(value, "min") and hasattr(value, "max"):
        return parse_decimal(value.min), parse_decimal(value.max)

    text = clean_text(value)
    if text is None:
        return None, None

    low, _, high = text.partition("-")
    return parse_decimal(low), parse_decimal(high)


def _as_float(value: Optional[Decimal]) -> Optional[float]:
    return float(value) if value is not None else None


@dataclass
class PropertyFilterQuery:
    """Built filter query plus an echo of the filters that were applied."""

    statement: Select
    conditions: List[Any] = field(default_factory=list)
    filters_applied: Dict[str, Any] = field(default_factory=dict)


class PropertyFilterBuilder:
    """
    Builds the property filter query.

    Filters are optional and conjunctive. Malformed values never raise; they
    are left out of the query and echoed as null.
    """

    def build(self, filters: Any) -> PropertyFilterQuery:
        """
        Build the SELECT for a filter request.

        Args:
            filters: Object or mapping exposing search, status, category,
                sub_category, bedroom, size and price_range

        Returns:
            PropertyFilterQuery with statement, conditions and filters_applied
        """
        get = filters.get if isinstance(filters, dict) else lambda name: getattr(filters, name, None)

        conditions = []
        applied: Dict[str, Any] = {}

        # Text search in title and location
        search = clean_text(get("search"))
        if search is not None:
            search_term = f"%{search}%"
            conditions.append(
                or_(
                    Property.title.ilike(search_term),
                    Property.location.ilike(search_term)
                )
            )
        applied["search"] = search

        # Exact match fields
        for name in ("status", "category", "sub_category"):
            value = clean_text(get(name))
            if value is not None:
                conditions.append(getattr(Property, name) == value)
            applied[name] = value

        # Bedroom is stored as text, compare against the canonical integer form
        bedroom = parse_int(get("bedroom"))
        if bedroom is not None:
            conditions.append(Property.bedroom == str(bedroom))
        applied["bedroom"] = bedroom

        size = parse_decimal(get("size"))
        if size is not None:
            conditions.append(Property.size == size)
        applied["size"] = _as_float(size)

        # Price range, one or both endpoints
        min_price, max_price = parse_price_range(get("price_range"))
        if min_price is not None:
            conditions.append(Property.price >= min_price)
        if max_price is not None:
            conditions.append(Property.price <= max_price)
        if min_price is None and max_price is None:
            applied["price_range"] = None
        else:
            applied["price_range"] = {"min": _as_float(min_price), "max": _as_float(max_price)}

        statement = select(Property)
        if conditions:
            statement = statement.where(and_(*conditions))
        statement = statement.order_by(Property.created_at.desc(), Property.id.desc())

        logger.debug(f"Built property filter with {len(conditions)} condition(s): {applied}")
        return PropertyFilterQuery(statement=statement, conditions=conditions, filters_applied=applied)
