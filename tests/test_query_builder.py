"""
Tests for the property filter query builder.
Covers value parsing, the conditions each filter contributes and the filters_applied echo.
"""

import pytest
from decimal import Decimal

from listings_api.repositories.query_builder import (
    PropertyFilterBuilder,
    clean_text,
    parse_decimal,
    parse_int,
    parse_price_range
)
from listings_api.schemas.property import PriceRange, PropertyFilterRequest


def bound_values(filter_query) -> list:
    """Parameter values bound into the built statement."""
    return list(filter_query.statement.compile().params.values())


class TestValueParsing:
    """Test the tolerant parsers used for filter values."""

    def test_clean_text(self):
        assert clean_text("  sale ") == "sale"
        assert clean_text("   ") is None
        assert clean_text(None) is None
        assert clean_text(3) == "3"
        assert clean_text(True) is None

    def test_parse_int(self):
        assert parse_int("3") == 3
        assert parse_int(" 4 ") == 4
        assert parse_int(2) == 2
        assert parse_int(2.0) == 2
        assert parse_int(2.5) is None
        assert parse_int("abc") is None
        assert parse_int("2.5") is None
        assert parse_int("") is None
        assert parse_int(False) is None

    def test_parse_decimal(self):
        assert parse_decimal("1200.50") == Decimal("1200.50")
        assert parse_decimal(0) == Decimal("0")
        assert parse_decimal("big") is None
        assert parse_decimal("NaN") is None
        assert parse_decimal("Infinity") is None
        assert parse_decimal(" ") is None

    def test_parse_price_range_text(self):
        assert parse_price_range("100-500") == (Decimal("100"), Decimal("500"))
        assert parse_price_range("100-") == (Decimal("100"), None)
        assert parse_price_range("-500") == (None, Decimal("500"))
        assert parse_price_range("100") == (Decimal("100"), None)
        assert parse_price_range("abc-def") == (None, None)
        assert parse_price_range("") == (None, None)

    def test_parse_price_range_object(self):
        assert parse_price_range({"min": 200}) == (Decimal("200"), None)
        assert parse_price_range({"min": "", "max": "900"}) == (None, Decimal("900"))
        assert parse_price_range(PriceRange(min=0, max=None)) == (Decimal("0"), None)
        assert parse_price_range(None) == (None, None)


class TestPropertyFilterBuilder:
    """Test building filter statements."""

    def setup_method(self):
        self.builder = PropertyFilterBuilder()

    def test_empty_filters_have_no_where_clause(self):
        """All-absent or all-blank input selects every property."""
        for filters in ({}, {"search": "  ", "status": "", "bedroom": None, "price_range": ""}):
            query = self.builder.build(filters)

            assert query.conditions == []
            assert query.statement.whereclause is None
            assert query.filters_applied == {
                "search": None,
                "status": None,
                "category": None,
                "sub_category": None,
                "bedroom": None,
                "size": None,
                "price_range": None,
            }

    def test_price_range_text_both_ends(self):
        query = self.builder.build({"price_range": "100-500"})

        assert len(query.conditions) == 2
        assert query.filters_applied["price_range"] == {"min": 100.0, "max": 500.0}
        assert Decimal("100") in bound_values(query)
        assert Decimal("500") in bound_values(query)

        sql = str(query.statement.compile())
        assert "properties.price >=" in sql
        assert "properties.price <=" in sql

    def test_price_range_object_min_only(self):
        query = self.builder.build({"price_range": {"min": 200}})

        assert len(query.conditions) == 1
        assert query.filters_applied["price_range"] == {"min": 200.0, "max": None}

        sql = str(query.statement.compile())
        assert "properties.price >=" in sql
        assert "properties.price <=" not in sql

    def test_zero_is_a_valid_price_endpoint(self):
        query = self.builder.build({"price_range": "0-1000"})

        assert len(query.conditions) == 2
        assert query.filters_applied["price_range"] == {"min": 0.0, "max": 1000.0}

    def test_malformed_bedroom_is_dropped(self):
        query = self.builder.build({"bedroom": "abc", "status": "sale"})

        assert len(query.conditions) == 1
        assert query.filters_applied["bedroom"] is None
        assert query.filters_applied["status"] == "sale"

    def test_bedroom_compared_as_text(self):
        query = self.builder.build({"bedroom": " 3 "})

        assert query.filters_applied["bedroom"] == 3
        assert "3" in bound_values(query)

    def test_search_matches_title_or_location(self):
        query = self.builder.build({"search": "  marina "})

        assert query.filters_applied["search"] == "marina"
        assert "%marina%" in bound_values(query)

        sql = str(query.statement.compile()).lower()
        assert "properties.title" in sql
        assert "properties.location" in sql
        assert " or " in sql

    def test_exact_match_fields_are_trimmed(self):
        query = self.builder.build({"status": " rent ", "category": "commercial", "sub_category": "office"})

        assert len(query.conditions) == 3
        assert query.filters_applied["status"] == "rent"
        assert query.filters_applied["category"] == "commercial"
        assert query.filters_applied["sub_category"] == "office"

    def test_size_echoed_as_number(self):
        query = self.builder.build({"size": "1200.5"})

        assert query.filters_applied["size"] == 1200.5
        assert Decimal("1200.5") in bound_values(query)

    def test_malformed_size_is_dropped(self):
        query = self.builder.build({"size": "large"})

        assert query.conditions == []
        assert query.filters_applied["size"] is None

    def test_accepts_request_schema(self):
        filters = PropertyFilterRequest(search="villa", bedroom=4, price_range={"max": "2000000"})
        query = self.builder.build(filters)

        assert len(query.conditions) == 3
        assert query.filters_applied["search"] == "villa"
        assert query.filters_applied["bedroom"] == 4
        assert query.filters_applied["price_range"] == {"min": None, "max": 2000000.0}

    def test_values_are_bound_not_inlined(self):
        """Filter text never becomes part of the SQL string."""
        hostile = "x' OR '1'='1"
        query = self.builder.build({"search": hostile, "status": hostile})

        sql = str(query.statement.compile())
        assert hostile not in sql
        assert hostile in bound_values(query)

    def test_newest_first_ordering(self):
        sql = str(self.builder.build({}).statement.compile()).lower()

        assert "order by properties.created_at desc, properties.id desc" in sql

    @pytest.mark.parametrize("value", ["100-abc", "abc-500"])
    def test_price_range_one_malformed_side(self, value):
        query = self.builder.build({"price_range": value})

        assert len(query.conditions) == 1
