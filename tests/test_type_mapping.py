"""
Tests for schema type tag → TypeScript type conversion.
"""

import pytest

from episync.core.services.generators.type_mapping import (
    PROPERTY_TYPES,
    convert_property_type,
    is_type_reference,
)

KNOWN = ["ArticlePage", "TeaserBlock", "Hero Block"]


class TestConvertPropertyType:
    @pytest.mark.parametrize(
        ("tag", "expected"),
        [
            ("Boolean", "ContentDelivery.BooleanProperty"),
            ("Decimal", "ContentDelivery.NumberProperty"),
            ("Number", "ContentDelivery.NumberProperty"),
            ("FloatNumber", "ContentDelivery.NumberProperty"),
            ("String", "ContentDelivery.StringProperty"),
            ("string", "ContentDelivery.StringProperty"),
            ("LongString", "ContentDelivery.StringProperty"),
            ("XhtmlString", "ContentDelivery.StringProperty"),
            ("Url", "ContentDelivery.StringProperty"),
            ("ContentReference", "ContentDelivery.ContentReferenceProperty"),
            ("PageReference", "ContentDelivery.ContentReferenceProperty"),
            ("ContentReferenceList", "ContentDelivery.ContentReferenceListProperty"),
            ("ContentArea", "ContentDelivery.ContentAreaProperty"),
            ("LinkCollection", "ContentDelivery.LinkListProperty"),
        ],
    )
    def test_fixed_table(self, tag, expected):
        assert convert_property_type(tag, KNOWN) == expected

    def test_table_is_complete(self):
        assert len(PROPERTY_TYPES) == 14

    def test_known_type_reference(self):
        assert convert_property_type("TeaserBlock", KNOWN) == "TeaserBlockData"

    def test_known_type_reference_is_sanitized(self):
        assert convert_property_type("Hero Block", KNOWN) == "Hero_BlockData"

    def test_unknown_tag_degrades_to_generic(self):
        result = convert_property_type("GeoCoordinate", KNOWN)
        assert result == "ContentDelivery.Property<any> // Original type: GeoCoordinate"

    def test_case_sensitive(self):
        """Only "string" has a lower-case alias."""
        assert convert_property_type("boolean", KNOWN).endswith("// Original type: boolean")

    def test_table_wins_over_known_type(self):
        assert convert_property_type("String", ["String"]) == "ContentDelivery.StringProperty"


class TestIsTypeReference:
    def test_reference(self):
        assert is_type_reference("TeaserBlock", KNOWN)

    def test_scalar_is_not_reference(self):
        assert not is_type_reference("String", KNOWN + ["String"])

    def test_unknown_is_not_reference(self):
        assert not is_type_reference("GeoCoordinate", KNOWN)
