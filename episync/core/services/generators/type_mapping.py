"""
Schema type tag → TypeScript property type.

The table is closed: tags are matched exactly (case-sensitive).
A tag naming another content type becomes a reference to that
type's generated interface; anything else degrades to an untyped
property that keeps the original tag in a trailing comment.
"""

from __future__ import annotations

from collections.abc import Collection

from episync.core.services.generators.naming import interface_name

BOOLEAN_PROPERTY = "ContentDelivery.BooleanProperty"
NUMBER_PROPERTY = "ContentDelivery.NumberProperty"
STRING_PROPERTY = "ContentDelivery.StringProperty"
CONTENT_REFERENCE_PROPERTY = "ContentDelivery.ContentReferenceProperty"
CONTENT_REFERENCE_LIST_PROPERTY = "ContentDelivery.ContentReferenceListProperty"
CONTENT_AREA_PROPERTY = "ContentDelivery.ContentAreaProperty"
LINK_LIST_PROPERTY = "ContentDelivery.LinkListProperty"
GENERIC_PROPERTY = "ContentDelivery.Property<any>"

PROPERTY_TYPES: dict[str, str] = {
    "Boolean": BOOLEAN_PROPERTY,
    "Decimal": NUMBER_PROPERTY,
    "Number": NUMBER_PROPERTY,
    "FloatNumber": NUMBER_PROPERTY,
    "String": STRING_PROPERTY,
    "string": STRING_PROPERTY,
    "LongString": STRING_PROPERTY,
    "XhtmlString": STRING_PROPERTY,
    "Url": STRING_PROPERTY,
    "ContentReference": CONTENT_REFERENCE_PROPERTY,
    "PageReference": CONTENT_REFERENCE_PROPERTY,
    "ContentReferenceList": CONTENT_REFERENCE_LIST_PROPERTY,
    "ContentArea": CONTENT_AREA_PROPERTY,
    "LinkCollection": LINK_LIST_PROPERTY,
}


def is_type_reference(type_tag: str, known_types: Collection[str]) -> bool:
    """Whether the tag points at another generated content type."""
    return type_tag not in PROPERTY_TYPES and type_tag in known_types


def convert_property_type(type_tag: str, known_types: Collection[str]) -> str:
    """Return the TypeScript type expression for a schema type tag."""
    mapped = PROPERTY_TYPES.get(type_tag)
    if mapped is not None:
        return mapped
    if type_tag in known_types:
        return interface_name(type_tag)
    return f"{GENERIC_PROPERTY} // Original type: {type_tag}"
