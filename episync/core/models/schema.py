"""
Content-type schema models — what the Content Delivery API reports.

The model endpoint answers with camelCase JSON (``displayName``);
the models accept both the wire names and the Python field names.
A sync run builds these once from the fetched payloads and never
mutates them afterwards.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TypeDefinition(BaseModel):
    """One content type as listed in the model overview.

    ``name`` is the stable key used for every generated identifier,
    ``guid`` is the id used to fetch the full definition.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    name: str
    display_name: str = Field(default="", alias="displayName")
    description: str = ""
    guid: str = ""

    @field_validator("display_name", "description", "guid", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class PropertyDefinition(BaseModel):
    """A single property of a content type.

    ``type`` is the schema type tag: a scalar name (``String``,
    ``ContentArea`` ...) or the name of another content type.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    name: str
    display_name: str = Field(default="", alias="displayName")
    description: str = ""
    type: str = ""

    @field_validator("display_name", "description", "type", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class TypeDefinitionData(TypeDefinition):
    """A content type with its property list, in schema order."""

    properties: tuple[PropertyDefinition, ...] = ()

    @field_validator("properties", mode="before")
    @classmethod
    def _none_to_empty_list(cls, value: Any) -> Any:
        return () if value is None else value


class NetworkErrorData(BaseModel):
    """Error envelope the Content Delivery client returns instead of a payload."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    error: Any
    content_type: str = Field(alias="contentType")


def is_network_error(payload: Any) -> bool:
    """Whether ``payload`` is a network error envelope.

    Both ``error`` and ``contentType`` must be present and truthy.
    """
    if not payload:
        return False
    if isinstance(payload, NetworkErrorData):
        return bool(payload.error and payload.content_type)
    if not isinstance(payload, dict):
        return False
    return bool(payload.get("error") and payload.get("contentType"))
