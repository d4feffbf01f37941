"""
Domain models — Pydantic types for schema data and generated output.

    from episync.core.models import TypeDefinition, TypeDefinitionData, GeneratedFile
"""

from episync.core.models.preload import PreLoadOptions
from episync.core.models.schema import (
    NetworkErrorData,
    PropertyDefinition,
    TypeDefinition,
    TypeDefinitionData,
    is_network_error,
)
from episync.core.models.sync import SyncReport
from episync.core.models.template import GeneratedFile, SourceBuilder

__all__ = [
    "GeneratedFile",
    "NetworkErrorData",
    "PreLoadOptions",
    "PropertyDefinition",
    "SourceBuilder",
    "SyncReport",
    "TypeDefinition",
    "TypeDefinitionData",
    "is_network_error",
]
