"""Adapters — bindings to the Content Delivery API and auth storage."""

from episync.adapters.base import AuthProvider, ContentSchemaClient
from episync.adapters.content_delivery import ContentDeliveryClient, TokenStorageAuth
from episync.adapters.mock import MockAuth, MockSchemaClient

__all__ = [
    "AuthProvider",
    "ContentDeliveryClient",
    "ContentSchemaClient",
    "MockAuth",
    "MockSchemaClient",
    "TokenStorageAuth",
]
