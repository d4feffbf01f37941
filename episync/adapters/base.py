"""
Collaborator contracts for the sync job.

The sync job only talks to the Content Delivery API and the auth
session through these protocols.  Implementations return the decoded
JSON payload or a network error envelope (``{error, contentType}``);
transport failures raise ``FetchError``.
"""

from __future__ import annotations

from typing import Any, Protocol


class ContentSchemaClient(Protocol):
    """Read access to the content type schema."""

    base_url: str

    def list_types(self) -> Any:
        """Return the type overview (a list of type summaries)."""

    def get_type(self, guid: str) -> Any:
        """Return the full definition of one type."""


class AuthProvider(Protocol):
    """Advisory information about the current session."""

    def current_user(self) -> str | None:
        """Name of the authenticated user, or None for anonymous access."""
