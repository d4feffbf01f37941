"""
Mock schema client — in-memory stand-in for the Content Delivery API.

Serves a fixed set of type definitions, can be told to fail the
overview or individual types, and records every call it receives.
"""

from __future__ import annotations

import threading
from typing import Any

from episync.core.errors import FetchError


class MockSchemaClient:
    """Schema client serving type definitions from memory.

    Args:
        types: Full type definitions as the API would return them
            (dicts with ``name``, ``guid``, ``properties`` ...).
    """

    def __init__(self, types: list[dict[str, Any]] | None = None, base_url: str = "http://mock.local/"):
        self.base_url = base_url
        self._types: list[dict[str, Any]] = list(types or [])
        self._overview_error: Any = None
        self._type_errors: dict[str, Any] = {}
        self._lock = threading.Lock()
        self._call_log: list[str] = []

    @property
    def call_log(self) -> list[str]:
        """Requested service paths, in call order."""
        return list(self._call_log)

    def set_types(self, types: list[dict[str, Any]]) -> None:
        self._types = list(types)

    def fail_overview(self, error: Any = "network error") -> None:
        """Fail the overview with a network error envelope, or raise if ``error`` is an exception."""
        self._overview_error = error

    def fail_type(self, guid: str, error: Any = "network error") -> None:
        self._type_errors[guid] = error

    def _record(self, path: str) -> None:
        with self._lock:
            self._call_log.append(path)

    @staticmethod
    def _failure(path: str, error: Any) -> Any:
        if isinstance(error, BaseException):
            raise FetchError(path, str(error)) from error
        return {"error": error, "contentType": "Errors.NetworkError"}

    def list_types(self) -> Any:
        self._record("model")
        if self._overview_error is not None:
            return self._failure("model", self._overview_error)
        return [
            {k: v for k, v in t.items() if k != "properties"}
            for t in self._types
        ]

    def get_type(self, guid: str) -> Any:
        path = f"model/{guid}"
        self._record(path)
        if guid in self._type_errors:
            return self._failure(path, self._type_errors[guid])
        for t in self._types:
            if t.get("guid") == guid:
                return dict(t)
        return {"error": "not found", "contentType": "Errors.NotFound"}


class MockAuth:
    """Auth provider returning a fixed user."""

    def __init__(self, user: str | None = None, error: Exception | None = None):
        self._user = user
        self._error = error

    def current_user(self) -> str | None:
        if self._error is not None:
            raise self._error
        return self._user
