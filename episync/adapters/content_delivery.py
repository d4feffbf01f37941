"""
Content Delivery API client — model endpoint access over HTTP.

Only the two model endpoints are used:

    GET <base>/api/episerver/v3/model           type overview
    GET <base>/api/episerver/v3/model/<guid>    type definition

HTTP error statuses come back as a network error envelope, the same
shape the SPA client library uses, so callers handle "the server said
no" and "bad payload" in one place.  Connection failures raise.
"""

from __future__ import annotations

import json
import logging
import ssl
import urllib.error
import urllib.request
from pathlib import Path
from typing import Any
from urllib.parse import urljoin, urlsplit

from episync import __version__
from episync.core.errors import FetchError

logger = logging.getLogger(__name__)

MODEL_SERVICE_PATH = "api/episerver/v3/model"
AUTH_STORAGE_DIR = ".episync/auth"


def service_path(guid: str | None = None) -> str:
    """Relative service path for the overview or a single type."""
    return MODEL_SERVICE_PATH + (f"/{guid}" if guid else "")


class TokenStorageAuth:
    """Token storage keyed by the host of the Episerver instance.

    Tokens live in ``<root>/.episync/auth/<host>.json`` as written by
    an external login step::

        {"access_token": "...", "username": "editor@example.com"}

    A missing or unreadable file means anonymous access.
    """

    def __init__(self, root_dir: Path, base_url: str):
        host = urlsplit(base_url).netloc.replace(":", "_") or "default"
        self.path = Path(root_dir) / AUTH_STORAGE_DIR / f"{host}.json"

    def _load(self) -> dict[str, Any]:
        if not self.path.is_file():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable token file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def access_token(self) -> str | None:
        return self._load().get("access_token") or None

    def current_user(self) -> str | None:
        data = self._load()
        if not data.get("access_token"):
            return None
        return data.get("username") or None


class ContentDeliveryClient:
    """Minimal JSON client for the Content Delivery model endpoints."""

    def __init__(
        self,
        base_url: str,
        *,
        auth: TokenStorageAuth | None = None,
        insecure: bool = False,
        timeout: int = 30,
    ):
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.auth = auth
        self.timeout = timeout
        self._ssl_context: ssl.SSLContext | None = None
        if insecure:
            self._ssl_context = ssl.create_default_context()
            self._ssl_context.check_hostname = False
            self._ssl_context.verify_mode = ssl.CERT_NONE

    def list_types(self) -> Any:
        return self.raw(service_path())

    def get_type(self, guid: str) -> Any:
        return self.raw(service_path(guid))

    def raw(self, path: str) -> Any:
        """GET ``path`` relative to the base URL and decode the JSON body.

        Returns:
            The decoded payload, or ``{"error": ..., "contentType": ...}``
            when the server answers with an HTTP error status.

        Raises:
            FetchError: When the server cannot be reached or the body
                is not JSON.
        """
        url = urljoin(self.base_url, path)
        headers = {
            "Accept": "application/json",
            "User-Agent": f"episync/{__version__}",
        }
        token = self.auth.access_token() if self.auth else None
        if token:
            headers["Authorization"] = f"Bearer {token}"

        logger.debug("GET %s", url)
        req = urllib.request.Request(url, headers=headers, method="GET")
        try:
            with urllib.request.urlopen(req, timeout=self.timeout, context=self._ssl_context) as resp:
                body = resp.read()
        except urllib.error.HTTPError as e:
            logger.debug("GET %s → HTTP %s", url, e.code)
            return {
                "error": {"status": e.code, "message": str(e.reason)},
                "contentType": e.headers.get("Content-Type", "text/plain") if e.headers else "text/plain",
            }
        except (urllib.error.URLError, OSError) as e:
            raise FetchError(url, str(getattr(e, "reason", e))) from e

        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise FetchError(url, f"invalid JSON response: {e}") from e
