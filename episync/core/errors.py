"""
Error types shared by the generators, the sync job and the rewriter.

Configuration problems raise ``ConfigError`` from the config loader;
everything else derives from ``EpisyncError``.
"""

from __future__ import annotations


class EpisyncError(Exception):
    """Base class for all episync failures."""


class FetchError(EpisyncError):
    """Raised when the Content Delivery API cannot be reached or answers badly."""

    def __init__(self, url: str, message: str):
        super().__init__(f"Error while fetching {url}: {message}")
        self.url = url


class NameCollisionError(EpisyncError):
    """Two distinct names would produce the same generated identifier.

    Attributes:
        identifier: The generated identifier both names map to.
        names:      The colliding source names, in input order.
    """

    def __init__(self, identifier: str, names: list[str], what: str = "model name"):
        joined = ", ".join(repr(n) for n in names)
        super().__init__(f"{what} collision: {joined} all map to '{identifier}'")
        self.identifier = identifier
        self.names = names


class PreLoadOptionsError(EpisyncError):
    """Raised when the @PreLoad rewriter receives invalid options."""


class PreLoadCollisionError(NameCollisionError):
    """Two preloaded modules would share the same local import binding."""

    def __init__(self, identifier: str, names: list[str]):
        super().__init__(identifier, names, what="PreLoad binding")
