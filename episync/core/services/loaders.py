"""
Build-tool loaders — source in, source out.

A loader receives the source of one file plus a ``LoaderContext``
(the directory of that file, its path and the loader options) and
returns the transformed source synchronously.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from episync.core.models.preload import PreLoadOptions
from episync.core.services.preload import apply_preload


class LoaderContext(BaseModel):
    """What the build tool tells a loader about the file being loaded."""

    context: Path
    resource_path: str = ""
    options: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def for_file(cls, path: Path, options: dict[str, Any] | None = None) -> LoaderContext:
        path = Path(path).resolve()
        return cls(context=path.parent, resource_path=str(path), options=dict(options or {}))


def preload_loader(source: str, ctx: LoaderContext) -> str:
    """Replace the @PreLoad annotation of ``source``."""
    options = PreLoadOptions.parse(ctx.options)
    return apply_preload(source, ctx.context, options, resource_path=ctx.resource_path)


def empty_loader(source: str, ctx: LoaderContext | None = None) -> str:
    """Load any file as empty, to keep it out of a bundle."""
    return ""


LOADERS: dict[str, Callable[..., str]] = {
    "preload": preload_loader,
    "empty": empty_loader,
}


def get_loader(name: str) -> Callable[..., str]:
    try:
        return LOADERS[name]
    except KeyError:
        raise KeyError(f"Unknown loader '{name}', expected one of: {', '.join(sorted(LOADERS))}") from None
