"""
Options for the @PreLoad rewriter.

Mirrors the loader option schema: ``pattern`` and ``extension`` are
required strings, ``exclude`` is an optional glob.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from episync.core.errors import PreLoadOptionsError


class PreLoadOptions(BaseModel):
    """Validated @PreLoad options.

    Attributes:
        pattern:   Glob, relative to the annotated directory (``*.tsx``, ``**/*.tsx``).
        extension: Extension stripped from file names to get module names.
        exclude:   Optional extra glob of files to skip.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    pattern: StrictStr = Field(min_length=1)
    extension: StrictStr
    exclude: StrictStr | None = None

    @classmethod
    def parse(cls, options: Any) -> PreLoadOptions:
        """Validate raw options, raising ``PreLoadOptionsError`` on any problem."""
        if isinstance(options, cls):
            return options
        if not isinstance(options, dict):
            raise PreLoadOptionsError(
                f"Invalid PreLoad options: expected an object, got {type(options).__name__}"
            )
        try:
            return cls.model_validate(options)
        except ValidationError as e:
            raise PreLoadOptionsError(f"Invalid PreLoad options: {e}") from e
