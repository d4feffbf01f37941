"""
Generated file model and the section builder used by all generators.

Generators assemble text as an ordered list of sections and join
them deterministically, so each section can be tested on its own and
the final output stays byte-stable between runs.
"""

from __future__ import annotations

from pydantic import BaseModel

EOL = "\n"


class GeneratedFile(BaseModel):
    """A file produced by one of the generators.

    Attributes:
        path:      Path relative to the output directory.
        content:   Full file content.
        reason:    Why this file was generated.
    """

    path: str
    content: str
    reason: str = ""


class SourceBuilder:
    """Ordered list of text sections joined with a fixed line ending.

    Every section is a list of lines.  ``build()`` joins the lines of
    all sections in insertion order and terminates the file with a
    single trailing newline.
    """

    def __init__(self) -> None:
        self._sections: list[tuple[str, list[str]]] = []

    def section(self, name: str, lines: list[str] | None = None) -> list[str]:
        """Append a named section and return its (mutable) line list."""
        if any(existing == name for existing, _ in self._sections):
            raise ValueError(f"Duplicate section: {name}")
        body = list(lines or [])
        self._sections.append((name, body))
        return body

    def get(self, name: str) -> list[str]:
        """Return the lines of a section by name."""
        for existing, body in self._sections:
            if existing == name:
                return body
        raise KeyError(name)

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self._sections]

    def lines(self) -> list[str]:
        out: list[str] = []
        for _, body in self._sections:
            out.extend(body)
        return out

    def build(self) -> str:
        return EOL.join(self.lines()) + EOL
