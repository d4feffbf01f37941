"""
Name derivation for generated TypeScript identifiers.

All names are derived from the content type ``name`` alone:

    ArticlePage  →  ArticlePageData / ArticlePageType / ArticlePageProps

Field names keep the schema casing except for the first character,
which must match the property keys the SPA runtime looks up.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable

from episync.core.errors import NameCollisionError

DATA_SUFFIX = "Data"
INSTANCE_SUFFIX = "Type"
PROPS_SUFFIX = "Props"

_ILLEGAL_CHARS = re.compile(r"[^A-Za-z0-9_]")


def safe_model_name(name: str) -> str:
    """Turn a schema name into a valid TypeScript identifier stem."""
    safe = _ILLEGAL_CHARS.sub("_", name)
    if not safe:
        return "_"
    if safe[0].isdigit():
        return "_" + safe
    return safe


def interface_name(name: str) -> str:
    return safe_model_name(name) + DATA_SUFFIX


def instance_name(name: str) -> str:
    return safe_model_name(name) + INSTANCE_SUFFIX


def props_name(name: str) -> str:
    return safe_model_name(name) + PROPS_SUFFIX


def field_name(name: str) -> str:
    """Lower-case only the first character: ``DisplayName`` → ``displayName``."""
    return name[:1].lower() + name[1:]


def check_name_collisions(
    names: Iterable[str],
    derive: Callable[[str], str] = safe_model_name,
    what: str = "model name",
    fold_case: bool = True,
) -> None:
    """Raise ``NameCollisionError`` if two distinct names share an identifier.

    Model names are compared case-insensitively: ``FooData.ts`` and
    ``fooData.ts`` are the same file on case-insensitive filesystems.
    Pass ``fold_case=False`` for identifiers that only live inside a
    generated file.  Repeated occurrences of the same name are not a
    collision.
    """
    seen: dict[str, list[str]] = {}
    for name in names:
        derived = derive(name)
        owners = seen.setdefault(derived.casefold() if fold_case else derived, [])
        if name not in owners:
            owners.append(name)
    for owners in seen.values():
        if len(owners) > 1:
            raise NameCollisionError(derive(owners[0]), owners, what=what)
