"""
@PreLoad rewriter — turn an annotation into static imports.

A TypeScript file containing

    @PreLoad("./components","ComponentRegistry","app/Components/")

gets the annotation replaced by one import per matching file in
``./components`` plus a registration of every import into the
variable, keyed by its import specifier::

    // Start: Injected PreLoad script
    let ComponentRegistry: { [module: string]: any } = {};
    try { ComponentRegistry = ComponentRegistry || {}; } catch (e) { ComponentRegistry = {}; }

    import Header from 'app/Components/Header';
    ComponentRegistry["app/Components/Header"] = Header;
    // End: Injected PreLoad script

Only the first annotation of a source is replaced.  A qualified
variable (``Registry.items``) is not declared, only initialized.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Any

from episync.core.errors import PreLoadCollisionError, PreLoadOptionsError
from episync.core.models.preload import PreLoadOptions

logger = logging.getLogger(__name__)

MARKER_PATTERN = re.compile(r'@PreLoad\("([^"\n]*)","([^"\n]*)","([^"\n]*)"\)')

# Stories and styles live next to components but are never preloaded
AUXILIARY_SUFFIXES: tuple[str, ...] = (
    ".stories.tsx",
    ".stories.ts",
    ".styles.tsx",
    ".styles.ts",
    ".style.tsx",
    ".style.ts",
)

BLOCK_START = "// Start: Injected PreLoad script"
BLOCK_END = "// End: Injected PreLoad script"


@dataclass(frozen=True)
class PreLoadMarker:
    """A parsed @PreLoad annotation."""

    text: str
    path: str
    variable: str
    prefix: str
    start: int
    end: int


@dataclass(frozen=True)
class PreLoadModule:
    """One file to preload."""

    file: Path
    name: str
    module_path: str
    specifier: str
    binding: str


def find_marker(source: str) -> PreLoadMarker | None:
    """Return the first @PreLoad annotation in ``source``, if any."""
    match = MARKER_PATTERN.search(source)
    if match is None:
        return None
    return PreLoadMarker(
        text=match.group(0),
        path=match.group(1),
        variable=match.group(2),
        prefix=match.group(3),
        start=match.start(),
        end=match.end(),
    )


def _is_excluded(relative: str, exclude: str | None) -> bool:
    if relative.endswith(AUXILIARY_SUFFIXES):
        return True
    if not exclude:
        return False
    if fnmatchcase(relative, exclude):
        return True
    # "**/" also matches files directly in the root
    return exclude.startswith("**/") and fnmatchcase(relative, exclude[3:])


def _is_hidden(relative: Path) -> bool:
    return any(part.startswith(".") for part in relative.parts)


def _module_name(file_name: str, extension: str) -> str:
    if extension and file_name.endswith(extension) and file_name != extension:
        return file_name[: -len(extension)]
    return file_name


def discover_modules(component_dir: Path, prefix: str, options: PreLoadOptions) -> list[PreLoadModule]:
    """List the modules to preload from ``component_dir``, sorted by path.

    Raises:
        PreLoadCollisionError: If two files get the same local binding.
    """
    modules: list[PreLoadModule] = []
    if not component_dir.is_dir():
        logger.warning("  - PreLoad directory does not exist: %s", component_dir)
        return modules

    try:
        matches = list(component_dir.glob(options.pattern))
    except (ValueError, NotImplementedError) as e:
        raise PreLoadOptionsError(f"Invalid PreLoad pattern '{options.pattern}': {e}") from e
    files = sorted(
        (f for f in matches if f.is_file() and not _is_hidden(f.relative_to(component_dir))),
        key=lambda f: f.relative_to(component_dir).as_posix(),
    )
    for file in files:
        relative = file.relative_to(component_dir).as_posix()
        if _is_excluded(relative, options.exclude):
            logger.debug("  - Skipping %s", relative)
            continue
        name = _module_name(file.name, options.extension)
        module_path = file.parent.relative_to(component_dir).as_posix()
        if module_path == ".":
            module_path = ""
        specifier = prefix + (module_path + "/" if module_path else "") + name
        binding = module_path.replace("/", "") + name
        modules.append(PreLoadModule(file, name, module_path, specifier, binding))

    _check_bindings(modules)
    return modules


def _check_bindings(modules: list[PreLoadModule]) -> None:
    owners: dict[str, list[str]] = {}
    for module in modules:
        owners.setdefault(module.binding, []).append(module.specifier)
    for binding, specifiers in owners.items():
        if len(specifiers) > 1:
            raise PreLoadCollisionError(binding, specifiers)


def declaration_lines(variable: str) -> list[str]:
    """Local declaration for an unqualified variable, nothing for ``a.b``."""
    if "." in variable:
        return []
    return [f"let {variable}: {{ [module: string]: any }} = {{}};"]


def guard_lines(variable: str) -> list[str]:
    return [
        f"try {{ {variable} = {variable} || {{}}; }} catch (e) {{ {variable} = {{}}; }}",
        "",
    ]


def import_lines(modules: list[PreLoadModule]) -> list[str]:
    return [f"import {m.binding} from '{m.specifier}';" for m in modules]


def registration_lines(variable: str, modules: list[PreLoadModule]) -> list[str]:
    return [f'{variable}["{m.specifier}"] = {m.binding};' for m in modules]


def build_preload_block(variable: str, modules: list[PreLoadModule]) -> str:
    """The text that replaces the annotation."""
    lines = [BLOCK_START]
    lines += declaration_lines(variable)
    lines += guard_lines(variable)
    lines += import_lines(modules)
    lines += registration_lines(variable, modules)
    lines.append(BLOCK_END)
    return "\n".join(lines) + "\n"


def apply_preload(
    source: str,
    context_dir: Path | str,
    options: PreLoadOptions | dict[str, Any],
    resource_path: str | None = None,
) -> str:
    """Replace the first @PreLoad annotation of ``source``.

    Args:
        source: TypeScript source text.
        context_dir: Directory the annotation path is resolved against
            (normally the directory of the source file).
        options: ``{pattern, extension, exclude?}``; validated before
            anything else happens.
        resource_path: Source file name, only used for logging.

    Returns:
        The rewritten source, or ``source`` unchanged if it has no
        annotation.

    Raises:
        PreLoadOptionsError: If the options are invalid.
        PreLoadCollisionError: If two modules get the same binding.
    """
    opts = PreLoadOptions.parse(options)

    marker = find_marker(source)
    if marker is None:
        return source

    logger.info("Found @PreLoad annotation in: %s", resource_path or "<source>")
    component_dir = (Path(context_dir) / marker.path).resolve()
    logger.debug("  - Search pattern: %s/%s", component_dir.as_posix(), opts.pattern)
    logger.debug("  - Variable: %s", marker.variable)
    logger.debug("  - Component prefix: %s", marker.prefix)

    modules = discover_modules(component_dir, marker.prefix, opts)
    block = build_preload_block(marker.variable, modules)

    logger.info("  - Injected %d modules into %s", len(modules), marker.variable)
    return source[: marker.start] + block + source[marker.end :]
