"""
Model file generator — one TypeScript file per content type.

Each file holds, in order:

1. the ``@episerver/spa-core`` import plus imports of referenced models
2. a doc block for the content type
3. the ``<Name>Data`` interface
4. the ``<Name>Props`` component props convenience interface
5. the ``<Name>Type`` runtime instance class

Properties that the base ``Taxonomy.IContent`` contract already
declares are left out of the interface and the getters, but still
appear in the instance's property map.
"""

from __future__ import annotations

import logging
from collections.abc import Collection
from pathlib import Path

from episync.core.models.schema import PropertyDefinition, TypeDefinitionData
from episync.core.models.template import GeneratedFile, SourceBuilder
from episync.core.services.generators.naming import (
    check_name_collisions,
    field_name,
    instance_name,
    interface_name,
    props_name,
)
from episync.core.services.generators.type_mapping import (
    convert_property_type,
    is_type_reference,
)

logger = logging.getLogger(__name__)

MODEL_FILE_EXTENSION = ".ts"
SPA_CORE_IMPORT = "import { ContentDelivery, Taxonomy, ComponentTypes } from '@episerver/spa-core'"

# Fields declared by Taxonomy.IContent itself
RESERVED_FIELDS: frozenset[str] = frozenset({"contentLink"})

_NO_TYPE_DESCRIPTION = "No Description available."
_NO_PROPERTY_DESCRIPTION = "No description available"


def _ts_string(value: str, quote: str = '"') -> str:
    """Escape a value for use inside a quoted TypeScript string literal."""
    return value.replace("\\", "\\\\").replace(quote, "\\" + quote)


def _doc_block(title: str, description: str, indent: str = "", tags: list[str] | None = None) -> list[str]:
    """Build a JSDoc comment block as a list of lines."""
    body = [title, ""] + description.splitlines()
    for tag in tags or []:
        body += ["", tag]
    lines = [f"{indent}/**"]
    for line in body:
        line = line.replace("*/", "*\\/").rstrip()
        lines.append(f"{indent} * {line}" if line else f"{indent} *")
    lines.append(f"{indent} */")
    return lines


def _property_doc(prop: PropertyDefinition) -> list[str]:
    return _doc_block(
        prop.display_name or prop.name,
        prop.description or _NO_PROPERTY_DESCRIPTION,
        indent="    ",
    )


def visible_properties(info: TypeDefinitionData) -> list[PropertyDefinition]:
    """Properties that get an interface field and a getter."""
    return [p for p in info.properties if field_name(p.name) not in RESERVED_FIELDS]


def import_lines(info: TypeDefinitionData, known_types: Collection[str]) -> list[str]:
    """The fixed preamble plus one import per referenced content type."""
    lines = [SPA_CORE_IMPORT]
    seen: set[str] = set()
    for prop in visible_properties(info):
        if not is_type_reference(prop.type, known_types):
            continue
        if prop.type == info.name or prop.type in seen:
            continue
        seen.add(prop.type)
        ref = interface_name(prop.type)
        lines.append(f"import {ref} from './{ref}'")
    return lines


def header_lines(info: TypeDefinitionData) -> list[str]:
    return _doc_block(
        info.display_name or info.name,
        info.description or _NO_TYPE_DESCRIPTION,
        tags=[f"@GUID {info.guid}"],
    )


def interface_lines(info: TypeDefinitionData, known_types: Collection[str]) -> list[str]:
    data_name = interface_name(info.name)
    lines = [f"export default interface {data_name} extends Taxonomy.IContent {{"]
    for prop in visible_properties(info):
        lines += _property_doc(prop)
        lines.append(f"    {field_name(prop.name)}: {convert_property_type(prop.type, known_types)}")
        lines.append("")
    lines += ["}", ""]
    return lines


def props_lines(info: TypeDefinitionData) -> list[str]:
    data_name = interface_name(info.name)
    return [
        "/**",
        " * Convenience interface for componentDidUpdate & componentDidMount methods.",
        " */",
        f"export interface {props_name(info.name)} "
        f"extends ComponentTypes.AbstractComponentProps<{data_name}> {{}}",
        "",
    ]


def instance_lines(info: TypeDefinitionData) -> list[str]:
    data_name = interface_name(info.name)
    lines = [
        f"export class {instance_name(info.name)} "
        f"extends Taxonomy.AbstractIContent<{data_name}> implements {data_name} {{",
        f'    protected _typeName : string = "{_ts_string(info.name)}";',
        "    /**",
        "     * Map of all property types within this content type.",
        "     */",
        "    protected _propertyMap : { [propName: string]: string } = {",
    ]
    for prop in info.properties:
        key = _ts_string(field_name(prop.name), "'")
        tag = _ts_string(prop.type, "'")
        lines.append(f"        '{key}': '{tag}',")
    lines += ["    }", ""]
    for prop in visible_properties(info):
        name = field_name(prop.name)
        lines += _property_doc(prop)
        lines.append(
            f'    public get {name}() : {data_name}["{name}"] '
            f'{{ return this.getProperty("{name}"); }}'
        )
        lines.append("")
    lines.append("}")
    return lines


def build_model_source(info: TypeDefinitionData, known_types: Collection[str]) -> SourceBuilder:
    """Assemble all sections of a model file without joining them.

    Raises:
        NameCollisionError: If two properties map to the same field name.
    """
    check_name_collisions(
        (p.name for p in info.properties),
        derive=field_name,
        what=f"{info.name} field name",
        fold_case=False,
    )
    builder = SourceBuilder()
    builder.section("imports", import_lines(info, known_types))
    builder.section("header", header_lines(info))
    builder.section("interface", interface_lines(info, known_types))
    builder.section("props", props_lines(info))
    builder.section("instance", instance_lines(info))
    return builder


def generate_model_file(info: TypeDefinitionData, known_types: Collection[str]) -> GeneratedFile:
    """Generate the TypeScript model file for one content type.

    Args:
        info: Full type definition, properties in schema order.
        known_types: Every content type name seen in this run, used
            to resolve properties that reference other types.

    Returns:
        GeneratedFile named ``<Name>Data.ts``.
    """
    content = build_model_source(info, known_types).build()
    return GeneratedFile(
        path=interface_name(info.name) + MODEL_FILE_EXTENSION,
        content=content,
        reason=f"Model for content type {info.name} ({info.guid})",
    )


def write_generated_file(directory: Path, generated: GeneratedFile) -> Path:
    """Write a generated file into ``directory`` and return its path.

    Errors propagate; the sync job decides how to report them.
    """
    target = directory / generated.path
    target.write_text(generated.content, encoding="utf-8", newline="")
    logger.debug("Wrote %s (%d bytes)", target, len(generated.content))
    return target
