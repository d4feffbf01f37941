"""
TypeMapper generator — the registry of all generated models.

Produces ``TypeMapper.ts``: a ``Loaders.BaseTypeMapper`` subclass
with a ``map`` of content type name → ``{dataModel, instanceModel}``
and a table of lazy factories keyed by ``dataModel``.  ``doLoadType``
looks the factory up instead of building an import path at runtime;
a missing entry or a failed import resolves to ``null`` and is only
reported when the SPA runs in debug mode.
"""

from __future__ import annotations

from collections.abc import Sequence

from episync.core.models.template import GeneratedFile, SourceBuilder
from episync.core.services.generators.model_file import MODEL_FILE_EXTENSION
from episync.core.services.generators.naming import instance_name, interface_name

REGISTRY_NAME = "TypeMapper"
REGISTRY_FILE = REGISTRY_NAME + MODEL_FILE_EXTENSION


def _unique(names: Sequence[str]) -> list[str]:
    out: list[str] = []
    for name in names:
        if name not in out:
            out.append(name)
    return out


def map_lines(type_names: Sequence[str]) -> list[str]:
    lines = ["  protected map : { [type: string]: Loaders.TypeInfo } = {"]
    for name in _unique(type_names):
        key = name.replace("\\", "\\\\").replace("'", "\\'")
        lines.append(
            f"    '{key}': {{dataModel: '{interface_name(name)}',"
            f"instanceModel: '{instance_name(name)}'}},"
        )
    lines.append("  }")
    return lines


def factory_lines(type_names: Sequence[str]) -> list[str]:
    lines = [
        "  protected factories : { [dataModel: string]: () => Promise<Taxonomy.IContentType> } = {",
    ]
    for name in _unique(type_names):
        data_name = interface_name(name)
        lines.append(
            f"    '{data_name}': () => import("
            f"/* webpackChunkName: \"types\" */ './{data_name}')"
            f".then(m => m.{instance_name(name)}),"
        )
    lines.append("  }")
    return lines


def loader_lines() -> list[str]:
    return [
        "  protected async doLoadType(typeInfo: Loaders.TypeInfo) : Promise<Taxonomy.IContentType> {",
        "    const factory = this.factories[typeInfo.dataModel];",
        "    if (!factory) {",
        "      if (Core.DefaultContext.isDebugActive()) {",
        "        console.error(`No model registered for ${typeInfo.dataModel}`);",
        "      }",
        "      return null;",
        "    }",
        "    return factory().catch(reason => {",
        "      if (Core.DefaultContext.isDebugActive()) {",
        "        console.error(`Error while importing ${typeInfo.instanceModel} from ${typeInfo.dataModel} due to:`, reason);",
        "      }",
        "      return null;",
        "    });",
        "  }",
    ]


def generate_type_registry(type_names: Sequence[str]) -> GeneratedFile:
    """Generate ``TypeMapper.ts`` for all content types of a run.

    Args:
        type_names: Content type names in overview order.  Duplicates
            are listed once.
    """
    builder = SourceBuilder()
    builder.section("imports", ["import { Taxonomy, Core, Loaders } from '@episerver/spa-core';", ""])
    builder.section("open", [f"export default class {REGISTRY_NAME} extends Loaders.BaseTypeMapper {{"])
    builder.section("map", map_lines(type_names))
    builder.section("factories", factory_lines(type_names))
    builder.section("loader", loader_lines())
    builder.section("close", ["}"])
    return GeneratedFile(
        path=REGISTRY_FILE,
        content=builder.build(),
        reason=f"Type registry for {len(_unique(type_names))} content types",
    )
