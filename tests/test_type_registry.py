"""
Tests for the TypeMapper.ts generator.
"""

from episync.core.services.generators.type_registry import (
    REGISTRY_FILE,
    factory_lines,
    generate_type_registry,
    loader_lines,
    map_lines,
)


class TestMapLines:
    def test_entry_per_type(self):
        lines = map_lines(["ArticlePage", "TeaserBlock"])
        assert lines[0] == "  protected map : { [type: string]: Loaders.TypeInfo } = {"
        assert "    'ArticlePage': {dataModel: 'ArticlePageData',instanceModel: 'ArticlePageType'}," in lines
        assert "    'TeaserBlock': {dataModel: 'TeaserBlockData',instanceModel: 'TeaserBlockType'}," in lines
        assert lines[-1] == "  }"

    def test_key_keeps_original_name(self):
        lines = map_lines(["Hero Block"])
        assert "    'Hero Block': {dataModel: 'Hero_BlockData',instanceModel: 'Hero_BlockType'}," in lines

    def test_duplicates_listed_once(self):
        lines = map_lines(["A", "A", "B"])
        assert len(lines) == 4


class TestFactoryLines:
    def test_lazy_factory_per_model(self):
        lines = factory_lines(["ArticlePage"])
        assert any(
            "'ArticlePageData': () => import(" in l
            and "'./ArticlePageData')" in l
            and ".then(m => m.ArticlePageType)" in l
            for l in lines
        )

    def test_no_string_concatenated_import(self):
        text = "\n".join(factory_lines(["ArticlePage"]) + loader_lines())
        assert '"./" + typeInfo' not in text


class TestLoaderLines:
    def test_missing_type_resolves_to_null(self):
        text = "\n".join(loader_lines())
        assert "if (!factory) {" in text
        assert "return null;" in text

    def test_errors_only_logged_in_debug(self):
        text = "\n".join(loader_lines())
        assert text.count("Core.DefaultContext.isDebugActive()") == 2


class TestGenerateTypeRegistry:
    def test_file(self):
        result = generate_type_registry(["ArticlePage", "TeaserBlock"])
        assert result.path == REGISTRY_FILE == "TypeMapper.ts"
        content = result.content
        assert content.startswith("import { Taxonomy, Core, Loaders } from '@episerver/spa-core';\n\n")
        assert "export default class TypeMapper extends Loaders.BaseTypeMapper {" in content
        assert content.endswith("  }\n}\n")

    def test_order_follows_input(self):
        content = generate_type_registry(["Zeta", "Alpha"]).content
        assert content.index("'Zeta'") < content.index("'Alpha'")

    def test_empty(self):
        content = generate_type_registry([]).content
        assert "protected map : { [type: string]: Loaders.TypeInfo } = {\n  }" in content

    def test_deterministic(self):
        names = ["ArticlePage", "TeaserBlock"]
        assert generate_type_registry(names).content == generate_type_registry(list(names)).content
