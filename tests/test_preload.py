"""
Tests for the @PreLoad rewriter and the loader wrappers.
"""

from pathlib import Path

import pytest

from episync.core.errors import PreLoadCollisionError, PreLoadOptionsError
from episync.core.models.preload import PreLoadOptions
from episync.core.services.loaders import LoaderContext, empty_loader, get_loader, preload_loader
from episync.core.services.preload import (
    BLOCK_END,
    BLOCK_START,
    apply_preload,
    build_preload_block,
    declaration_lines,
    discover_modules,
    find_marker,
)

TS_OPTIONS = {"pattern": "*.ts", "extension": ".ts"}


@pytest.fixture
def components(tmp_path: Path) -> Path:
    """A component directory with one real module and one style file."""
    comp = tmp_path / "comp"
    comp.mkdir()
    (comp / "Foo.ts").write_text("export default 1;")
    (comp / "Bar.style.ts").write_text("export default {};")
    return tmp_path


def _touch(root: Path, *names: str) -> None:
    for name in names:
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("export default null;")


# ═══════════════════════════════════════════════════════════════════
#  Marker
# ═══════════════════════════════════════════════════════════════════


class TestFindMarker:
    def test_parses_arguments(self):
        marker = find_marker('a; @PreLoad("./components","Registry","app/Components/") b;')
        assert marker is not None
        assert marker.path == "./components"
        assert marker.variable == "Registry"
        assert marker.prefix == "app/Components/"
        assert marker.text == '@PreLoad("./components","Registry","app/Components/")'

    def test_absent(self):
        assert find_marker("const x = 1;") is None

    def test_first_occurrence_only(self):
        source = '@PreLoad("./a","A","p/")\n@PreLoad("./b","B","q/")'
        marker = find_marker(source)
        assert marker.variable == "A"
        assert marker.end < source.index('@PreLoad("./b"')


# ═══════════════════════════════════════════════════════════════════
#  Discovery
# ═══════════════════════════════════════════════════════════════════


class TestDiscoverModules:
    def test_auxiliary_files_skipped(self, tmp_path):
        _touch(tmp_path, "Card.tsx", "Card.stories.tsx", "Card.styles.tsx", "Card.style.tsx")
        options = PreLoadOptions(pattern="*.tsx", extension=".tsx")
        modules = discover_modules(tmp_path, "app/", options)
        assert [m.name for m in modules] == ["Card"]

    def test_hidden_files_skipped(self, tmp_path):
        _touch(tmp_path, "Card.tsx", ".Draft.tsx", ".cache/Old.tsx", "Blocks/.Hidden.tsx")
        options = PreLoadOptions(pattern="**/*.tsx", extension=".tsx")
        names = [m.name for m in discover_modules(tmp_path, "", options)]
        assert names == ["Card"]

    def test_nested_paths(self, tmp_path):
        _touch(tmp_path, "Header.tsx", "Blocks/Teaser.tsx", "Blocks/Media/Video.tsx")
        options = PreLoadOptions(pattern="**/*.tsx", extension=".tsx")
        modules = {m.name: m for m in discover_modules(tmp_path, "app/Components/", options)}

        assert modules["Header"].module_path == ""
        assert modules["Header"].specifier == "app/Components/Header"
        assert modules["Header"].binding == "Header"
        assert modules["Teaser"].specifier == "app/Components/Blocks/Teaser"
        assert modules["Teaser"].binding == "BlocksTeaser"
        assert modules["Video"].module_path == "Blocks/Media"
        assert modules["Video"].binding == "BlocksMediaVideo"

    def test_sorted_by_path(self, tmp_path):
        _touch(tmp_path, "Zed.tsx", "Alpha.tsx", "Mid.tsx")
        options = PreLoadOptions(pattern="*.tsx", extension=".tsx")
        names = [m.name for m in discover_modules(tmp_path, "", options)]
        assert names == ["Alpha", "Mid", "Zed"]

    def test_caller_exclude(self, tmp_path):
        _touch(tmp_path, "Card.tsx", "Card.test.tsx", "Sub/List.test.tsx")
        options = PreLoadOptions(pattern="**/*.tsx", extension=".tsx", exclude="**/*.test.tsx")
        names = [m.name for m in discover_modules(tmp_path, "", options)]
        assert names == ["Card"]

    def test_missing_directory(self, tmp_path):
        options = PreLoadOptions(**TS_OPTIONS)
        assert discover_modules(tmp_path / "nope", "", options) == []

    def test_binding_collision(self, tmp_path):
        _touch(tmp_path, "a/bC.tsx", "ab/C.tsx")
        options = PreLoadOptions(pattern="**/*.tsx", extension=".tsx")
        with pytest.raises(PreLoadCollisionError) as exc:
            discover_modules(tmp_path, "p/", options)
        assert exc.value.identifier == "abC"
        assert sorted(exc.value.names) == ["p/a/bC", "p/ab/C"]


# ═══════════════════════════════════════════════════════════════════
#  Block
# ═══════════════════════════════════════════════════════════════════


class TestBuildBlock:
    def test_declares_unqualified_variable(self):
        assert declaration_lines("Registry") == ["let Registry: { [module: string]: any } = {};"]

    def test_qualified_variable_not_declared(self):
        assert declaration_lines("Registry.items") == []

    def test_empty_block(self):
        block = build_preload_block("Registry", [])
        assert block == (
            f"{BLOCK_START}\n"
            "let Registry: { [module: string]: any } = {};\n"
            "try { Registry = Registry || {}; } catch (e) { Registry = {}; }\n"
            "\n"
            f"{BLOCK_END}\n"
        )


# ═══════════════════════════════════════════════════════════════════
#  apply_preload
# ═══════════════════════════════════════════════════════════════════


class TestApplyPreload:
    def test_end_to_end(self, components):
        source = 'const x = 1; @PreLoad("./comp","Registry.items","App/")'
        result = apply_preload(source, components, TS_OPTIONS)

        assert result == (
            "const x = 1; "
            f"{BLOCK_START}\n"
            "try { Registry.items = Registry.items || {}; } catch (e) { Registry.items = {}; }\n"
            "\n"
            "import Foo from 'App/Foo';\n"
            'Registry.items["App/Foo"] = Foo;\n'
            f"{BLOCK_END}\n"
        )
        assert "Bar" not in result
        assert "@PreLoad" not in result
        assert result.startswith("const x = 1; ")

    def test_no_matching_files(self, tmp_path):
        (tmp_path / "empty").mkdir()
        source = 'import React from "react";\n@PreLoad("./empty","Registry","App/")\nexport default 1;\n'
        result = apply_preload(source, tmp_path, TS_OPTIONS)

        assert "@PreLoad" not in result
        assert "let Registry: { [module: string]: any } = {};" in result
        assert "try { Registry = Registry || {}; } catch (e) { Registry = {}; }" in result
        assert "import " not in result.replace('import React from "react";', "")
        assert result.startswith('import React from "react";\n')
        assert result.endswith(f"{BLOCK_END}\n\nexport default 1;\n")

    def test_without_marker_returns_source(self, tmp_path):
        source = "export const nothing = true;\n"
        assert apply_preload(source, tmp_path, TS_OPTIONS) is source

    def test_only_first_marker_replaced(self, components):
        source = '@PreLoad("./comp","A","x/")\n@PreLoad("./comp","B","y/")\n'
        result = apply_preload(source, components, TS_OPTIONS)
        assert 'A["x/Foo"] = Foo;' in result
        assert '@PreLoad("./comp","B","y/")' in result

    def test_invalid_options_fail_before_scanning(self, tmp_path):
        with pytest.raises(PreLoadOptionsError):
            apply_preload("no marker here", tmp_path, {"pattern": "*.ts"})

    def test_invalid_option_type(self, tmp_path):
        with pytest.raises(PreLoadOptionsError):
            apply_preload("x", tmp_path, {"pattern": "*.ts", "extension": 3})

    def test_options_must_be_mapping(self, tmp_path):
        with pytest.raises(PreLoadOptionsError):
            apply_preload("x", tmp_path, ["*.ts", ".ts"])


# ═══════════════════════════════════════════════════════════════════
#  Loaders
# ═══════════════════════════════════════════════════════════════════


class TestLoaders:
    def test_preload_loader_uses_file_directory(self, components):
        entry = components / "index.ts"
        source = '@PreLoad("./comp","Registry","App/")'
        entry.write_text(source)
        ctx = LoaderContext.for_file(entry, TS_OPTIONS)

        result = preload_loader(source, ctx)
        assert ctx.context == components.resolve()
        assert "import Foo from 'App/Foo';" in result

    def test_preload_loader_validates_options(self, tmp_path):
        ctx = LoaderContext(context=tmp_path, options={})
        with pytest.raises(PreLoadOptionsError):
            preload_loader("anything", ctx)

    def test_empty_loader(self):
        assert empty_loader("console.log('big');") == ""

    def test_get_loader(self):
        assert get_loader("empty") is empty_loader
        with pytest.raises(KeyError):
            get_loader("missing")
