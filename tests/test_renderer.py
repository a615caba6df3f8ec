"""Tests for glob expansion and materialization (vue_scaffold.renderer).

Covers:
- expand_globs: ordered include/exclude, hidden files, directories, flattening
- destination naming for template files
- materialize: rendering, byte-for-byte copies, overwrite handling, errors
"""

from __future__ import annotations

from pathlib import Path

import pytest

from vue_scaffold.renderer import (
    RenderError,
    destination_name,
    destination_path,
    expand_globs,
    materialize,
)

BINARY = bytes(range(256))


@pytest.fixture
def assets(tmp_path: Path) -> Path:
    """A small asset directory with a `templates/` tree."""
    root = tmp_path / "assets"
    tpl = root / "templates"
    (tpl / "src" / "__tests__").mkdir(parents=True)
    (tpl / "src" / "router").mkdir()
    (tpl / "public").mkdir()
    (tpl / "src" / "main.js.j2").write_text("const ts = {{ 'yes' if needs_typescript else 'no' }}\n")
    (tpl / "src" / "__tests__" / "a.spec.js.j2").write_text("test\n")
    (tpl / "src" / "router" / "index.js.j2").write_text("router\n")
    (tpl / "package.json.j2").write_text('{"name": "{{ project_name }}"}\n')
    (tpl / ".gitignore").write_text("node_modules\n")
    (tpl / "public" / "favicon.ico").write_bytes(BINARY)
    return root


# ---------------------------------------------------------------------------
# expand_globs
# ---------------------------------------------------------------------------


class TestExpandGlobs:
    def test_directory_pattern_includes_files_below(self, assets):
        assert expand_globs(["templates/src/"], assets) == [
            "templates/src/__tests__/a.spec.js.j2",
            "templates/src/main.js.j2",
            "templates/src/router/index.js.j2",
        ]

    def test_hidden_files_match(self, assets):
        assert "templates/.gitignore" in expand_globs(["templates/*"], assets)

    def test_negation_removes_previous_matches(self, assets):
        paths = expand_globs(["templates/src/", "!templates/src/__tests__/"], assets)
        assert "templates/src/__tests__/a.spec.js.j2" not in paths
        assert "templates/src/main.js.j2" in paths

    def test_later_include_restores(self, assets):
        paths = expand_globs(["templates/src/", "!templates/src/router/", "templates/src/router/"], assets)
        assert "templates/src/router/index.js.j2" in paths

    def test_wildcards(self, assets):
        assert expand_globs(["templates/**/*.ico"], assets) == ["templates/public/favicon.ico"]

    def test_nested_and_falsy_entries(self, assets):
        paths = expand_globs([["templates/.gitignore", None], "", ["templates/package.json.j2"]], assets)
        assert paths == ["templates/.gitignore", "templates/package.json.j2"]

    def test_no_match(self, assets):
        assert expand_globs(["templates/missing/"], assets) == []


# ---------------------------------------------------------------------------
# Naming
# ---------------------------------------------------------------------------


class TestDestinationName:
    @pytest.mark.parametrize(
        ("name", "suffix", "expected"),
        [
            ("main.js.j2", ".ts", "main.ts"),
            ("main.js.j2", ".js", "main.js"),
            ("example.cy.js.j2", ".ts", "example.cy.ts"),
            ("index.j2", ".ts", "index.ts"),
            ("index.j2", ".js", "index.js"),
            ("package.json.j2", ".ts", "package.json"),
            ("App.vue.j2", ".ts", "App.vue"),
            (".eslintrc.cjs.j2", ".ts", ".eslintrc.cjs"),
        ],
    )
    def test_rewrite(self, name, suffix, expected):
        assert destination_name(name, suffix) == expected

    def test_destination_path_strips_template_root(self, tmp_path):
        assert destination_path("templates/src/main.js.j2", tmp_path, ".ts") == tmp_path / "src" / "main.ts"
        assert destination_path("templates/public/favicon.ico", tmp_path, ".ts") == tmp_path / "public" / "favicon.ico"


# ---------------------------------------------------------------------------
# materialize
# ---------------------------------------------------------------------------


class TestMaterialize:
    def _run(self, assets, target, **overrides):
        kwargs = dict(
            globs=["templates/*", "templates/src/", "templates/public/"],
            asset_dir=assets,
            target_dir=target,
            context={"project_name": "demo", "needs_typescript": True},
            project_name="demo",
        )
        kwargs.update(overrides)
        return materialize(**kwargs)

    def test_renders_and_copies(self, assets, tmp_path):
        result = self._run(assets, tmp_path / "out")
        project = tmp_path / "out" / "demo"

        assert result.project_dir == project.resolve()
        assert (project / "src" / "main.ts").read_text() == "const ts = yes\n"
        assert (project / "package.json").read_text() == '{"name": "demo"}\n'
        assert (project / ".gitignore").read_text() == "node_modules\n"
        assert result.rendered_files == 4
        assert result.copied_files == 2

    def test_copies_are_byte_identical(self, assets, tmp_path):
        self._run(assets, tmp_path / "out")
        assert (tmp_path / "out" / "demo" / "public" / "favicon.ico").read_bytes() == BINARY

    def test_untyped_suffix(self, assets, tmp_path):
        self._run(assets, tmp_path / "out", context={"project_name": "demo", "needs_typescript": False})
        project = tmp_path / "out" / "demo"
        assert (project / "src" / "main.js").read_text() == "const ts = no\n"
        assert not (project / "src" / "main.ts").exists()

    def test_overwrite_empties_target(self, assets, tmp_path):
        target = tmp_path / "out"
        (target / "old").mkdir(parents=True)
        (target / "old" / "stale.txt").write_text("stale")

        self._run(assets, target, overwrite=True)

        assert not (target / "old").exists()
        assert (target / "demo" / "src" / "main.ts").exists()

    def test_without_overwrite_existing_files_stay(self, assets, tmp_path):
        target = tmp_path / "out"
        target.mkdir()
        (target / "stale.txt").write_text("stale")

        self._run(assets, target, overwrite=False)

        assert (target / "stale.txt").read_text() == "stale"

    def test_render_error_names_file(self, assets, tmp_path):
        with pytest.raises(RenderError, match="package.json.j2"):
            self._run(assets, tmp_path / "out", context={"needs_typescript": False})

    def test_missing_asset_dir(self, tmp_path):
        with pytest.raises(RenderError, match="Asset directory"):
            self._run(tmp_path / "nope", tmp_path / "out")
