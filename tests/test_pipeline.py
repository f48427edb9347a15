"""
Tests for the batch extraction and rewrite pipeline.
"""

from __future__ import annotations

from pathlib import Path

from localizer.keys import KeyMap
from localizer.pipeline import assign_from_extraction, collect_source_files, extract_files, rewrite_files
from localizer.replacers import ReplaceOptions

SUMMARY = '<button>{"Click me"}</button>\n<p>{"Proceed to checkout"}</p>\n'


def _summary_file(project: Path) -> Path:
    path = project / "src" / "components" / "cart" / "Summary.jsx"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(SUMMARY, encoding="utf-8")
    return path


class TestCollectSourceFiles:
    """Test cases for collect_source_files()."""

    def test_skips_vendor_hidden_and_declarations(self, tmp_path: Path) -> None:
        src = tmp_path / "src"
        for name in (
            "components/App.tsx",
            "pages/Cart.vue",
            "types/env.d.ts",
            "node_modules/lib/index.js",
            ".cache/chunk.js",
            "styles.css",
        ):
            (src / name).parent.mkdir(parents=True, exist_ok=True)
            (src / name).write_text("", encoding="utf-8")

        assert collect_source_files(src) == [src / "components" / "App.tsx", src / "pages" / "Cart.vue"]
        assert collect_source_files(src, [".vue"]) == [src / "pages" / "Cart.vue"]
        assert collect_source_files(tmp_path / "missing") == []


class TestExtractFiles:
    """Test cases for extract_files() and key registration."""

    def test_namespaces_and_items(self, project: Path) -> None:
        path = _summary_file(project)
        batch = extract_files([path], project)

        namespace, result = batch.extractions[str(path)]
        assert namespace == "Cart.Summary"
        assert set(result.texts()) == {"Click me", "Proceed to checkout"}
        assert batch.ok

    def test_unreadable_file_is_recorded(self, project: Path) -> None:
        good = _summary_file(project)
        bad = project / "src" / "components" / "Broken.jsx"
        bad.write_bytes(b"\xff\xfe<div>\x80</div>")

        batch = extract_files([bad, good], project)

        assert list(batch.extractions) == [str(good)]
        assert [failure["path"] for failure in batch.failures] == [str(bad)]
        assert batch.to_dict()["failures"] == batch.failures

    def test_assign_from_extraction(self, project: Path, registry_db: Path) -> None:
        batch = extract_files([_summary_file(project)], project)

        assigned = assign_from_extraction(batch)

        assert set(assigned.values()) == {"Commons.text.click_me", "Cart.Summary.text.proceed_to_checkout"}
        assert assign_from_extraction(batch) == {}


class TestRewriteFiles:
    """Test cases for rewrite_files()."""

    KEY_MAP = KeyMap([(("Cart.Summary", "text", "Click me"), "cart.summary.click_me")])
    OPTIONS = ReplaceOptions(ensure_import=False)

    def test_rewrites_and_reports_misses(self, project: Path) -> None:
        path = _summary_file(project)
        batch = rewrite_files([path], self.KEY_MAP, project, self.OPTIONS)

        assert path.read_text(encoding="utf-8") == (
            "<button>{t('cart.summary.click_me')}</button>\n<p>{\"Proceed to checkout\"}</p>\n"
        )
        assert batch.changed_files == [str(path)]
        assert batch.change_count == 1
        assert batch.unresolved == {str(path): ["Proceed to checkout"]}

    def test_dry_run_leaves_files_alone(self, project: Path) -> None:
        path = _summary_file(project)
        batch = rewrite_files([path], self.KEY_MAP, project, self.OPTIONS, dry_run=True)

        assert path.read_text(encoding="utf-8") == SUMMARY
        assert batch.changed_files == [str(path)]

    def test_missing_file_is_recorded(self, project: Path) -> None:
        missing = project / "src" / "Gone.jsx"
        batch = rewrite_files([missing], self.KEY_MAP, project, self.OPTIONS)

        assert not batch.ok
        assert batch.failures[0]["path"] == str(missing)
