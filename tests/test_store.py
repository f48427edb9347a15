"""
Tests for the locale store helpers.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from localizer.core.store import (
    LAYOUT_FLAT,
    LAYOUT_GROUPED,
    MISSING,
    detect_layout,
    discover_locales,
    document_for_key,
    flatten_leaves,
    get_key_path,
    has_key_path,
    is_missing_value,
    read_document,
    read_document_or_empty,
    read_locale_tree,
    set_key_path,
    write_document,
)
from localizer.exceptions import MalformedLocaleDocument
from tests.conftest import write_json


class TestKeyPaths:
    """Test cases for dotted key access."""

    def test_get_and_has(self) -> None:
        tree = {"auth": {"title": "Sign in"}}

        assert get_key_path(tree, "auth.title") == "Sign in"
        assert get_key_path(tree, "auth.missing", "fallback") == "fallback"
        assert has_key_path(tree, "auth")
        assert not has_key_path(tree, "auth.title.deeper")

    def test_absent_and_blank_values_are_missing(self) -> None:
        tree = {"common": {"save": "Save", "blank": "  ", "empty": ""}}

        assert is_missing_value(get_key_path(tree, "common.cancel", MISSING))
        assert is_missing_value(get_key_path(tree, "common.blank", MISSING))
        assert is_missing_value(get_key_path(tree, "common.empty", MISSING))
        assert not is_missing_value(get_key_path(tree, "common.save", MISSING))
        assert not is_missing_value(get_key_path(tree, "common", MISSING))

    def test_set_creates_and_replaces_intermediates(self) -> None:
        tree = {"auth": "flat value"}
        set_key_path(tree, "auth.form.title", "Sign in")

        assert tree == {"auth": {"form": {"title": "Sign in"}}}

    def test_set_rejects_empty_key(self) -> None:
        with pytest.raises(ValueError):
            set_key_path({}, "", "x")

    def test_flatten_leaves_keeps_strings_only(self) -> None:
        tree = {"a": {"b": "B", "c": {"d": "D"}}, "n": 3}
        assert flatten_leaves(tree) == {"a.b": "B", "a.c.d": "D"}


class TestDocuments:
    """Test cases for reading and writing locale documents."""

    def test_write_sorts_every_level(self, tmp_path: Path) -> None:
        path = tmp_path / "en.json"
        write_document(path, {"b": {"z": "1", "a": "2"}, "a": "3"})

        assert path.read_text(encoding="utf-8") == (
            '{\n  "a": "3",\n  "b": {\n    "a": "2",\n    "z": "1"\n  }\n}\n'
        )
        assert list(tmp_path.iterdir()) == [path]

    def test_write_keeps_unicode(self, tmp_path: Path) -> None:
        path = tmp_path / "fr.json"
        write_document(path, {"title": "Panier déjà vidé"})
        assert "déjà" in path.read_text(encoding="utf-8")

    def test_read_missing_and_empty(self, tmp_path: Path) -> None:
        assert read_document(tmp_path / "missing.json") == {}
        (tmp_path / "empty.json").write_text("  \n", encoding="utf-8")
        assert read_document(tmp_path / "empty.json") == {}

    @pytest.mark.parametrize("raw", ["{not json", "[1, 2]"])
    def test_malformed_document(self, tmp_path: Path, raw: str) -> None:
        path = tmp_path / "bad.json"
        path.write_text(raw, encoding="utf-8")

        with pytest.raises(MalformedLocaleDocument) as excinfo:
            read_document(path)
        assert excinfo.value.code == "malformed_document"
        assert read_document_or_empty(path) == {}


class TestLayout:
    """Test cases for layout detection and document routing."""

    def test_detect_layout(self, tmp_path: Path) -> None:
        write_json(tmp_path / "en.json", {})
        assert detect_layout(tmp_path, "en") == LAYOUT_FLAT

        (tmp_path / "en").mkdir()
        assert detect_layout(tmp_path, "en") == LAYOUT_GROUPED

    def test_discover_locales(self, tmp_path: Path) -> None:
        write_json(tmp_path / "en.json", {})
        write_json(tmp_path / "fr.json", {})
        (tmp_path / "de").mkdir()
        (tmp_path / ".cache").mkdir()
        (tmp_path / "notes.txt").write_text("x", encoding="utf-8")

        assert discover_locales(tmp_path, "en") == ["de", "fr"]
        assert discover_locales(tmp_path / "missing", "en") == []

    def test_document_for_key(self, tmp_path: Path) -> None:
        write_json(tmp_path / "en" / "Auth.json", {})
        (tmp_path / "en" / "settings").mkdir(parents=True)

        assert document_for_key(tmp_path, "en", "Auth.form.title") == "Auth.json"
        assert document_for_key(tmp_path, "en", "Settings.Profile.title") == "settings/profile.json"
        assert document_for_key(tmp_path, "en", "Settings.title") == "settings.json"
        assert document_for_key(tmp_path, "en", "Checkout.total") == "checkout.json"
        assert document_for_key(tmp_path, "en", "title") == "common.json"

    def test_read_locale_tree_grouped(self, tmp_path: Path) -> None:
        write_json(tmp_path / "en" / "auth.json", {"auth": {"title": "Sign in"}})
        write_json(tmp_path / "en" / "common.json", {"common": {"save": "Save"}})

        assert read_locale_tree(tmp_path, "en") == {
            "auth": {"title": "Sign in"},
            "common": {"save": "Save"},
        }

    def test_read_locale_tree_flat(self, flat_root: Path) -> None:
        assert read_locale_tree(flat_root, "fr", "en") == {"nav": {"home": "Accueil"}}
