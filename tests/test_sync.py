"""
Tests for the granular locale sync engine.
"""

from __future__ import annotations

import asyncio
import threading
import time
from pathlib import Path

import pytest

import localizer.core.sync as sync_module
from localizer.core.store import LAYOUT_FLAT, LAYOUT_GROUPED
from localizer.core.sync import (
    SyncOptions,
    SyncResult,
    ensure_keys,
    infer_document_locale,
    run_sync,
    sync_file,
    sync_keys,
    target_locales,
)
from tests.conftest import read_json, write_json


def _translations(project: Path) -> Path:
    return project / "src" / "i18n" / "auto"


class TestSyncKeys:
    """Test cases for sync_keys()."""

    @pytest.mark.asyncio
    async def test_missing_key_is_copied_to_target(self, project: Path) -> None:
        root = _translations(project)
        result = await sync_keys(root, ["common.save"], SyncOptions(locales=["fr"]))

        assert result.updated_count == 1
        assert result.files == [str(root / "fr" / "common.json")]
        assert read_json(root / "fr" / "common.json") == {"common": {"cancel": "Annuler", "save": "Save"}}

    @pytest.mark.asyncio
    async def test_existing_target_values_are_kept(self, project: Path) -> None:
        root = _translations(project)
        result = await sync_keys(root, ["common"])

        assert result.updated_count == 2
        assert result.updated_keys == 3
        assert read_json(root / "fr" / "common.json")["common"]["cancel"] == "Annuler"
        assert read_json(root / "de" / "common.json") == {"common": {"cancel": "Cancel", "save": "Save"}}
        assert read_json(root / "en" / "common.json") == {"common": {"cancel": "Cancel", "save": "Save"}}

    @pytest.mark.asyncio
    async def test_overwrite_targets(self, project: Path) -> None:
        root = _translations(project)
        options = SyncOptions(locales=["fr"], overwrite_targets=True)
        result = await sync_keys(root, ["common"], options)

        assert result.updated_count == 1
        assert result.updated_keys == 2
        assert read_json(root / "fr" / "common.json")["common"]["cancel"] == "Cancel"

    @pytest.mark.asyncio
    async def test_absent_leaves_in_empty_target(self, project: Path) -> None:
        root = _translations(project)
        result = await sync_keys(root, ["common.save", "common.cancel"], SyncOptions(locales=["de"]))

        assert result.updated_count == 1
        assert result.updated_keys == 2
        assert result.files == [str(root / "de" / "common.json")]
        assert read_json(root / "de" / "common.json") == {"common": {"cancel": "Cancel", "save": "Save"}}

    @pytest.mark.asyncio
    async def test_blank_target_value_is_filled(self, project: Path) -> None:
        root = _translations(project)
        write_json(root / "de" / "common.json", {"common": {"save": "  "}})

        result = await sync_keys(root, ["common.save"], SyncOptions(locales=["de"]))

        assert result.updated_count == 1
        assert read_json(root / "de" / "common.json") == {"common": {"save": "Save"}}

    @pytest.mark.asyncio
    async def test_nothing_to_do_writes_nothing(self, project: Path) -> None:
        root = _translations(project)
        before = (root / "fr" / "common.json").read_text(encoding="utf-8")
        result = await sync_keys(root, ["common.cancel"], SyncOptions(locales=["fr"]))

        assert result.updated_count == 0
        assert result.files == []
        assert (root / "fr" / "common.json").read_text(encoding="utf-8") == before

    @pytest.mark.asyncio
    async def test_flat_layout(self, flat_root: Path) -> None:
        result = await sync_keys(flat_root, ["nav", "title"])

        assert result.updated_count == 1
        assert result.updated_keys == 2
        assert read_json(flat_root / "fr.json") == {
            "nav": {"about": "About us", "home": "Accueil"},
            "title": "Store",
        }

    @pytest.mark.asyncio
    async def test_malformed_target_is_treated_as_empty(self, project: Path) -> None:
        root = _translations(project)
        (root / "fr" / "common.json").write_text("{not json", encoding="utf-8")

        result = await sync_keys(root, ["common.save"], SyncOptions(locales=["fr"]))

        assert result.updated_count == 1
        assert read_json(root / "fr" / "common.json") == {"common": {"save": "Save"}}

    @pytest.mark.asyncio
    async def test_missing_base_document_is_skipped(self, project: Path) -> None:
        root = _translations(project)
        result = await sync_keys(root, ["Auth.form.title"])

        assert result.updated_count == 0
        assert not (root / "fr" / "auth.json").exists()

    @pytest.mark.asyncio
    async def test_empty_key_list(self, project: Path) -> None:
        result = await sync_keys(_translations(project), ["", "  "])
        assert result.to_dict() == {
            "updated_count": 0,
            "updated_keys": 0,
            "files": [],
            "failures": [],
            "cancelled": False,
        }


class TestCancellation:
    """Test cases for cooperative cancellation and timeouts."""

    @pytest.mark.asyncio
    async def test_cancel_before_any_write(self, project: Path) -> None:
        root = _translations(project)
        options = SyncOptions(should_cancel=lambda: True)
        result = await sync_keys(root, ["common.save"], options)

        assert result.cancelled
        assert result.files == []
        assert read_json(root / "de" / "common.json") == {}

    @pytest.mark.asyncio
    async def test_zero_timeout(self, project: Path) -> None:
        result = await sync_keys(_translations(project), ["common.save"], SyncOptions(timeout=0))

        assert result.cancelled
        assert result.updated_count == 0

    @pytest.mark.asyncio
    async def test_cancelled_ensure_skips_propagation(self, project: Path) -> None:
        root = _translations(project)
        result = await ensure_keys(root, ["common.title"], options=SyncOptions(should_cancel=lambda: True))

        assert result.cancelled
        assert "title" not in read_json(root / "en" / "common.json")["common"]


class TestWriteFailures:
    """Test cases for per-document failure isolation."""

    @pytest.mark.asyncio
    async def test_failed_write_does_not_stop_other_locales(
        self, project: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        root = _translations(project)
        real_write = sync_module.write_document

        def flaky_write(path, data) -> None:
            if Path(path).parent.name == "fr":
                raise OSError(13, "Permission denied")
            real_write(path, data)

        monkeypatch.setattr(sync_module, "write_document", flaky_write)
        result = await sync_keys(root, ["common.save"])

        assert result.updated_count == 1
        assert result.files == [str(root / "de" / "common.json")]
        assert len(result.failures) == 1
        assert result.failures[0]["path"] == str(root / "fr" / "common.json")
        assert "Permission denied" in result.failures[0]["error"]
        assert read_json(root / "fr" / "common.json") == {"common": {"cancel": "Annuler"}}


class TestConcurrentWrites:
    """Test cases for per-path serialization of read-modify-write cycles."""

    @staticmethod
    def _slow_writes(monkeypatch: pytest.MonkeyPatch) -> None:
        real_write = sync_module.write_document

        def slow_write(path, data) -> None:
            time.sleep(0.2)
            real_write(path, data)

        monkeypatch.setattr(sync_module, "write_document", slow_write)

    def test_threads_syncing_one_document(self, project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        root = _translations(project)
        self._slow_writes(monkeypatch)
        results = {}

        def run(key: str) -> None:
            results[key] = run_sync(sync_keys(root, [key], SyncOptions(locales=["de"])))

        threads = [threading.Thread(target=run, args=(key,)) for key in ("common.save", "common.cancel")]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=10)

        assert read_json(root / "de" / "common.json") == {"common": {"cancel": "Cancel", "save": "Save"}}
        assert results["common.save"].updated_count == 1
        assert results["common.cancel"].updated_count == 1

    @pytest.mark.asyncio
    async def test_gathered_syncs_on_one_document(self, project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        root = _translations(project)
        self._slow_writes(monkeypatch)
        options = SyncOptions(locales=["de"])

        results = await asyncio.gather(
            sync_keys(root, ["common.save"], options),
            sync_keys(root, ["common.cancel"], options),
        )

        assert [result.updated_count for result in results] == [1, 1]
        assert read_json(root / "de" / "common.json") == {"common": {"cancel": "Cancel", "save": "Save"}}

    @pytest.mark.asyncio
    async def test_ensure_and_sync_on_one_document(self, project: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        root = _translations(project)
        self._slow_writes(monkeypatch)
        options = SyncOptions(locales=["fr"])

        await asyncio.gather(
            ensure_keys(root, ["common.title"], {"common.title": "Welcome"}, options),
            sync_keys(root, ["common.save"], options),
        )

        assert read_json(root / "fr" / "common.json") == {
            "common": {"cancel": "Annuler", "save": "Save", "title": "Welcome"}
        }


class TestSyncFile:
    """Test cases for sync_file()."""

    @pytest.mark.asyncio
    async def test_base_document(self, project: Path) -> None:
        root = _translations(project)
        result = await sync_file(root, root / "en" / "common.json")

        assert result.updated_count == 2
        assert result.updated_keys == 3
        assert sorted(result.files) == [str(root / "de" / "common.json"), str(root / "fr" / "common.json")]

    @pytest.mark.asyncio
    async def test_non_base_document_is_ignored(self, project: Path) -> None:
        root = _translations(project)
        result = await sync_file(root, root / "fr" / "common.json")

        assert result.updated_count == 0
        assert read_json(root / "de" / "common.json") == {}

    @pytest.mark.asyncio
    async def test_nested_grouped_document(self, project: Path) -> None:
        root = _translations(project)
        base = write_json(root / "en" / "settings" / "profile.json", {"Settings": {"Profile": {"title": "Profile"}}})

        result = await sync_file(root, base, SyncOptions(locales=["fr"]))

        assert result.updated_count == 1
        assert read_json(root / "fr" / "settings" / "profile.json") == {"Settings": {"Profile": {"title": "Profile"}}}

    @pytest.mark.asyncio
    async def test_flat_document(self, flat_root: Path) -> None:
        result = await sync_file(flat_root, flat_root / "en.json")

        assert result.updated_count == 1
        assert result.updated_keys == 2
        assert read_json(flat_root / "fr.json")["title"] == "Store"


class TestEnsureKeys:
    """Test cases for ensure_keys()."""

    @pytest.mark.asyncio
    async def test_missing_key_gets_humanized_value(self, project: Path) -> None:
        root = _translations(project)
        result = await ensure_keys(root, ["common.saveChanges"])

        assert read_json(root / "en" / "common.json")["common"]["saveChanges"] == "Save changes"
        assert read_json(root / "fr" / "common.json")["common"]["saveChanges"] == "Save changes"
        assert result.updated_count == 3

    @pytest.mark.asyncio
    async def test_supplied_value(self, project: Path) -> None:
        root = _translations(project)
        await ensure_keys(root, ["common.title"], {"common.title": "Welcome"}, SyncOptions(locales=["de"]))

        assert read_json(root / "en" / "common.json")["common"]["title"] == "Welcome"
        assert read_json(root / "de" / "common.json") == {"common": {"title": "Welcome"}}

    @pytest.mark.asyncio
    async def test_existing_base_value_needs_force(self, project: Path) -> None:
        root = _translations(project)
        values = {"common.save": "Save now"}

        await ensure_keys(root, ["common.save"], values, SyncOptions(locales=["fr"]))
        assert read_json(root / "en" / "common.json")["common"]["save"] == "Save"

        await ensure_keys(root, ["common.save"], values, SyncOptions(locales=["fr"], force=True))
        assert read_json(root / "en" / "common.json")["common"]["save"] == "Save now"
        assert read_json(root / "fr" / "common.json")["common"]["save"] == "Save"


class TestHelpers:
    """Test cases for locale inference and options."""

    def test_infer_document_locale(self, tmp_path: Path) -> None:
        root = tmp_path / "i18n"

        assert infer_document_locale(root, root / "fr.json", LAYOUT_GROUPED) == ("fr", LAYOUT_FLAT, None)
        assert infer_document_locale(root, root / "en" / "auth" / "login.json", LAYOUT_GROUPED) == (
            "en",
            LAYOUT_GROUPED,
            "auth/login.json",
        )
        assert infer_document_locale(root, tmp_path / "elsewhere" / "de.json", LAYOUT_FLAT) == (
            "de",
            LAYOUT_FLAT,
            None,
        )

    def test_target_locales(self, project: Path) -> None:
        root = _translations(project)

        assert target_locales(root, SyncOptions()) == ["de", "fr"]
        assert target_locales(root, SyncOptions(locales=["fr", "en", "fr", "es"])) == ["fr", "es"]

    def test_options_from_config(self) -> None:
        config = {"base_locale": "de", "locales": ["en"], "sync_timeout": 5}
        options = SyncOptions.from_config(config, overwrite_targets=True, timeout=None)

        assert options.base_locale == "de"
        assert options.locales == ["en"]
        assert options.timeout == 5
        assert options.overwrite_targets

    def test_run_sync_from_sync_code(self, flat_root: Path) -> None:
        result = run_sync(sync_keys(flat_root, ["title"]))

        assert isinstance(result, SyncResult)
        assert str(result) == "SyncResult(updated=1, files=1, failed=0, cancelled=False)"
