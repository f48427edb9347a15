"""
Shared fixtures for localizer tests.

This module provides an isolated key registry database, a small project
tree with locale documents in the grouped layout, and a Flask test client
bound to that project.
"""

from __future__ import annotations

import json
from collections.abc import Generator
from pathlib import Path

import pytest

import localizer.core.database as db
from localizer.core.schema import initialize_database


def write_json(path: Path, data: object) -> Path:
    """Write a JSON document, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


def read_json(path: Path) -> object:
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture
def registry_db(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the key registry at a fresh database under tmp_path."""
    db_file = tmp_path / "registry" / "localizer.db"
    monkeypatch.setattr(db, "DB_FILE", db_file)
    initialize_database()
    return db_file


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """
    A project with a src/ root and grouped locale documents:

    src/i18n/auto/en/common.json, src/i18n/auto/fr/common.json,
    src/i18n/auto/de/common.json
    """
    root = tmp_path / "project"
    translations = root / "src" / "i18n" / "auto"
    write_json(translations / "en" / "common.json", {"common": {"save": "Save", "cancel": "Cancel"}})
    write_json(translations / "fr" / "common.json", {"common": {"cancel": "Annuler"}})
    write_json(translations / "de" / "common.json", {})
    (root / "src" / "components").mkdir(parents=True, exist_ok=True)
    return root


@pytest.fixture
def flat_root(tmp_path: Path) -> Path:
    """A translations root in the flat layout (en.json, fr.json)."""
    root = tmp_path / "locales"
    write_json(root / "en.json", {"nav": {"home": "Home", "about": "About us"}, "title": "Store"})
    write_json(root / "fr.json", {"nav": {"home": "Accueil"}})
    return root


@pytest.fixture
def app(project: Path, registry_db: Path) -> Generator:
    from localizer.web import create_app

    flask_app = create_app(project)
    flask_app.config["TESTING"] = True
    yield flask_app


@pytest.fixture
def client(app):
    return app.test_client()
